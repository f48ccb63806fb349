from typing import Dict, List

GMAIL_DOMAIN = "gmail.com"
GMAIL_ALIASES = {"googlemail.com"}


def normalize_email(email: str) -> str:
    """Reduce an email address to its comparison key.

    Case and surrounding whitespace are ignored and plus-addressing is
    stripped. googlemail.com is folded into gmail.com, and for Gmail only
    the dots in the local part are dropped. Anything that is not a single
    local@domain pair is returned lowercased and otherwise untouched.
    """
    email = (email or "").strip().lower()

    if email.count("@") != 1:
        return email

    local, domain = email.split("@")

    # user+tag@domain -> user@domain, even when nothing is left of the user
    local = local.split("+", 1)[0]

    if domain in GMAIL_ALIASES:
        domain = GMAIL_DOMAIN

    if domain == GMAIL_DOMAIN:
        local = local.replace(".", "")

    return f"{local}@{domain}"


class EmailProcessor:
    """Handles email address keys"""

    def __init__(self):
        self._key_cache: Dict[str, str] = {}

    def normalize_email(self, email: str) -> str:
        """Key for a single email address"""
        if email in self._key_cache:
            return self._key_cache[email]

        key = normalize_email(email)
        self._key_cache[email] = key
        return key

    def email_keys(self, emails: List[str]) -> List[str]:
        """Usable keys for a list of emails, in order and without repeats"""
        keys = []
        seen = set()
        for email in emails:
            key = self.normalize_email(email)
            if key and key not in seen:
                seen.add(key)
                keys.append(key)
        return keys

    def any_emails_match(self, emails1: List[str], emails2: List[str]) -> bool:
        """Check if any email addresses match between two lists"""
        if not emails1 or not emails2:
            return False
        return bool(set(self.email_keys(emails1)) & set(self.email_keys(emails2)))
