import logging
from typing import Dict, Iterable, List, Optional
from .contact import Contact
from .matcher import ContactMatcher

logger = logging.getLogger(__name__)


class DedupIndex:
    """In-memory lookup of known contacts by phone, email and name keys.

    The index is append-only and holds references to contacts owned by the
    caller. It does no locking: use one index per import session.
    """

    def __init__(
        self,
        contacts: Optional[Iterable[Contact]] = None,
        matcher: Optional[ContactMatcher] = None,
    ):
        self.matcher = matcher or ContactMatcher()
        self.name_processor = self.matcher.name_processor
        self.phone_processor = self.matcher.phone_processor
        self.email_processor = self.matcher.email_processor

        self.by_phone: Dict[str, List[Contact]] = {}
        self.by_email: Dict[str, List[Contact]] = {}
        self.by_name: Dict[str, List[Contact]] = {}
        self._contacts: Dict[int, Contact] = {}

        for contact in contacts or []:
            self.insert(contact)

    def __len__(self) -> int:
        return len(self._contacts)

    @property
    def contacts(self) -> List[Contact]:
        """Distinct indexed contacts in insertion order"""
        return list(self._contacts.values())

    def insert(self, contact: Contact) -> None:
        """Index a contact under all of its keys"""
        for phone in contact.phones:
            key = self.phone_processor.normalize_phone(phone)
            if key:
                self._add(self.by_phone, key, contact)

        for email in contact.emails:
            key = self.email_processor.normalize_email(email)
            if key:
                self._add(self.by_email, key, contact)

        key = self.name_processor.get_index_key(contact)
        if key:
            self._add(self.by_name, key, contact)

        self._contacts.setdefault(id(contact), contact)

    def find_candidates(self, contact: Contact) -> List[Contact]:
        """Indexed contacts that are duplicates of the given contact"""
        seen = set()
        matches = []

        def add_match(candidate: Contact) -> None:
            if candidate is contact or id(candidate) in seen:
                return
            seen.add(id(candidate))
            matches.append(candidate)

        # Phone and email keys are strong evidence on their own
        for key in self.phone_processor.phone_keys(contact.phones):
            for candidate in self.by_phone.get(key, []):
                add_match(candidate)

        for key in self.email_processor.email_keys(contact.emails):
            for candidate in self.by_email.get(key, []):
                add_match(candidate)

        # A shared name needs the classifier's approval
        name_key = self.name_processor.get_match_key(contact)
        if name_key:
            for candidate in self.by_name.get(name_key, []):
                if candidate is contact or id(candidate) in seen:
                    continue
                if self.matcher.accepts_name_match(contact, candidate):
                    add_match(candidate)

        if matches:
            logger.debug(
                f"{contact.display_name!r} matches {len(matches)} indexed contact(s)"
            )
        return matches

    def is_duplicate(self, contact: Contact) -> bool:
        """Check if contact matches any indexed contact"""
        return len(self.find_candidates(contact)) > 0

    @staticmethod
    def _add(bucket_map: Dict[str, List[Contact]], key: str, contact: Contact) -> None:
        bucket = bucket_map.setdefault(key, [])
        # Re-inserting a merged contact only adds its new keys
        if not any(c is contact for c in bucket):
            bucket.append(contact)
