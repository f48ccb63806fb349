from typing import Dict
from ..core.contact import Contact
from ..settings import NAME_PREFIXES, NAME_SUFFIXES, UNNAMED_CONTACT
from ..utils.string import normalize_whitespace, remove_accents

UNNAMED_KEY = UNNAMED_CONTACT.lower()


def normalize_name(name: str) -> str:
    """Reduce a person name to its comparison key.

    Lowercases, drops combining accents (letters such as "ø" that do not
    decompose are kept), collapses whitespace, then strips at most one
    leading honorific and one trailing suffix. A prefix only counts when
    something follows it, so "Dr." on its own stays "dr.".
    """
    name = (name or "").lower()
    name = remove_accents(name)
    name = normalize_whitespace(name)

    for prefix in NAME_PREFIXES:
        if name.startswith(prefix + " "):
            name = name[len(prefix) + 1:]
            break

    for suffix in NAME_SUFFIXES:
        if name.endswith(" " + suffix):
            name = name[: -(len(suffix) + 1)]
            break

    return name.strip()


class NameProcessor:
    def __init__(self):
        self.name_cache: Dict[str, str] = {}

    def normalize_name(self, name: str) -> str:
        """Key for a single name"""
        if name in self.name_cache:
            return self.name_cache[name]

        key = normalize_name(name)
        self.name_cache[name] = key
        return key

    def get_contact_name(self, contact: Contact) -> str:
        """Get the best available name from a contact"""
        return contact.display_name

    def get_index_key(self, contact: Contact) -> str:
        """Name key of a contact's display name"""
        return self.normalize_name(self.get_contact_name(contact))

    def get_match_key(self, contact: Contact) -> str:
        """Name key usable for matching, "" for unnamed contacts"""
        key = self.get_index_key(contact)
        if key == UNNAMED_KEY:
            return ""
        return key
