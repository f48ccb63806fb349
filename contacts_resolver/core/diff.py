from typing import Dict, List, Optional
from .contact import Contact, first_address
from ..processors.address import AddressProcessor
from ..processors.name import NameProcessor
from ..utils.string import truncate

NOTE_PREVIEW_LENGTH = 30

SCALAR_DIFF_FIELDS = [
    ("GivenName", "first_name"),
    ("FamilyName", "last_name"),
    ("MiddleName", "middle_name"),
    ("Prefix", "prefix"),
    ("Suffix", "suffix"),
    ("Organization", "organization"),
    ("Title", "title"),
    ("Birthday", "birthday"),
]

LIST_DIFF_FIELDS = [
    ("Phones", "phones"),
    ("Emails", "emails"),
    ("URLs", "urls"),
]


def group_by_name(
    contacts: List[Contact],
    name_filter: str = "",
    name_processor: Optional[NameProcessor] = None,
) -> Dict[str, List[Contact]]:
    """Group contacts sharing a normalized display name.

    The filter is normalized like the names and matched as a substring.
    Only groups with more than one member are returned, sorted by key.
    """
    name_processor = name_processor or NameProcessor()
    normalized_filter = name_processor.normalize_name(name_filter) if name_filter else ""

    groups: Dict[str, List[Contact]] = {}
    for contact in contacts:
        key = name_processor.get_index_key(contact)
        if normalized_filter and normalized_filter not in key:
            continue
        groups.setdefault(key, []).append(contact)

    return {key: groups[key] for key in sorted(groups) if len(groups[key]) > 1}


def describe_contact(
    contact: Contact, address_processor: Optional[AddressProcessor] = None
) -> List[str]:
    """Human readable summary lines for one contact"""
    address_processor = address_processor or AddressProcessor()
    lines = []

    if contact.first_name or contact.last_name:
        lines.append(f"Name: {contact.first_name} {contact.last_name}".rstrip())
    if contact.organization:
        lines.append(f"Organization: {contact.organization}")
    if contact.title:
        lines.append(f"Title: {contact.title}")
    lines.extend(f"Phone {i}: {phone}" for i, phone in enumerate(contact.phones, start=1))
    lines.extend(f"Email {i}: {email}" for i, email in enumerate(contact.emails, start=1))

    address = address_processor.format_address(first_address(contact))
    if address:
        lines.append(f"Address: {address}")

    lines.extend(f"URL {i}: {url}" for i, url in enumerate(contact.urls, start=1))
    if contact.birthday:
        lines.append(f"Birthday: {contact.birthday}")
    if contact.note:
        lines.append(f"Note: {truncate(contact.note, 50)}")
    return lines


def diff_field(name: str, a: str, b: str) -> List[str]:
    if a == b:
        return []
    if not a:
        return [f"{name}: (empty) → {b!r}"]
    if not b:
        return [f"{name}: {a!r} → (empty)"]
    return [f"{name}: {a!r} → {b!r}"]


def diff_list(name: str, a: List[str], b: List[str]) -> List[str]:
    lines = [f"{name}: -{v}" for v in a if v not in b]
    lines.extend(f"{name}: +{v}" for v in b if v not in a)
    return lines


def contact_differences(
    a: Contact, b: Contact, address_processor: Optional[AddressProcessor] = None
) -> List[str]:
    """Field by field differences going from a to b"""
    address_processor = address_processor or AddressProcessor()
    lines = []

    for label, field in SCALAR_DIFF_FIELDS:
        lines.extend(diff_field(label, getattr(a, field), getattr(b, field)))

    for label, field in LIST_DIFF_FIELDS:
        lines.extend(diff_list(label, getattr(a, field), getattr(b, field)))

    lines.extend(
        diff_field(
            "Address",
            address_processor.format_address(first_address(a)),
            address_processor.format_address(first_address(b)),
        )
    )
    lines.extend(
        diff_field(
            "Note",
            truncate(a.note, NOTE_PREVIEW_LENGTH),
            truncate(b.note, NOTE_PREVIEW_LENGTH),
        )
    )
    return lines
