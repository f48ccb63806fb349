"""
Projection between Contact and the generic property list of a remote
object store. Each property is a dict with a "key" and one typed value
("text", "email", "phone", "url" or "date"). No network I/O happens here.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple
from ..core.contact import Contact, Address, first_address
from ..core.importer import ImportReport
from ..core.types import PropertyList
from ..settings import EMAIL_PROPERTY_KEYS, PHONE_PROPERTY_KEYS, UNNAMED_CONTACT

TEXT_PROPERTIES = {
    "name": "full_name",
    "given_name": "first_name",
    "family_name": "last_name",
    "middle_name": "middle_name",
    "prefix": "prefix",
    "suffix": "suffix",
    "organization": "organization",
    "title": "title",
    "notes": "note",
}

ADDRESS_PROPERTIES = {
    "address": "street",
    "city": "city",
    "region": "region",
    "postal_code": "postal_code",
    "country": "country",
}

BIRTHDAY_FORMATS = ("%Y%m%d", "%Y-%m-%d")

ADDITIONAL_EMAILS = "Additional emails: "
ADDITIONAL_URLS = "Additional URLs: "
NOTE_PARAGRAPH_SEPARATOR = "\n\n"
LIST_SEPARATOR = ", "


def contact_from_properties(object_id: str, name: str, properties: PropertyList) -> Contact:
    """Rebuild a Contact from a stored object's properties"""
    contact = Contact(object_id=object_id)
    address: Optional[Address] = None
    notes = ""

    for prop in properties:
        key = prop.get("key", "")

        if key == "notes":
            notes = prop.get("text") or ""
        elif key in TEXT_PROPERTIES:
            setattr(contact, TEXT_PROPERTIES[key], prop.get("text") or "")
        elif key == "birthday":
            contact.birthday = prop.get("date") or ""
        elif key in EMAIL_PROPERTY_KEYS:
            if prop.get("email"):
                contact.emails.append(prop["email"])
        elif key in PHONE_PROPERTY_KEYS:
            if prop.get("phone"):
                contact.phones.append(prop["phone"])
        elif key == "url":
            if prop.get("url"):
                contact.urls.append(prop["url"])
        elif key in ADDRESS_PROPERTIES:
            if prop.get("text"):
                if address is None:
                    address = Address()
                    contact.addresses.append(address)
                setattr(address, ADDRESS_PROPERTIES[key], prop["text"])

    # Overflow values are appended after the ones that had a slot
    contact.note, extra_emails, extra_urls = split_notes(notes)
    contact.emails.extend(extra_emails)
    contact.urls.extend(extra_urls)

    if not contact.full_name and name != UNNAMED_CONTACT:
        contact.full_name = name or ""
    return contact


def split_notes(notes: str) -> Tuple[str, List[str], List[str]]:
    """Separate the overflow paragraphs written by build_notes from the note"""
    paragraphs = []
    emails: List[str] = []
    urls: List[str] = []
    for paragraph in notes.split(NOTE_PARAGRAPH_SEPARATOR) if notes else []:
        if paragraph.startswith(ADDITIONAL_EMAILS):
            emails.extend(split_list(paragraph[len(ADDITIONAL_EMAILS):]))
        elif paragraph.startswith(ADDITIONAL_URLS):
            urls.extend(split_list(paragraph[len(ADDITIONAL_URLS):]))
        else:
            paragraphs.append(paragraph)
    return NOTE_PARAGRAPH_SEPARATOR.join(paragraphs), emails, urls


def split_list(text: str) -> List[str]:
    return [value.strip() for value in text.split(LIST_SEPARATOR.strip()) if value.strip()]


def parse_birthday(birthday: str) -> str:
    """Convert a compact or ISO date into a timestamp, else keep it as is"""
    for fmt in BIRTHDAY_FORMATS:
        try:
            return datetime.strptime(birthday, fmt).strftime("%Y-%m-%dT%H:%M:%SZ")
        except ValueError:
            continue
    return birthday


def build_notes(contact: Contact, email_slots: int = len(EMAIL_PROPERTY_KEYS)) -> str:
    """Note text including emails and URLs that have no property slot"""
    notes = []
    if contact.note:
        notes.append(contact.note)
    if len(contact.emails) > email_slots:
        notes.append(ADDITIONAL_EMAILS + LIST_SEPARATOR.join(contact.emails[email_slots:]))
    if len(contact.urls) > 1:
        notes.append(ADDITIONAL_URLS + LIST_SEPARATOR.join(contact.urls[1:]))
    return NOTE_PARAGRAPH_SEPARATOR.join(notes)


def contact_to_properties(
    contact: Contact,
    phone_keys: Sequence[str] = PHONE_PROPERTY_KEYS,
    email_keys: Sequence[str] = EMAIL_PROPERTY_KEYS,
) -> PropertyList:
    """Build the property list stored for a contact"""
    props: PropertyList = []

    def add_text(key: str, text: str) -> None:
        if text:
            props.append({"key": key, "text": text})

    name = contact.display_name
    if name != UNNAMED_CONTACT:
        add_text("name", name)

    add_text("given_name", contact.first_name)
    add_text("family_name", contact.last_name)
    add_text("middle_name", contact.middle_name)
    add_text("prefix", contact.prefix)
    add_text("suffix", contact.suffix)

    for key, email in zip(email_keys, contact.emails):
        props.append({"key": key, "email": email})

    for key, phone in zip(phone_keys, contact.phones):
        props.append({"key": key, "phone": phone})

    address = first_address(contact)
    if address is not None:
        for key, attr in ADDRESS_PROPERTIES.items():
            add_text(key, getattr(address, attr))

    add_text("organization", contact.organization)
    add_text("title", contact.title)

    if contact.urls:
        props.append({"key": "url", "url": contact.urls[0]})

    add_text("notes", build_notes(contact, len(email_keys)))

    if contact.birthday:
        props.append({"key": "birthday", "date": parse_birthday(contact.birthday)})

    return props


def build_operations(report: ImportReport) -> List[Dict]:
    """Object store operations needed to persist an import"""
    operations = []
    for contact in report.created:
        operations.append(
            {
                "action": "create",
                "name": contact.display_name,
                "properties": contact_to_properties(contact),
            }
        )

    # Records created in this batch are already covered by their create
    created = {id(c) for c in report.created}
    for contact in report.merged:
        if contact.object_id and id(contact) not in created:
            operations.append(
                {
                    "action": "update",
                    "object_id": contact.object_id,
                    "properties": contact_to_properties(contact),
                }
            )
    return operations
