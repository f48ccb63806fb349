from typing import List, Optional
import logging
import vobject
from ..core.contact import Contact, Address
from ..settings import DEFAULT_ENCODING

logger = logging.getLogger(__name__)


class VCardHandler:
    """Handles reading and writing contacts in vCard format"""

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding

    def read_vcard(self, filepath: str) -> List[Contact]:
        """Read contacts from vCard file"""
        with open(filepath, "r", encoding=self.encoding) as f:
            return self.parse_vcards(f.read())

    def parse_vcards(self, text: str) -> List[Contact]:
        """Parse every card in a vCard document"""
        contacts = []
        for vcard in vobject.readComponents(text):
            contacts.append(self._parse_vcard(vcard))
        logger.debug(f"Parsed {len(contacts)} vCards")
        return contacts

    def write_vcard(self, contacts: List[Contact], filepath: str) -> None:
        """Write contacts to vCard file"""
        with open(filepath, "w", encoding=self.encoding) as f:
            f.write(self.serialize(contacts))

    def serialize(self, contacts: List[Contact]) -> str:
        return "".join(self._create_vcard(contact).serialize() for contact in contacts)

    def _parse_vcard(self, vcard: vobject.base.Component) -> Contact:
        """Convert vCard to Contact without any normalization"""
        contact = Contact(
            full_name=self._get_vcard_value(vcard, "fn"),
            organization=self._get_vcard_value(vcard, "org"),
            title=self._get_vcard_value(vcard, "title"),
            note=self._get_vcard_value(vcard, "note"),
            birthday=self._get_vcard_value(vcard, "bday"),
            photo=self._get_photo(vcard),
            emails=self._get_vcard_values(vcard, "email", "mailto:"),
            phones=self._get_vcard_values(vcard, "tel", "tel:"),
            urls=self._get_vcard_values(vcard, "url"),
            object_id=self._get_vcard_value(vcard, "uid"),
        )

        # Handle structured name
        if hasattr(vcard, "n") and vcard.n.value:
            name = vcard.n.value
            contact.last_name = _join(name.family)
            contact.first_name = _join(name.given)
            contact.middle_name = _join(name.additional)
            contact.prefix = _join(name.prefix)
            contact.suffix = _join(name.suffix)

        # Handle addresses
        if hasattr(vcard, "adr"):
            for adr in vcard.adr_list:
                address = self._parse_vcard_address(adr)
                if address:
                    contact.addresses.append(address)

        return contact

    def _create_vcard(self, contact: Contact) -> vobject.base.Component:
        """Convert contact to vCard object"""
        vcard = vobject.vCard()

        self._add_vcard_field(vcard, "fn", contact.display_name)
        vcard.add("n").value = vobject.vcard.Name(
            family=contact.last_name,
            given=contact.first_name,
            additional=contact.middle_name,
            prefix=contact.prefix,
            suffix=contact.suffix,
        )

        if contact.organization:
            vcard.add("org").value = [contact.organization]

        self._add_vcard_field(vcard, "title", contact.title)
        self._add_vcard_field(vcard, "bday", contact.birthday)
        self._add_vcard_field(vcard, "note", contact.note)
        self._add_vcard_field(vcard, "uid", contact.object_id)

        for email in contact.emails:
            self._add_vcard_field(vcard, "email", email)

        for phone in contact.phones:
            self._add_vcard_field(vcard, "tel", phone)

        for url in contact.urls:
            self._add_vcard_field(vcard, "url", url)

        for address in contact.addresses:
            vcard.add("adr").value = vobject.vcard.Address(
                street=address.street,
                city=address.city,
                region=address.region,
                code=address.postal_code,
                country=address.country,
            )

        # Only photo references survive a round trip, not embedded images
        if "://" in contact.photo:
            photo = vcard.add("photo")
            photo.value = contact.photo
            photo.value_param = "URI"

        return vcard

    @staticmethod
    def _get_vcard_value(vcard: vobject.base.Component, field: str) -> str:
        """Safely get single value from vCard field"""
        if hasattr(vcard, field):
            return _join(getattr(vcard, field).value, ", ")
        return ""

    @staticmethod
    def _get_vcard_values(vcard: vobject.base.Component, field: str, trim_prefix: str = "") -> List[str]:
        """Safely get multiple values from vCard field"""
        values = []
        if hasattr(vcard, field):
            for line in getattr(vcard, f"{field}_list"):
                value = _join(line.value).strip()
                if trim_prefix and value.lower().startswith(trim_prefix):
                    value = value[len(trim_prefix):]
                if value:
                    values.append(value)
        return values

    @staticmethod
    def _get_photo(vcard: vobject.base.Component) -> str:
        if hasattr(vcard, "photo") and isinstance(vcard.photo.value, str):
            return vcard.photo.value.strip()
        return ""

    @staticmethod
    def _parse_vcard_address(adr) -> Optional[Address]:
        """Parse vCard address into an Address"""
        if not adr.value:
            return None

        value = adr.value
        street = _join(value.street) or _join(value.extended)
        address = Address(
            street=street,
            city=_join(value.city),
            region=_join(value.region),
            postal_code=_join(value.code),
            country=_join(value.country),
        )
        return address if address.parts() else None

    @staticmethod
    def _add_vcard_field(vcard: vobject.base.Component, field: str, value: str) -> None:
        """Add field to vCard"""
        if value:
            vcard.add(field).value = value


def _join(value, separator: str = " ") -> str:
    """vobject returns lists for repeated components"""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return separator.join(str(v) for v in value if v)
    return str(value)
