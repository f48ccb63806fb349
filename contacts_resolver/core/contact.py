from typing import List, Dict, Optional
from ..settings import UNNAMED_CONTACT


class Address:
    def __init__(self, street="", city="", region="", postal_code="", country=""):
        self.street = street
        self.city = city
        self.region = region
        self.postal_code = postal_code
        self.country = country

    @classmethod
    def from_dict(cls, data: Dict) -> "Address":
        """Create an Address from a dictionary with vCard-style keys"""
        return cls(
            street=data.get("street", "") or "",
            city=data.get("city", data.get("locality", "")) or "",
            region=data.get("region", "") or "",
            postal_code=data.get("postal_code", "") or "",
            country=data.get("country", "") or "",
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "street": self.street,
            "city": self.city,
            "region": self.region,
            "postal_code": self.postal_code,
            "country": self.country,
        }

    def parts(self) -> List[str]:
        """Non-empty address components in display order"""
        return [
            p
            for p in (self.street, self.city, self.region, self.postal_code, self.country)
            if p
        ]

    def __eq__(self, other):
        if not isinstance(other, Address):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Address({', '.join(self.parts())!r})"


class Contact:
    """A contact record as handed over by a decoder or an object store"""

    def __init__(
        self,
        full_name="",
        first_name="",
        last_name="",
        middle_name="",
        prefix="",
        suffix="",
        emails=None,
        phones=None,
        addresses=None,
        organization="",
        title="",
        urls=None,
        note="",
        birthday="",
        photo="",
        object_id="",
    ):
        self.full_name = full_name
        self.first_name = first_name
        self.last_name = last_name
        self.middle_name = middle_name
        self.prefix = prefix
        self.suffix = suffix
        self.emails: List[str] = emails if emails is not None else []
        self.phones: List[str] = phones if phones is not None else []
        self.addresses: List[Address] = addresses if addresses is not None else []
        self.organization = organization
        self.title = title
        self.urls: List[str] = urls if urls is not None else []
        self.note = note
        self.birthday = birthday
        self.photo = photo
        # Identifier in an external store, never used for matching
        self.object_id = object_id

    @property
    def display_name(self) -> str:
        """Best available name for the contact"""
        if self.full_name:
            return self.full_name

        parts = [
            p
            for p in (self.prefix, self.first_name, self.middle_name, self.last_name, self.suffix)
            if p
        ]
        if parts:
            return " ".join(parts)

        if self.organization:
            return self.organization

        return UNNAMED_CONTACT

    @classmethod
    def from_dict(cls, data: Dict) -> "Contact":
        """Create a Contact instance from a dictionary"""
        return cls(
            full_name=data.get("Full Name", ""),
            first_name=data.get("FirstName", ""),
            last_name=data.get("LastName", ""),
            middle_name=data.get("MiddleName", ""),
            prefix=data.get("Prefix", ""),
            suffix=data.get("Suffix", ""),
            emails=list(data.get("Email", [])),
            phones=list(data.get("Telephone", [])),
            addresses=[
                a if isinstance(a, Address) else Address.from_dict(a)
                for a in data.get("Address", [])
            ],
            organization=data.get("Organization", ""),
            title=data.get("Title", ""),
            urls=list(data.get("URL", [])),
            note=data.get("Note", ""),
            birthday=data.get("Birthday", ""),
            photo=data.get("Photo", ""),
            object_id=data.get("ObjectID", ""),
        )

    def to_dict(self) -> Dict:
        """Convert contact to dictionary with standardized field names"""
        return {
            "Full Name": self.full_name,
            "FirstName": self.first_name,
            "LastName": self.last_name,
            "MiddleName": self.middle_name,
            "Prefix": self.prefix,
            "Suffix": self.suffix,
            "Email": list(self.emails),
            "Telephone": list(self.phones),
            "Address": [a.to_dict() for a in self.addresses],
            "Organization": self.organization,
            "Title": self.title,
            "URL": list(self.urls),
            "Note": self.note,
            "Birthday": self.birthday,
            "Photo": self.photo,
            "ObjectID": self.object_id,
        }

    def __repr__(self):
        return f"Contact({self.display_name!r})"


def first_address(contact: Contact) -> Optional[Address]:
    return contact.addresses[0] if contact.addresses else None
