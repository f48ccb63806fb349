import csv
from typing import List, Dict, Optional
from ..core.contact import Contact, Address
from ..settings import DEFAULT_ENCODING
from ..utils.string import split_by_separators

MULTI_VALUE_SEPARATOR = "; "


class CSVHandler:
    """Handles reading and writing contacts in CSV format"""

    # Common CSV field mappings
    DEFAULT_FIELD_MAP = {
        "Full Name": ["Full Name", "Name", "DisplayName", "Display Name"],
        "FirstName": ["First Name", "FirstName", "Given Name"],
        "MiddleName": ["Middle Name", "MiddleName", "Additional Name"],
        "LastName": ["Last Name", "LastName", "Family Name"],
        "Prefix": ["Prefix", "Name Prefix", "Title Prefix"],
        "Suffix": ["Suffix", "Name Suffix"],
        "Organization": ["Organization", "Company", "Business"],
        "Title": ["Title", "Job Title"],
        "Email": ["Email", "E-mail", "E-mail Address", "E-mail 1", "Primary Email"],
        "Telephone": ["Phone", "Telephone", "Primary Phone", "Mobile", "Cell"],
        "URL": ["URL", "Website", "Web Page"],
        "Birthday": ["Birthday", "Date of Birth"],
        "Note": ["Note", "Notes"],
        "Street": ["Street", "Address", "Home Street"],
        "City": ["City", "Locality", "Home City"],
        "Region": ["Region", "State", "Home State"],
        "PostalCode": ["Postal Code", "PostalCode", "ZIP", "Zip Code"],
        "Country": ["Country", "Home Country"],
        "ObjectID": ["ObjectID", "Object ID", "ID"],
    }

    MULTI_VALUE_FIELDS = {"Email", "Telephone", "URL"}
    ADDRESS_FIELDS = {
        "Street": "street",
        "City": "city",
        "Region": "region",
        "PostalCode": "postal_code",
        "Country": "country",
    }

    def __init__(self, field_map: Optional[Dict] = None, encoding: str = DEFAULT_ENCODING):
        self.field_map = field_map or self.DEFAULT_FIELD_MAP
        self.encoding = encoding

    def read_csv(self, filepath: str) -> List[Contact]:
        """Read contacts from CSV file"""
        contacts = []
        with open(filepath, "r", encoding=self.encoding, newline="") as csvfile:
            reader = csv.DictReader(csvfile)
            headers = self._normalize_headers(reader.fieldnames or [])

            for row in reader:
                normalized_row = self._normalize_row(row, headers)
                contacts.append(self._row_to_contact(normalized_row))

        return contacts

    def write_csv(self, contacts: List[Contact], filepath: str) -> None:
        """Write contacts to CSV file, one row per contact"""
        fieldnames = list(self.DEFAULT_FIELD_MAP.keys())

        with open(filepath, "w", encoding=self.encoding, newline="") as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()
            for contact in contacts:
                writer.writerow(self._contact_to_row(contact))

    def _normalize_headers(self, headers: List[str]) -> Dict[str, str]:
        """Map CSV headers to standardized field names"""
        header_map = {}
        for header in headers:
            normalized = None
            for std_field, variations in self.field_map.items():
                if header in variations or header == std_field:
                    normalized = std_field
                    break
            header_map[header] = normalized or header
        return header_map

    def _normalize_row(self, row: Dict, header_map: Dict) -> Dict:
        """Convert CSV row to standardized format"""
        normalized = {}
        for original_header, value in row.items():
            if original_header is None or not value:
                continue
            normalized_header = header_map[original_header]
            if normalized_header in self.MULTI_VALUE_FIELDS:
                normalized[normalized_header] = split_by_separators(value)
            else:
                normalized[normalized_header] = value.strip()
        return normalized

    def _row_to_contact(self, row: Dict) -> Contact:
        contact = Contact.from_dict(row)
        address = Address(
            **{attr: row.get(field, "") for field, attr in self.ADDRESS_FIELDS.items()}
        )
        if address.parts():
            contact.addresses.append(address)
        return contact

    def _contact_to_row(self, contact: Contact) -> Dict:
        data = contact.to_dict()
        row = {
            field: data.get(field, "")
            for field in self.DEFAULT_FIELD_MAP
            if field not in self.ADDRESS_FIELDS
        }
        for field in self.MULTI_VALUE_FIELDS:
            row[field] = MULTI_VALUE_SEPARATOR.join(data[field])

        # CSV rows carry a single address
        if contact.addresses:
            address = contact.addresses[0]
            for field, attr in self.ADDRESS_FIELDS.items():
                row[field] = getattr(address, attr)
        return row
