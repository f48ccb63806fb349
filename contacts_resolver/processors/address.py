from ..core.contact import Address
from ..core.types import AddressKey
from ..utils.string import normalize_whitespace


class AddressProcessor:
    """Handles address comparison keys and display"""

    def address_key(self, address: Address) -> AddressKey:
        """Case and whitespace insensitive key for an address"""
        return (
            self._clean_field(address.street),
            self._clean_field(address.city),
            self._clean_field(address.region),
            self._clean_field(address.postal_code),
            self._clean_field(address.country),
        )

    def format_address(self, address: Address) -> str:
        """Single line representation of an address"""
        if address is None:
            return ""
        return ", ".join(address.parts())

    @staticmethod
    def _clean_field(value: str) -> str:
        return normalize_whitespace(value).lower()
