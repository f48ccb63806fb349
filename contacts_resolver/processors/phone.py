from typing import Dict, List
from phonenumbers import parse, NumberParseException
import phonenumbers
from ..settings import DEFAULT_REGION, PHONE_KEY_LENGTH, PHONE_MIN_DIGITS
from ..utils.string import extract_digits


def normalize_phone(phone: str) -> str:
    """Reduce a phone number to its comparison key.

    Only ASCII digits are kept. Long numbers collapse to their last
    PHONE_KEY_LENGTH digits so that "+1-555-123-4567" and "555-123-4567"
    share a key. This is a suffix heuristic, not an E.164 parse: two
    foreign numbers ending in the same digits get the same key.

    Short local/extension numbers are kept as-is, and anything under
    PHONE_MIN_DIGITS digits returns "" which never matches anything.
    """
    digits = extract_digits(phone)

    if len(digits) >= PHONE_KEY_LENGTH:
        return digits[-PHONE_KEY_LENGTH:]

    if len(digits) >= PHONE_MIN_DIGITS:
        return digits

    return ""


class PhoneProcessor:
    """Handles phone number keys and validation"""

    def __init__(self, default_region: str = DEFAULT_REGION):
        self.default_region = default_region
        self._key_cache: Dict[str, str] = {}

    def normalize_phone(self, phone: str) -> str:
        """Key for a single phone number"""
        if not phone:
            return ""

        if phone in self._key_cache:
            return self._key_cache[phone]

        key = normalize_phone(phone)
        self._key_cache[phone] = key
        return key

    def phone_keys(self, phones: List[str]) -> List[str]:
        """Usable keys for a list of phones, in order and without repeats"""
        keys = []
        seen = set()
        for phone in phones:
            key = self.normalize_phone(phone)
            if key and key not in seen:
                seen.add(key)
                keys.append(key)
        return keys

    def are_phones_matching(self, phone1: str, phone2: str) -> bool:
        """Check if two phone numbers share a usable key"""
        key1 = self.normalize_phone(phone1)
        return bool(key1) and key1 == self.normalize_phone(phone2)

    def any_phones_match(self, phones1: List[str], phones2: List[str]) -> bool:
        """Check if any phone numbers match between two lists"""
        if not phones1 or not phones2:
            return False
        return bool(set(self.phone_keys(phones1)) & set(self.phone_keys(phones2)))

    def is_possible_phone(self, phone: str) -> bool:
        """Check if a phone number parses as a possible number"""
        try:
            number = parse(phone, self.default_region)
        except NumberParseException:
            return False
        return phonenumbers.is_possible_number(number)
