import logging
from typing import Callable, Hashable, List, Optional, Tuple
from .contact import Contact
from ..processors.address import AddressProcessor
from ..processors.email import EmailProcessor
from ..processors.phone import PhoneProcessor
from ..settings import NOTE_MERGE_SEPARATOR

logger = logging.getLogger(__name__)

# Scalar fields filled in from the incoming record when empty
SCALAR_FIELDS = (
    "full_name",
    "first_name",
    "last_name",
    "middle_name",
    "prefix",
    "suffix",
    "organization",
    "title",
    "birthday",
    "photo",
)


def url_key(url: str) -> str:
    return url.strip().lower()


def raw_key(value: str) -> Tuple[str, str]:
    """Values without a usable key only collapse with identical text"""
    return ("raw", value.strip())


class ContactMerger:
    """Enriches an existing contact with data from a duplicate.

    The destination is treated as the authoritative record: its non-empty
    values are never overwritten, multi-valued fields only grow, and the
    source record is left untouched.
    """

    def __init__(
        self,
        phone_processor: Optional[PhoneProcessor] = None,
        email_processor: Optional[EmailProcessor] = None,
        address_processor: Optional[AddressProcessor] = None,
    ):
        self.phone_processor = phone_processor or PhoneProcessor()
        self.email_processor = email_processor or EmailProcessor()
        self.address_processor = address_processor or AddressProcessor()

    def merge(self, dst: Contact, src: Contact) -> bool:
        """Merge src into dst in place, returning True if dst changed"""
        changed = False

        for field in SCALAR_FIELDS:
            if not getattr(dst, field) and getattr(src, field):
                setattr(dst, field, getattr(src, field))
                changed = True

        changed |= self._merge_list(dst.emails, src.emails, self._email_key)
        changed |= self._merge_list(dst.phones, src.phones, self._phone_key)
        changed |= self._merge_list(dst.urls, src.urls, url_key)
        changed |= self._merge_list(dst.addresses, src.addresses, self.address_processor.address_key)

        changed |= self._merge_note(dst, src)

        if changed:
            logger.debug(f"Merged {src.display_name!r} into {dst.display_name!r}")
        return changed

    def _email_key(self, email: str) -> Hashable:
        return self.email_processor.normalize_email(email) or raw_key(email)

    def _phone_key(self, phone: str) -> Hashable:
        return self.phone_processor.normalize_phone(phone) or raw_key(phone)

    @staticmethod
    def _merge_list(target: List, incoming: List, key_func: Callable[..., Hashable]) -> bool:
        """Append incoming items whose key is not yet present in target"""
        present = {key_func(item) for item in target}
        changed = False
        for item in incoming:
            key = key_func(item)
            if key in present:
                continue
            target.append(item)
            present.add(key)
            changed = True
        return changed

    @staticmethod
    def _merge_note(dst: Contact, src: Contact) -> bool:
        if not src.note or src.note == dst.note:
            return False

        if not dst.note:
            dst.note = src.note
        else:
            dst.note = dst.note + NOTE_MERGE_SEPARATOR + src.note
        return True
