import logging
from typing import Optional
from .contact import Contact
from .types import MatchStrength
from ..processors.email import EmailProcessor
from ..processors.name import NameProcessor
from ..processors.phone import PhoneProcessor
from ..settings import MINIMAL_MAX_PHONES

logger = logging.getLogger(__name__)


class ContactMatcher:
    """Decides whether two contacts denote the same person.

    Phone and email keys are strong evidence on their own. A shared name is
    only trusted when it is backed by overlapping contact data, or when one
    of the two records is too sparse to contradict the other (see
    is_minimal). Two richly detailed records sharing a common name are kept
    apart.
    """

    def __init__(
        self,
        name_processor: Optional[NameProcessor] = None,
        phone_processor: Optional[PhoneProcessor] = None,
        email_processor: Optional[EmailProcessor] = None,
    ):
        self.name_processor = name_processor or NameProcessor()
        self.phone_processor = phone_processor or PhoneProcessor()
        self.email_processor = email_processor or EmailProcessor()

    def is_minimal(self, contact: Contact) -> bool:
        """No emails, no addresses and at most MINIMAL_MAX_PHONES phones"""
        return (
            not contact.emails
            and not contact.addresses
            and len(contact.phones) <= MINIMAL_MAX_PHONES
        )

    def has_any_overlap(self, contact1: Contact, contact2: Contact) -> bool:
        """Check if two contacts share any usable phone or email key"""
        return self.phone_processor.any_phones_match(
            contact1.phones, contact2.phones
        ) or self.email_processor.any_emails_match(contact1.emails, contact2.emails)

    def accepts_name_match(self, contact: Contact, candidate: Contact) -> bool:
        """Decide on a candidate found only through an identical name key"""
        if self.has_any_overlap(contact, candidate):
            return True

        if self.is_minimal(contact) or self.is_minimal(candidate):
            logger.debug(
                f"Accepting name-only match {contact.display_name!r} ~ "
                f"{candidate.display_name!r}: minimal record"
            )
            return True

        logger.debug(
            f"Rejecting name-only match {contact.display_name!r} ~ "
            f"{candidate.display_name!r}: no corroborating data"
        )
        return False

    def is_duplicate(self, contact1: Contact, contact2: Contact) -> bool:
        """Pairwise form of the duplicate rules applied by DedupIndex"""
        if not contact1 or not contact2:
            return False

        if self.has_any_overlap(contact1, contact2):
            return True

        name1 = self.name_processor.get_match_key(contact1)
        if not name1 or name1 != self.name_processor.get_match_key(contact2):
            return False

        return self.accepts_name_match(contact1, contact2)

    def compare(self, contact1: Contact, contact2: Contact) -> MatchStrength:
        """Graded confidence that two contacts are the same entity"""
        if self.phone_processor.any_phones_match(contact1.phones, contact2.phones):
            return MatchStrength.STRONG

        if self.email_processor.any_emails_match(contact1.emails, contact2.emails):
            return MatchStrength.STRONG

        name1 = self.name_processor.get_match_key(contact1)
        name2 = self.name_processor.get_match_key(contact2)

        # Unnamed contacts never match on name alone
        if not name1 or name1 != name2:
            return MatchStrength.NONE

        if contact1.organization and contact1.organization == contact2.organization:
            return MatchStrength.MEDIUM

        if contact1.birthday and contact1.birthday == contact2.birthday:
            return MatchStrength.MEDIUM

        return MatchStrength.WEAK


def compare_contacts(contact1: Contact, contact2: Contact) -> MatchStrength:
    return ContactMatcher().compare(contact1, contact2)
