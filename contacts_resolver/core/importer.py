import logging
from typing import Iterable, List, Optional
from .contact import Contact
from .index import DedupIndex
from .merger import ContactMerger
from .types import ImportAction, ValidationLevel
from ..utils.validation import validate_contact, log_validation_results

logger = logging.getLogger(__name__)


class ImportOutcome:
    """What happened to one incoming contact"""

    def __init__(
        self,
        action: ImportAction,
        contact: Contact,
        target: Optional[Contact] = None,
        changed: bool = False,
    ):
        self.action = action
        self.contact = contact
        # The record the caller has to persist (new or updated), if any
        self.target = target
        self.changed = changed

    def __repr__(self):
        return f"ImportOutcome({self.action.value}, {self.contact.display_name!r})"


class ImportReport:
    def __init__(self):
        self.created: List[Contact] = []
        self.merged: List[Contact] = []
        self.skipped: List[Contact] = []
        self.invalid: List[Contact] = []
        self.entities: List[Contact] = []

    def record(self, outcome: ImportOutcome) -> None:
        if outcome.action == ImportAction.CREATED:
            self.created.append(outcome.contact)
        elif outcome.action == ImportAction.MERGED:
            if not any(c is outcome.target for c in self.merged):
                self.merged.append(outcome.target)
        elif outcome.action == ImportAction.SKIPPED:
            self.skipped.append(outcome.contact)
        else:
            self.invalid.append(outcome.contact)

    def summary(self) -> str:
        return (
            f"{len(self.created)} created, {len(self.merged)} updated by merge, "
            f"{len(self.skipped)} skipped as duplicates, {len(self.invalid)} invalid"
        )


class ContactImporter:
    """Runs incoming contacts through the index one at a time.

    New contacts are inserted into the index. Duplicates are merged into the
    first matching indexed contact when merging is enabled, otherwise
    skipped. Persisting created and updated records is up to the caller.
    """

    def __init__(
        self,
        existing: Optional[Iterable[Contact]] = None,
        merge: bool = True,
        validation_level: ValidationLevel = ValidationLevel.BASIC,
        index: Optional[DedupIndex] = None,
        merger: Optional[ContactMerger] = None,
    ):
        self.index = index or DedupIndex()
        self.merger = merger or ContactMerger(
            phone_processor=self.index.phone_processor,
            email_processor=self.index.email_processor,
        )
        self.merge_enabled = merge
        self.validation_level = validation_level

        for contact in existing or []:
            self.index.insert(contact)
        if len(self.index):
            logger.info(f"Indexed {len(self.index)} existing contacts")

    def import_contact(self, contact: Contact) -> ImportOutcome:
        """Classify one incoming contact and apply the result"""
        results = validate_contact(
            contact, self.validation_level, self.index.phone_processor
        )
        log_validation_results(results, logger)
        if results["errors"]:
            logger.warning(f"Not importing invalid contact {contact.display_name!r}")
            return ImportOutcome(ImportAction.INVALID, contact)

        candidates = self.index.find_candidates(contact)
        if not candidates:
            self.index.insert(contact)
            return ImportOutcome(ImportAction.CREATED, contact, target=contact, changed=True)

        target = candidates[0]
        if not self.merge_enabled:
            logger.info(f"Skipping duplicate {contact.display_name!r} of {target.display_name!r}")
            return ImportOutcome(ImportAction.SKIPPED, contact)

        if not self.merger.merge(target, contact):
            logger.info(f"Skipping duplicate {contact.display_name!r}: nothing new for {target.display_name!r}")
            return ImportOutcome(ImportAction.SKIPPED, contact, target=target)

        # Make keys learned from the merge searchable for later records
        self.index.insert(target)
        logger.info(f"Merged {contact.display_name!r} into {target.display_name!r}")
        return ImportOutcome(ImportAction.MERGED, contact, target=target, changed=True)

    def import_contacts(self, contacts: Iterable[Contact]) -> ImportReport:
        """Import a batch of contacts in order"""
        report = ImportReport()
        for contact in contacts:
            report.record(self.import_contact(contact))

        report.entities = self.index.contacts
        logger.info(f"Import finished: {report.summary()}")
        return report
