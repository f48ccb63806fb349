from typing import Optional
import re
import logging
from ..core.contact import Contact
from ..core.types import ValidationLevel, ValidationResults
from ..processors.name import NameProcessor, UNNAMED_KEY
from ..processors.phone import PhoneProcessor


def validate_email(email: str) -> bool:
    """Validate email format"""
    if not email:
        return False

    # Basic email regex pattern
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email.strip()))


def validate_contact(
    contact: Contact,
    level: ValidationLevel = ValidationLevel.BASIC,
    phone_processor: Optional[PhoneProcessor] = None,
) -> ValidationResults:
    """Check a contact for data that will not take part in matching.

    Nothing here blocks matching; at STRICT level malformed emails and
    phones too short to key are reported as errors instead of warnings.
    """
    validation_results: ValidationResults = {"errors": [], "warnings": []}

    if level == ValidationLevel.NONE:
        return validation_results

    phone_processor = phone_processor or PhoneProcessor()
    strict = validation_results["errors" if level == ValidationLevel.STRICT else "warnings"]

    if NameProcessor().get_index_key(contact) == UNNAMED_KEY:
        validation_results["warnings"].append("Contact has no name or organization")

    for email in contact.emails:
        if not validate_email(email):
            strict.append(f"Invalid email format: {email}")

    for phone in contact.phones:
        if not phone_processor.normalize_phone(phone):
            strict.append(f"Phone too short to match: {phone}")
        elif not phone_processor.is_possible_phone(phone):
            validation_results["warnings"].append(f"Suspicious phone format: {phone}")

    return validation_results


def log_validation_results(
    results: ValidationResults, logger: Optional[logging.Logger] = None
) -> None:
    """Log validation results with appropriate severity"""
    if logger is None:
        logger = logging.getLogger(__name__)

    for error in results["errors"]:
        logger.error(f"Validation error: {error}")

    for warning in results["warnings"]:
        logger.warning(f"Validation warning: {warning}")
