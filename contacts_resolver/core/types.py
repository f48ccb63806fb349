from typing import List, Dict, Tuple
from enum import Enum, IntEnum


class ValidationLevel(Enum):
    NONE = 0
    BASIC = 1
    STRICT = 2


class MatchStrength(IntEnum):
    """Confidence that two contacts denote the same entity"""

    NONE = 0
    WEAK = 1  # Same name only
    MEDIUM = 2  # Same name plus organization or birthday
    STRONG = 3  # Shared phone or email


class ImportAction(Enum):
    CREATED = "created"
    MERGED = "merged"
    SKIPPED = "skipped"
    INVALID = "invalid"


AddressKey = Tuple[str, str, str, str, str]
ValidationResults = Dict[str, List[str]]
PropertyList = List[Dict]
