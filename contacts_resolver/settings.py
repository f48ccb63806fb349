"""
Configuration settings for the contacts resolver.
Matching constants are fixed; operational options can be overridden
from the environment or a .env file.
"""

import os

from dotenv import load_dotenv

load_dotenv()

###################
# Matching Constants
###################

# Phone keys keep the last N digits so country/trunk prefixes collapse
PHONE_KEY_LENGTH: int = 9

# Numbers shorter than this carry no usable key
PHONE_MIN_DIGITS: int = 6

# Leading honorifics stripped from name keys (one at most)
NAME_PREFIXES = ("dr", "dr.", "mr", "mr.", "mrs", "mrs.", "ms", "ms.", "prof", "prof.")

# Trailing generational/credential tokens stripped from name keys (one at most)
NAME_SUFFIXES = ("jr", "jr.", "sr", "sr.", "ii", "iii", "iv", "phd", "md")

# Display name of a contact without any name or organization
UNNAMED_CONTACT: str = "Unnamed Contact"

# A contact is "minimal" with no emails, no addresses and at most this many phones
MINIMAL_MAX_PHONES: int = 3

# Inserted between two different notes when merging
NOTE_MERGE_SEPARATOR: str = "\n\n--- merged ---\n\n"

###################
# Object Store Projection
###################

PHONE_PROPERTY_KEYS = ("phone", "phone2", "phone3")
EMAIL_PROPERTY_KEYS = ("email", "email2", "email3")

###################
# Processing Options
###################

LOG_LEVEL: str = os.getenv("CONTACTS_RESOLVER_LOG_LEVEL", "INFO").upper()

# Default encoding for reading and writing contact files
DEFAULT_ENCODING: str = os.getenv("CONTACTS_RESOLVER_ENCODING", "utf-8")

# Region assumed when validating numbers without a country code
DEFAULT_REGION: str = os.getenv("CONTACTS_RESOLVER_DEFAULT_REGION", "US")

DEFAULT_OUTPUT_DIR: str = os.getenv("CONTACTS_RESOLVER_OUTPUT_DIR", "output")
