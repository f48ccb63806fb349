from typing import List, Optional
import re
import unicodedata


def normalize_whitespace(text: str) -> str:
    """Normalize all whitespace to single spaces"""
    if not text:
        return ""
    return " ".join(text.split())


def remove_accents(text: str) -> str:
    """Remove combining diacritical marks from text"""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def extract_digits(text: str) -> str:
    """Keep only ASCII digits"""
    if not text:
        return ""
    return re.sub(r"[^0-9]", "", text)


def split_by_separators(text: str, separators: Optional[str] = None) -> List[str]:
    """Split text by multiple separators"""
    if not text:
        return []
    if separators is None:
        separators = r"[,;]+"
    return [part.strip() for part in re.split(separators, text) if part.strip()]


def truncate(text: str, limit: int) -> str:
    """Shorten text to limit characters, marking the cut with an ellipsis"""
    if len(text) > limit:
        return text[:limit] + "..."
    return text
