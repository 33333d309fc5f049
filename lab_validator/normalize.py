"""
String normalization shared by both validators.

OCR output is noisy: mixed case, stray punctuation, underscores from
upstream field naming, and words that lose (or gain) their spaces
("SpecificGravity", "Specific  Gravity", "specific_gravity"). Everything
is reduced to one comparable form here, once, instead of each validator
carrying its own regexes.
"""

from __future__ import annotations

import re
from functools import lru_cache

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def normalize_text(text: str) -> str:
    """Lowercase and collapse every run of non-alphanumerics to a single space.

    Example:
        "Hemoglobin (HGB): 14.5 g/dL" → "hemoglobin hgb 14 5 g dl"
    """
    return _NON_ALNUM_RUN.sub(" ", text.lower()).strip()


def normalize_key(key: str) -> str:
    """Compact form of a field name: lowercase, every separator removed.

    Example:
        "Total_Cholesterol", "total cholesterol", "TOTAL-CHOLESTEROL" → "totalcholesterol"
    """
    return _NON_ALNUM_RUN.sub("", str(key).lower())


@lru_cache(maxsize=None)
def term_pattern(term: str) -> re.Pattern[str]:
    """Compile a dictionary term into a pattern over normalized text.

    A term may not continue a word on either side, so "ph" does not fire
    inside "phone" and "hb" does not fire inside "HbA1c". Digits are not
    word characters here: OCR glues values onto names ("WBC7.5", "pH6.0")
    and those still match. The spaces between the words of a term are
    optional, so "specific gravity" also matches OCR's "specificgravity".
    """
    tokens = normalize_text(term).split()
    if not tokens:
        raise ValueError(f"Term {term!r} has no alphanumeric content")
    body = " ?".join(re.escape(token) for token in tokens)
    return re.compile(rf"(?<![a-z]){body}(?![a-z])")


def contains_term(normalized_text: str, term: str) -> bool:
    """True if ``term`` occurs in text already passed through normalize_text()."""
    return term_pattern(term).search(normalized_text) is not None
