# /app/services/language_classifier.py

"""
Fallback heuristics for timetable periods that predate structured electives.

Older timetable slots only carry a free-text subject name such as
"German Language" or "LANGUAGE". These helpers infer the language track from
that text. They are only consulted when a slot has no structured subject
attached, and they never guess: a name mentioning both languages, or only the
generic word "language", is reported as ambiguous.
"""

from typing import Iterable, Optional, TypeVar

from ..models.enums import Language

_GERMAN = "german"
_FRENCH = "french"
_GENERIC = "language"

T = TypeVar("T")


def is_language_period(subject_name: Optional[str]) -> bool:
    """True when the name mentions German, French or the generic word 'language'."""
    if not subject_name:
        return False
    lowered = subject_name.lower()
    return _GERMAN in lowered or _FRENCH in lowered or _GENERIC in lowered


def classify(subject_name: Optional[str]) -> Optional[Language]:
    """
    Returns the single language a period is for, or None when the name names
    both languages or neither.
    """
    if not subject_name:
        return None
    lowered = subject_name.lower()
    has_german = _GERMAN in lowered
    has_french = _FRENCH in lowered
    if has_german == has_french:
        return None
    return Language.GERMAN if has_german else Language.FRENCH


def needs_manual_selection(subject_name: Optional[str]) -> bool:
    """A language period whose language cannot be read off the name; the caller must pick a tab."""
    return is_language_period(subject_name) and classify(subject_name) is None


def parse_language(value: Optional[str]) -> Optional[Language]:
    """Accepts a direct 'GERMAN' / 'FRENCH' token in any case; anything else is None."""
    if not value:
        return None
    try:
        return Language(value.strip().upper())
    except ValueError:
        return None


def count_without_language(persons: Iterable[T]) -> int:
    return sum(1 for p in persons if not getattr(p, "preferred_language", None))
