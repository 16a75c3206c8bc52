"""
Scoring Utilities
waitlist/scoring/utils.py

Total (never-raising) helpers for reading loosely-typed survey answers.
"""

from typing import Any, Iterable, Mapping, Optional, Set


def clamp(value: int, min_val: int = 0, max_val: int = 100) -> int:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def normalize_choice(value: Any) -> Optional[str]:
    """
    Normalise a categorical answer for table lookup.

    Strings are trimmed and lower-cased; anything else (None, numbers, lists)
    is treated as no answer.
    """
    if not isinstance(value, str):
        return None
    cleaned = value.strip().lower()
    return cleaned or None


def distinct_items(value: Any) -> Set[str]:
    """
    Distinct, normalised members of a multi-select answer.

    A bare string is not a collection here: it counts as zero items rather
    than one item per character.
    """
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return set()
    items = set()
    for item in value:
        cleaned = normalize_choice(item)
        if cleaned:
            items.add(cleaned)
    return items


def first_present(answers: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """Value of the first key present in answers, or None."""
    for key in keys:
        if key in answers and answers[key] is not None:
            return answers[key]
    return None
