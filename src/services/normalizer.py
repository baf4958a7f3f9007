"""Answer normalization.

Maps a translated answer to its canonical stored form according to a
fixed policy per field category. Pure functions, no I/O.
"""

import unicodedata
from enum import StrEnum


class FieldCategory(StrEnum):
    """Normalization policy applied to a field."""

    proper_noun = "proper_noun"
    numeric = "numeric"
    free_text = "free_text"


FIELD_CATEGORIES: dict[str, FieldCategory] = {
    "name": FieldCategory.proper_noun,
    "location": FieldCategory.proper_noun,
    "age": FieldCategory.numeric,
}


def category_for(field_key: str) -> FieldCategory:
    """Return the category of a field key; unknown keys are free text."""
    return FIELD_CATEGORIES.get(field_key, FieldCategory.free_text)


def _capitalize(word: str) -> str:
    head = word[:1]
    upper = head.upper()
    # Characters that expand when uppercased ("ß" -> "SS") stay as they are
    if len(upper) != 1:
        upper = head
    return upper + word[1:].lower()


def _capitalize_words(text: str) -> str:
    # Split on single spaces so repeated spaces survive as empty tokens
    return " ".join(_capitalize(word) for word in text.split(" "))


def _digits_only(text: str) -> str:
    # Any script's decimal digits count, emitted as ASCII
    digits = (unicodedata.decimal(ch, None) for ch in text)
    return "".join(str(d) for d in digits if d is not None)


def normalize(text: str, category: FieldCategory) -> str:
    """Format an answer for storage.

    Args:
        text: Answer text, usually already translated to English.
        category: Policy to apply.

    Returns:
        Proper nouns are trimmed and capitalized per word, numeric answers
        keep only their digits, free text is trimmed.
    """
    trimmed = text.strip()
    if category == FieldCategory.proper_noun:
        return _capitalize_words(trimmed)
    if category == FieldCategory.numeric:
        return _digits_only(trimmed)
    return trimmed

