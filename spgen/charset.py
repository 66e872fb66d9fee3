"""
Charset pool builder: turns a CharsetConfig into the alphabet that
generation draws from.
"""

from __future__ import annotations

from enum import Enum

from .config import (
    CHARSET_AMBIGUOUS,
    CHARSET_LOWERCASE,
    CHARSET_NUMBERS,
    CHARSET_SPECIAL,
    CHARSET_UPPERCASE,
    CharsetConfig,
)
from .errors import ConfigurationError
from .secure import SecureBuffer


class CharCategory(Enum):
    # Declaration order is the pool order and the repair order.
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    NUMBERS = "numbers"
    SPECIAL = "special"


CATEGORY_ALPHABETS: dict[CharCategory, str] = {
    CharCategory.LOWERCASE: CHARSET_LOWERCASE,
    CharCategory.UPPERCASE: CHARSET_UPPERCASE,
    CharCategory.NUMBERS: CHARSET_NUMBERS,
    CharCategory.SPECIAL: CHARSET_SPECIAL,
}


def selected_categories(charset: CharsetConfig) -> list[CharCategory]:
    """Selected categories, in pool order."""
    flags = {
        CharCategory.LOWERCASE: charset.lowercase,
        CharCategory.UPPERCASE: charset.uppercase,
        CharCategory.NUMBERS: charset.numbers,
        CharCategory.SPECIAL: charset.special,
    }
    return [category for category in CharCategory if flags[category]]


def category_alphabet(category: CharCategory, avoid_ambiguous: bool = False) -> str:
    """
    The sub-alphabet for one category, without l/I/1/O/0 if requested.
    """
    alphabet = CATEGORY_ALPHABETS[category]
    if avoid_ambiguous:
        alphabet = "".join(c for c in alphabet if c not in CHARSET_AMBIGUOUS)
    return alphabet


def category_of(char: str) -> CharCategory | None:
    """Which category alphabet `char` belongs to, or None."""
    for category, alphabet in CATEGORY_ALPHABETS.items():
        if char in alphabet:
            return category
    return None


def build_charset_pool(charset: CharsetConfig) -> SecureBuffer:
    """
    Concatenate the selected category alphabets, then drop the ambiguous
    characters if asked to.

    The caller owns the returned buffer and must wipe it. Raises
    ConfigurationError when nothing is left to draw from.
    """
    pool = SecureBuffer()
    try:
        for category in selected_categories(charset):
            pool.extend(CATEGORY_ALPHABETS[category])

        if charset.avoid_ambiguous and len(pool) > 0:
            filtered = SecureBuffer(c for c in pool if c not in CHARSET_AMBIGUOUS)
            pool.wipe()
            pool = filtered
    except BaseException:
        pool.wipe()
        raise

    if len(pool) == 0:
        pool.wipe()
        raise ConfigurationError("No character set selected.")

    return pool


def effective_pool_size(charset: CharsetConfig) -> int:
    """
    Pool size for the entropy model, summed per selected category with the
    ambiguous characters of that category subtracted.
    """
    return sum(
        len(category_alphabet(category, charset.avoid_ambiguous))
        for category in selected_categories(charset)
    )
