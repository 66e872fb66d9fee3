"""
Security assessment engine.

Scores any password string, whatever produced it. Everything here is a
pure function of the password and the read-only tables below.

The entropy estimate in this module infers the pool from the classes the
password actually contains. It does not know the generation settings, so it
deliberately differs from generator.calculate_entropy().
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

from .config import GPU_GUESSES_PER_SECOND, MIN_PASSWORD_LENGTH


class StrengthCategory(IntEnum):
    VERY_WEAK = 0
    WEAK = 1
    FAIR = 2
    GOOD = 3
    STRONG = 4
    VERY_STRONG = 5

    @classmethod
    def from_score(cls, score: int) -> "StrengthCategory":
        """score // 20, clamped to the enum range."""
        return cls(max(0, min(score // 20, cls.VERY_STRONG)))

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    StrengthCategory.VERY_WEAK: "Very Weak",
    StrengthCategory.WEAK: "Weak",
    StrengthCategory.FAIR: "Fair",
    StrengthCategory.GOOD: "Good",
    StrengthCategory.STRONG: "Strong",
    StrengthCategory.VERY_STRONG: "Very Strong",
}


@dataclass(frozen=True)
class SecurityAssessment:
    score: int = 0
    category: StrengthCategory = StrengthCategory.VERY_WEAK
    entropy: float = 0.0
    crack_time_seconds: float = 0.0
    has_weak_pattern: bool = False
    has_dictionary_word: bool = False

    # Set by the caller; duplicate tracking lives outside the engine.
    is_duplicate: bool = False


# ---------- reference tables ----------

WEAK_PATTERNS: tuple[tuple[str, str], ...] = (
    ("123", "Sequential numbers"),
    ("abc", "Sequential letters"),
    ("qwerty", "Keyboard pattern"),
    ("password", "Common word"),
    ("admin", "Common word"),
    ("letmein", "Common phrase"),
    ("welcome", "Common word"),
    ("monkey", "Common word"),
    ("dragon", "Common word"),
    ("baseball", "Common word"),
    ("football", "Common word"),
    ("mustang", "Common word"),
    ("master", "Common word"),
    ("hello", "Common word"),
    ("secret", "Common word"),
    ("asdf", "Keyboard pattern"),
    ("zxcv", "Keyboard pattern"),
    ("111", "Repeated numbers"),
    ("aaa", "Repeated letters"),
    ("000", "Repeated numbers"),
)

# Common passwords and names, lower case.
DICTIONARY_WORDS: tuple[str, ...] = (
    "password", "123456", "12345678", "1234", "qwerty",
    "12345", "dragon", "pussy", "baseball", "football",
    "letmein", "monkey", "696969", "abc123", "mustang",
    "michael", "shadow", "master", "jennifer", "111111",
    "2000", "jordan", "superman", "harley", "1234567",
    "fuckme", "hunter", "fuckyou", "trustno1", "ranger",
    "buster", "thomas", "tigger", "robert", "soccer",
    "fuck", "batman", "test", "pass", "killer",
    "hockey", "george", "charlie", "andrew", "michelle",
    "love", "sunshine", "jessica", "pepper", "daniel",
    "access", "123456789", "654321", "joshua", "maggie",
    "starwars", "silver", "william", "dallas", "yankees",
    "123123", "ashley", "666666", "hello", "amanda",
    "orange", "biteme", "freedom", "computer", "sexy",
    "thunder", "nicole", "ginger", "heather", "hammer",
    "summer", "corvette", "taylor", "fucker", "austin",
    "1111", "merlin", "matthew", "121212", "golfer",
    "cheese", "princess", "martin", "chelsea", "patrick",
    "richard", "diamond", "yellow", "bigdog", "secret",
    "asdfgh", "sparky", "cowboy",
)

KEYBOARD_ROWS: tuple[str, ...] = (
    "qwertyuiop",
    "asdfghjkl",
    "zxcvbnm",
    "1234567890",
)

# Every 3-character slice of a keyboard row, forward and reversed.
KEYBOARD_FRAGMENTS: frozenset[str] = frozenset(
    fragment
    for row in KEYBOARD_ROWS
    for i in range(len(row) - 2)
    for fragment in (row[i : i + 3], row[i : i + 3][::-1])
)

LEET_TABLE = str.maketrans({
    "4": "a",
    "3": "e",
    "0": "o",
    "1": "i",
    "5": "s",
    "7": "t",
    "@": "a",
    "$": "s",
    "!": "i",
})

# Pool sizes assumed per observed character class.
POOL_LOWER = 26
POOL_UPPER = 26
POOL_DIGIT = 10
POOL_OTHER = 32  # approximate

WEAK_PATTERN_PENALTY = 70  # percent kept
DICTIONARY_PENALTY = 60  # percent kept


# ---------- character classes ----------


def _is_lower(c: str) -> bool:
    return "a" <= c <= "z"


def _is_upper(c: str) -> bool:
    return "A" <= c <= "Z"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return _is_lower(c) or _is_upper(c)


def _character_classes(password: str) -> tuple[bool, bool, bool, bool]:
    """(has_lower, has_upper, has_digit, has_other)."""
    has_lower = has_upper = has_digit = has_other = False
    for c in password:
        if _is_lower(c):
            has_lower = True
        elif _is_upper(c):
            has_upper = True
        elif _is_digit(c):
            has_digit = True
        else:
            has_other = True
    return has_lower, has_upper, has_digit, has_other


# ---------- scoring ----------


def calculate_strength_score(password: str) -> int:
    """
    0..100 score from length, variety and placement; 0 below 8 characters.
    """
    length = len(password)
    if length < MIN_PASSWORD_LENGTH:
        return 0

    score = 0

    # Length (max 40)
    if length >= 12:
        score += 40
    elif length >= 10:
        score += 30
    elif length >= 8:
        score += 20
    else:
        score += 10

    # Variety (max 40)
    has_lower, has_upper, has_digit, has_other = _character_classes(password)
    variety = sum((has_lower, has_upper, has_digit, has_other))
    score += variety * 10

    # Digits or symbols away from the ends
    if any(not _is_alpha(c) for c in password[1:-1]):
        score += 10

    if length >= 8 and has_lower and has_upper and has_digit:
        score += 10

    return min(score, 100)


def find_weak_patterns(password: str) -> list[str]:
    """
    Descriptions of every structural weakness in `password`, in detection
    order and without duplicates.
    """
    found: list[str] = []

    def flag(description: str) -> None:
        if description not in found:
            found.append(description)

    for pattern, description in WEAK_PATTERNS:
        if pattern in password:
            flag(description)

    for c1, c2, c3 in zip(password, password[1:], password[2:]):
        if _is_digit(c1) and _is_digit(c2) and _is_digit(c3):
            a, b, c = ord(c1), ord(c2), ord(c3)
            if a + 1 == b and b + 1 == c:
                flag("Ascending number run")
            elif a - 1 == b and b - 1 == c:
                flag("Descending number run")

        if _is_alpha(c1) and _is_alpha(c2) and _is_alpha(c3):
            a, b, c = ord(c1.lower()), ord(c2.lower()), ord(c3.lower())
            if a + 1 == b and b + 1 == c:
                flag("Ascending letter run")
            elif a - 1 == b and b - 1 == c:
                flag("Descending letter run")

        if c1 == c2 == c3:
            flag("Repeated characters")

    for i in range(len(password) - 2):
        if password[i : i + 3] in KEYBOARD_FRAGMENTS:
            flag("Keyboard row sequence")
            break

    return found


def check_weak_patterns(password: str) -> bool:
    """True if any sequence, repetition or keyboard pattern is present."""
    return bool(find_weak_patterns(password))


def _contains_dictionary_word(text: str) -> bool:
    return any(word in text for word in DICTIONARY_WORDS)


def normalize_leetspeak(password: str) -> str:
    """Lower-case and undo the common digit/symbol letter stand-ins."""
    return password.lower().translate(LEET_TABLE)


def check_dictionary_words(password: str) -> bool:
    """
    True if a common password appears in the lower-cased password or in
    its leetspeak-normalised form.
    """
    if _contains_dictionary_word(password.lower()):
        return True
    return _contains_dictionary_word(normalize_leetspeak(password))


def calculate_simple_entropy(password: str) -> float:
    """
    length * log2(pool), with the pool inferred from the classes present.
    """
    if not password:
        return 0.0

    has_lower, has_upper, has_digit, has_other = _character_classes(password)
    pool_size = 0
    if has_lower:
        pool_size += POOL_LOWER
    if has_upper:
        pool_size += POOL_UPPER
    if has_digit:
        pool_size += POOL_DIGIT
    if has_other:
        pool_size += POOL_OTHER

    if pool_size == 0:
        return 0.0

    return len(password) * math.log2(pool_size)


def estimate_crack_time(
    entropy_bits: float,
    guesses_per_second: float = GPU_GUESSES_PER_SECOND,
) -> float:
    """
    Seconds to exhaust 2**entropy_bits candidates at the given rate.

    0.0 for non-positive inputs; math.inf when 2**entropy_bits overflows.
    """
    if entropy_bits <= 0 or guesses_per_second <= 0:
        return 0.0

    try:
        combinations = math.pow(2.0, entropy_bits)
    except OverflowError:
        return math.inf

    return combinations / guesses_per_second


def are_passwords_similar(first: str, second: str, threshold: float) -> bool:
    """
    Positional similarity: the share of same-index matching characters is
    at least `threshold`. Passwords of different length are never similar.

    This is not an edit distance; one inserted character makes two
    otherwise identical passwords dissimilar.
    """
    if len(first) != len(second) or not first:
        return False

    matches = sum(1 for a, b in zip(first, second) if a == b)
    return matches / len(first) >= threshold


def assess(password: str, *, is_duplicate: bool = False) -> SecurityAssessment:
    """
    Full assessment: score, pattern and dictionary penalties, entropy and
    crack time.

    Penalties compose in a fixed order: weak pattern first (x0.70), then
    dictionary (x0.60), each truncated to an integer.
    """
    if not password:
        return SecurityAssessment(is_duplicate=is_duplicate)

    score = calculate_strength_score(password)
    entropy = calculate_simple_entropy(password)

    has_weak_pattern = check_weak_patterns(password)
    has_dictionary_word = check_dictionary_words(password)

    if has_weak_pattern:
        score = score * WEAK_PATTERN_PENALTY // 100
    if has_dictionary_word:
        score = score * DICTIONARY_PENALTY // 100

    score = max(0, min(score, 100))

    return SecurityAssessment(
        score=score,
        category=StrengthCategory.from_score(score),
        entropy=entropy,
        crack_time_seconds=estimate_crack_time(entropy, GPU_GUESSES_PER_SECOND),
        has_weak_pattern=has_weak_pattern,
        has_dictionary_word=has_dictionary_word,
        is_duplicate=is_duplicate,
    )
