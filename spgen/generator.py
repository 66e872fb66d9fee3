"""
Password generation engine.

Pipeline for generate():

- Validate the options.
- Build the charset pool.
- Draw one secure byte per position and map it into the pool (byte % size).
- Repair the draw in place until the type / minimum-count constraints hold.
- Attach the theoretical entropy estimate and a strength score.

Failures never raise: they come back as a PasswordResult with no password,
a reason in `strength` and the exception in `error`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from loguru import logger

from .charset import (
    CharCategory,
    build_charset_pool,
    category_alphabet,
    category_of,
    effective_pool_size,
    selected_categories,
)
from .config import (
    DEFAULT_BULK_COUNT,
    DEFAULT_OPTIONS,
    MAX_BULK_GENERATE,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
    STRENGTH_SCALE_BITS,
    STRENGTH_THRESHOLD_FAIR,
    STRENGTH_THRESHOLD_GOOD,
    STRENGTH_THRESHOLD_STRONG,
    STRENGTH_THRESHOLD_VERY_WEAK,
    STRENGTH_THRESHOLD_WEAK,
    CharsetConfig,
    GenerationOptions,
)
from .entropy import ByteSource, random_char, random_index
from .errors import ConfigurationError, GenerationError, PatternError, ResourceError
from .secure import SecureBuffer

# Template codes understood by generate_from_pattern().
PATTERN_CODES: dict[str, CharCategory] = {
    "l": CharCategory.LOWERCASE,
    "U": CharCategory.UPPERCASE,
    "n": CharCategory.NUMBERS,
    "s": CharCategory.SPECIAL,
}


@dataclass
class PasswordResult:
    """
    Result of one generation call.

    Owns the secret buffer: call wipe() (or use the result as a context
    manager) once the password has been consumed.
    """

    length: int = 0
    entropy: float = 0.0
    strength_score: int = 0

    # Strength label on success, human-readable failure reason otherwise.
    strength: str = ""

    error: GenerationError | None = None

    _buffer: SecureBuffer | None = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None and self._buffer is not None and not self._buffer.wiped

    @property
    def password(self) -> str | None:
        if self._buffer is None or self._buffer.wiped:
            return None
        return self._buffer.reveal()

    def raise_for_status(self) -> None:
        """Raise the stored GenerationError, if any."""
        if self.error is not None:
            raise self.error

    def wipe(self) -> None:
        """Overwrite the password bytes, then drop them and the metadata."""
        if self._buffer is not None:
            self._buffer.wipe()
            self._buffer = None
        self.length = 0
        self.entropy = 0.0
        self.strength_score = 0
        self.strength = ""

    def __enter__(self) -> "PasswordResult":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()


def _failed(error: GenerationError) -> PasswordResult:
    return PasswordResult(strength=str(error), error=error)


# ---------- validation ----------


def _category_requirements(options: GenerationOptions) -> dict[CharCategory, int]:
    """
    How many characters each selected category must end up with.
    """
    require_one = 1 if options.require_all_types else 0
    required = {
        category: require_one for category in selected_categories(options.charset)
    }
    if CharCategory.NUMBERS in required:
        required[CharCategory.NUMBERS] = max(
            required[CharCategory.NUMBERS], options.min_numbers
        )
    if CharCategory.SPECIAL in required:
        required[CharCategory.SPECIAL] = max(
            required[CharCategory.SPECIAL], options.min_special
        )
    return required


def validation_error(options: GenerationOptions | None) -> str | None:
    """
    Return why `options` is invalid, or None if it is valid.
    """
    if options is None:
        return "no options given"

    charset = options.charset
    selected = charset.selected_count()

    if selected == 0:
        return "no character set selected"

    length = options.length
    if isinstance(length, bool) or not isinstance(length, int):
        return "length must be an integer"
    if not MIN_PASSWORD_LENGTH <= length <= MAX_PASSWORD_LENGTH:
        return (
            f"length {length} outside "
            f"[{MIN_PASSWORD_LENGTH}, {MAX_PASSWORD_LENGTH}]"
        )

    if options.require_all_types and length < selected:
        return f"length {length} shorter than {selected} required character types"

    if options.min_numbers < 0 or options.min_special < 0:
        return "minimum counts must not be negative"

    if options.min_numbers > 0 and not charset.numbers:
        return "minimum numbers requested but numbers are not selected"
    if options.min_special > 0 and not charset.special:
        return "minimum special characters requested but special is not selected"

    if options.min_numbers + options.min_special > length:
        return (
            f"minimum numbers ({options.min_numbers}) plus minimum special "
            f"({options.min_special}) exceed length {length}"
        )

    # Stricter than a per-minimum check: options such as length 8 with three
    # digits and four specials under require_all_types pass the check above
    # but leave no room for both letter categories, so they are rejected here.
    required = sum(_category_requirements(options).values())
    if required > length:
        return f"character requirements need {required} positions, length is {length}"

    return None


def validate(options: GenerationOptions | None) -> bool:
    """True if `options` can be used for generation."""
    return validation_error(options) is None


# ---------- entropy / strength ----------


def calculate_entropy(length: int, charset: CharsetConfig) -> float:
    """
    Theoretical entropy: length * log2(pool size).

    Assumes uniform selection over the full declared pool. It is not
    reduced for the repair pass, so it over-estimates short passwords
    with strict minimums.
    """
    pool_size = effective_pool_size(charset)
    if pool_size <= 0 or length <= 0:
        return 0.0
    return length * math.log2(pool_size)


def strength_score_from_entropy(entropy: float) -> int:
    score = int(entropy / STRENGTH_SCALE_BITS * 100)
    return max(0, min(100, score))


def strength_label(score: int) -> str:
    """Map a 0..100 score onto its strength label."""
    if score < STRENGTH_THRESHOLD_VERY_WEAK:
        return "Very Weak"
    if score < STRENGTH_THRESHOLD_WEAK:
        return "Weak"
    if score < STRENGTH_THRESHOLD_FAIR:
        return "Fair"
    if score < STRENGTH_THRESHOLD_GOOD:
        return "Good"
    if score < STRENGTH_THRESHOLD_STRONG:
        return "Strong"
    return "Very Strong"


def _finish(buffer: SecureBuffer, charset: CharsetConfig) -> PasswordResult:
    entropy = calculate_entropy(len(buffer), charset)
    score = strength_score_from_entropy(entropy)
    return PasswordResult(
        length=len(buffer),
        entropy=entropy,
        strength_score=score,
        strength=strength_label(score),
        _buffer=buffer,
    )


# ---------- repair ----------


def _category_counts(buffer: SecureBuffer) -> dict[CharCategory | None, int]:
    counts: dict[CharCategory | None, int] = {}
    for char in buffer:
        category = category_of(char)
        counts[category] = counts.get(category, 0) + 1
    return counts


def _repair_one(
    buffer: SecureBuffer,
    category: CharCategory,
    required: dict[CharCategory, int],
    consumed: set[int],
    avoid_ambiguous: bool,
    source: ByteSource | None,
) -> None:
    """
    Overwrite the first unconsumed position whose character belongs to a
    category holding more than it requires.
    """
    counts = _category_counts(buffer)

    for i in range(len(buffer)):
        if i in consumed:
            continue
        current = category_of(buffer[i])
        if counts.get(current, 0) > required.get(current, 0):
            buffer[i] = random_char(category_alphabet(category, avoid_ambiguous), source)
            consumed.add(i)
            return

    raise GenerationError(f"No position left to repair {category.value} characters.")


def _repair(
    buffer: SecureBuffer,
    options: GenerationOptions,
    source: ByteSource | None,
) -> None:
    """
    Repair pass: type presence (lowercase, uppercase, numbers, special),
    then the minimum digit count, then the minimum special count.
    """
    required = _category_requirements(options)
    avoid_ambiguous = options.charset.avoid_ambiguous
    consumed: set[int] = set()

    if options.require_all_types:
        for category in selected_categories(options.charset):
            if _category_counts(buffer).get(category, 0) == 0:
                _repair_one(buffer, category, required, consumed, avoid_ambiguous, source)

    for category, minimum in (
        (CharCategory.NUMBERS, options.min_numbers),
        (CharCategory.SPECIAL, options.min_special),
    ):
        while _category_counts(buffer).get(category, 0) < minimum:
            _repair_one(buffer, category, required, consumed, avoid_ambiguous, source)

    if consumed:
        logger.debug(f"Repair pass rewrote {len(consumed)} of {len(buffer)} positions.")

    counts = _category_counts(buffer)
    for category, minimum in required.items():
        if counts.get(category, 0) < minimum:
            raise GenerationError(
                f"Repair left {counts.get(category, 0)} {category.value} "
                f"characters, {minimum} required."
            )


# ---------- public API ----------


def generate(
    options: GenerationOptions | None = None,
    *,
    source: ByteSource | None = None,
) -> PasswordResult:
    """
    Generate one password.

    `source` overrides the byte source (defaults to the OS CSPRNG).
    """
    opts = options or DEFAULT_OPTIONS

    reason = validation_error(opts)
    if reason is not None:
        logger.warning(f"Rejected generation options: {reason}")
        return _failed(ConfigurationError(f"Invalid options: {reason}"))

    try:
        buffer = SecureBuffer.allocate(opts.length)
    except MemoryError as exc:
        return _failed(ResourceError(f"Memory error: {exc!r}"))

    try:
        with build_charset_pool(opts.charset) as pool:
            pool_size = len(pool)
            for i in range(opts.length):
                buffer[i] = pool[random_index(pool_size, source)]

        _repair(buffer, opts, source)
    except GenerationError as exc:
        buffer.wipe()
        logger.warning(f"Password generation failed: {exc}")
        return _failed(exc)
    except MemoryError as exc:
        buffer.wipe()
        return _failed(ResourceError(f"Memory error: {exc!r}"))
    except BaseException:
        buffer.wipe()
        raise

    result = _finish(buffer, opts.charset)
    logger.debug(
        f"Generated {result.length}-char password from a {pool_size}-char pool "
        f"({result.entropy:.1f} bits, {result.strength})."
    )
    return result


def generate_from_pattern(
    pattern: str,
    *,
    source: ByteSource | None = None,
) -> PasswordResult:
    """
    Generate a password from a template: l=lowercase, U=uppercase,
    n=number, s=special, one character per code.
    """
    if not pattern:
        return _failed(PatternError("Invalid pattern: empty template"))

    if len(pattern) > MAX_PASSWORD_LENGTH:
        return _failed(
            PatternError(
                f"Invalid pattern: {len(pattern)} codes exceed {MAX_PASSWORD_LENGTH}"
            )
        )

    for position, code in enumerate(pattern):
        if code not in PATTERN_CODES:
            logger.warning(f"Unknown pattern code {code!r} at position {position}.")
            return _failed(
                PatternError(
                    f"Invalid pattern character {code!r} at position {position}"
                )
            )

    buffer = SecureBuffer.allocate(len(pattern))
    try:
        for i, code in enumerate(pattern):
            buffer[i] = random_char(category_alphabet(PATTERN_CODES[code]), source)
    except GenerationError as exc:
        buffer.wipe()
        logger.warning(f"Pattern generation failed: {exc}")
        return _failed(exc)
    except BaseException:
        buffer.wipe()
        raise

    charset = CharsetConfig(
        lowercase="l" in pattern,
        uppercase="U" in pattern,
        numbers="n" in pattern,
        special="s" in pattern,
    )
    return _finish(buffer, charset)


def generate_bulk(
    options: GenerationOptions | None = None,
    count: int = DEFAULT_BULK_COUNT,
    *,
    source: ByteSource | None = None,
) -> list[PasswordResult]:
    """
    Generate `count` passwords with independent generate() calls.

    Returns an empty list for a bad count or invalid options. Stops at the
    first failed call and returns the passwords produced so far.
    """
    opts = options or DEFAULT_OPTIONS

    if not 1 <= count <= MAX_BULK_GENERATE:
        logger.warning(f"Bulk count {count} outside [1, {MAX_BULK_GENERATE}].")
        return []

    if not validate(opts):
        logger.warning(f"Rejected bulk options: {validation_error(opts)}")
        return []

    results: list[PasswordResult] = []
    for _ in range(count):
        result = generate(opts, source=source)
        if not result.ok:
            logger.warning(
                f"Bulk generation stopped after {len(results)} of {count}: {result.strength}"
            )
            break
        results.append(result)

    return results
