"""
Minimal entry point: generate one password with the default options and
print its assessment.

Argument parsing, colours, clipboard and file output belong to the
applications that embed spgen; this module only shows the call sequence.
"""
from __future__ import annotations

import sys

from loguru import logger

from .config import DEFAULT_OPTIONS, GenerationOptions
from .entropy import init_secure_random
from .errors import GenerationError
from .generator import generate
from .log import setup_logging
from .security import SecurityAssessment, assess

_SECONDS_PER_MINUTE = 60
_SECONDS_PER_HOUR = 3600
_SECONDS_PER_DAY = 86400
_SECONDS_PER_YEAR = 31536000


def format_crack_time(seconds: float) -> str:
    """
    Render raw seconds in the largest unit they exceed
    (seconds, minutes, hours, days, years).
    """
    if seconds > _SECONDS_PER_YEAR:
        value, unit = seconds / _SECONDS_PER_YEAR, "years"
    elif seconds > _SECONDS_PER_DAY:
        value, unit = seconds / _SECONDS_PER_DAY, "days"
    elif seconds > _SECONDS_PER_HOUR:
        value, unit = seconds / _SECONDS_PER_HOUR, "hours"
    elif seconds > _SECONDS_PER_MINUTE:
        value, unit = seconds / _SECONDS_PER_MINUTE, "minutes"
    else:
        value, unit = seconds, "seconds"

    if value >= 1e6:
        return f"{value:.2e} {unit}"
    return f"{value:.1f} {unit}"


def format_assessment(assessment: SecurityAssessment) -> list[str]:
    lines = [
        f"Strength:   {assessment.category.label}",
        f"Score:      {assessment.score}/100",
        f"Entropy:    {assessment.entropy:.1f} bits",
        f"Crack time: {format_crack_time(assessment.crack_time_seconds)}",
    ]
    if assessment.has_weak_pattern:
        lines.append("Warning: contains weak patterns")
    if assessment.has_dictionary_word:
        lines.append("Warning: contains dictionary words")
    if assessment.is_duplicate:
        lines.append("Warning: duplicate password")
    return lines


def run(options: GenerationOptions | None = None) -> int:
    """
    Generate, assess, print and wipe one password. Returns an exit code.
    """
    try:
        init_secure_random()
    except GenerationError as exc:
        logger.error(f"Cannot start: {exc}")
        print(f"FATAL: {exc}", file=sys.stderr)
        return 1

    with generate(options or DEFAULT_OPTIONS) as result:
        if not result.ok:
            print(f"Failed to generate password: {result.strength}", file=sys.stderr)
            return 1

        password = result.password
        assert password is not None
        assessment = assess(password)

        print("\n[SecurePassGen]")
        print(f"Generated password: {password}")
        print(f"Generator estimate: {result.entropy:.1f} bits ({result.strength})")
        for line in format_assessment(assessment):
            print(line)
        print()

    return 0


def main() -> None:
    """
    Entry point for `python -m spgen.cli`, `run_spgen.py` or the
    `spgen` console script.
    """
    setup_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
