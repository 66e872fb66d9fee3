"""
SecurePassGen password generation and assessment engine.
"""

from loguru import logger

from .config import CharsetConfig, GenerationOptions, DEFAULT_OPTIONS
from .entropy import init_secure_random
from .errors import ConfigurationError, GenerationError, PatternError, ResourceError
from .generator import (
    PasswordResult,
    generate,
    generate_bulk,
    generate_from_pattern,
    validate,
)
from .security import (
    SecurityAssessment,
    StrengthCategory,
    are_passwords_similar,
    assess,
    estimate_crack_time,
)

# Library stays quiet unless the application calls spgen.log.setup_logging().
logger.disable("spgen")

__all__ = [
    "CharsetConfig",
    "GenerationOptions",
    "DEFAULT_OPTIONS",
    "init_secure_random",
    "GenerationError",
    "ConfigurationError",
    "ResourceError",
    "PatternError",
    "PasswordResult",
    "generate",
    "generate_bulk",
    "generate_from_pattern",
    "validate",
    "SecurityAssessment",
    "StrengthCategory",
    "assess",
    "are_passwords_similar",
    "estimate_crack_time",
]
