"""
Configuration for the SecurePassGen password engine.
"""

from dataclasses import dataclass, field


# Character category alphabets.
CHARSET_LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
CHARSET_UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
CHARSET_NUMBERS = "0123456789"
CHARSET_SPECIAL = "!@#$%^&*"
CHARSET_AMBIGUOUS = "lI1O0"

# Length / bulk limits.
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
DEFAULT_PASSWORD_LENGTH = 16
MAX_BULK_GENERATE = 100
DEFAULT_BULK_COUNT = 5

# Attacker model.
# Generation strength score is entropy scaled against this many bits.
STRENGTH_SCALE_BITS = 128.0
GPU_GUESSES_PER_SECOND = 1e9  # GPU-class offline attacker

# Score thresholds (exclusive upper bounds) for the strength labels.
STRENGTH_THRESHOLD_VERY_WEAK = 20
STRENGTH_THRESHOLD_WEAK = 40
STRENGTH_THRESHOLD_FAIR = 60
STRENGTH_THRESHOLD_GOOD = 75
STRENGTH_THRESHOLD_STRONG = 90

# Environment variable read by the entry point to pick a log level.
LOG_LEVEL_ENV = "SPGEN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class CharsetConfig:
    lowercase: bool = True
    uppercase: bool = True
    numbers: bool = True
    special: bool = True

    # Drop l, I, 1, O, 0 from the pool (and from repair alphabets).
    avoid_ambiguous: bool = False

    def selected_count(self) -> int:
        return sum((self.lowercase, self.uppercase, self.numbers, self.special))


@dataclass(frozen=True)
class GenerationOptions:
    # Desired password length in characters (MIN..MAX_PASSWORD_LENGTH).
    length: int = DEFAULT_PASSWORD_LENGTH

    charset: CharsetConfig = field(default_factory=CharsetConfig)

    # Every selected category must appear at least once.
    require_all_types: bool = True

    # Minimum digit / special character counts.
    min_numbers: int = 1
    min_special: int = 1


@dataclass(frozen=True)
class QuantumSourceConfig:
    # Number of qubits to prepare in superposition.
    # Each qubit gives one raw bit.
    # NOTE: Keep this <= backend limit (often 20-29 for local simulators).
    num_qubits: int = 20

    # Independent circuit runs XOR-combined per block.
    quantum_streams: int = 2

    # How many rounds of SHA-256 mixing to apply per block.
    entropy_rounds: int = 2


# Default configuration instances you can import elsewhere
DEFAULT_OPTIONS = GenerationOptions()
DEFAULT_QUANTUM_CONFIG = QuantumSourceConfig()
