"""
Error taxonomy for the generation engine.

Engine entry points never let these escape: they are caught and carried
inside a failed PasswordResult. Call PasswordResult.raise_for_status() to
get them back as exceptions.
"""


class GenerationError(Exception):
    """Generic password generation error."""


class ConfigurationError(GenerationError):
    """Invalid generation options or an empty character pool."""


class ResourceError(GenerationError):
    """Secure random source unavailable or buffer allocation failed."""


class PatternError(GenerationError):
    """Empty template or unrecognised template code."""
