"""Exception types raised by the sanitizer."""


class SanitizerError(Exception):
    """Base class for sanitizer failures."""


class ProfileError(SanitizerError, ValueError):
    """A profile or configuration value is malformed."""


class SanitizationError(SanitizerError, RuntimeError):
    """Cleaning failed unexpectedly; no partial output is returned."""
