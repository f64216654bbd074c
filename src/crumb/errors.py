"""Crumb exception hierarchy.

Shared across the cookie codec, factories, and test helpers so every
module raises and catches the same types.
"""


class CrumbError(Exception):
    """Base for all crumb-specific errors."""


class InvalidInput(CrumbError, TypeError):  # noqa: N818 — mirrors the argument-error family
    """Raised when an argument has the wrong shape.

    ``parse_header`` raises this for anything that is neither a string
    nor a list/tuple of header lines; ``StreamFactory`` raises it for
    objects that are not open file-like resources.
    """


class ConfigurationError(CrumbError):
    """Raised when crumb configuration is invalid.

    Typically a schema file that is undefined or missing on disk.
    """


class StreamError(CrumbError):
    """Raised when a stream cannot be opened or is no longer usable."""


class RowNotFound(CrumbError, LookupError):  # noqa: N818 — conventional lookup name
    """Raised when a table row expected by primary key does not exist."""
