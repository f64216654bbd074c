"""Data layer error hierarchy."""

from crumb.errors import CrumbError


class DataError(CrumbError):
    """Base for all crumb.data errors."""


class QueryError(DataError):
    """Raised when a SQL statement fails."""
