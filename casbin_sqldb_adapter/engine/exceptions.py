"""
Exceptions raised by the Casbin SQL database adapter.

Database errors raised by the Django ORM (``django.db.DatabaseError`` and its
subclasses) are not wrapped: they reach the caller unchanged.
"""


class AdapterError(Exception):
    """Base class for every error raised by the adapter."""


class ConnectionFailure(AdapterError):
    """The configured database alias is unknown or the database is unreachable."""


class TableMissing(AdapterError):
    """The policy rule table could not be queried."""


class InvalidFilterType(AdapterError, TypeError):
    """A filtered load received something other than a ``Filter``."""


class MalformedLine(AdapterError, ValueError):
    """A decoded policy line was rejected by the Casbin model."""

    def __init__(self, line: str, reason: str = ""):
        self.line = line
        message = f"Malformed policy line: {line!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedArity(AdapterError, ValueError):
    """A policy rule has more values than the table has columns."""
