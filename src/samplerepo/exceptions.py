"""
Exception classes for samplerepo.

Driver errors (rethinkdb.errors.ReqlError and friends) are never wrapped;
they propagate to the caller unchanged. The classes here cover the failures
this package detects itself.
"""

from typing import Any, Optional


class SampleRepoError(Exception):
    """Base exception for all samplerepo errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(SampleRepoError):
    """Startup configuration is missing or invalid."""


class ConnectionNotEstablishedError(SampleRepoError):
    """A database operation was attempted before connect()."""

    def __init__(self, message: str = "Connection is null", **kwargs):
        super().__init__(message, **kwargs)
