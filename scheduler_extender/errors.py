"""
Error Definitions for the Scheduler Extender Client

This module defines the exception classes raised by the extender client so the
scheduler core can tell configuration problems, failed exchanges and
extender-reported rejections apart.
"""

from typing import Optional


class ExtenderError(Exception):
    """Base exception class for all extender client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(ExtenderError):
    """Raised when TLS or security configuration is malformed."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid extender configuration for {field}: {reason}")
        self.field = field
        self.reason = reason


class TransportError(ExtenderError):
    """Raised when a request/response exchange with an extender fails."""

    def __init__(self, verb: str, url: str, reason: str):
        super().__init__(f"Extender call {verb!r} to {url} failed: {reason}")
        self.verb = verb
        self.url = url
        self.reason = reason


class ExtenderLogicError(ExtenderError):
    """Raised when the extender reports a rejection in its filter result.

    The string form is the extender's message, unchanged.
    """

    def __init__(self, message: str, verb: Optional[str] = None):
        super().__init__(message)
        self.verb = verb
