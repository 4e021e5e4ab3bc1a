"""Errors raised while parsing file keys and their components."""

from __future__ import annotations

from enum import Enum


class FormatReason(str, Enum):
    """Why a string was rejected as a key or key component."""

    INVALID_FORMAT = "InvalidFormat"
    TOO_SHORT = "TooShort"
    TOO_LONG = "TooLong"


class FormatError(ValueError):
    """Raised when a string does not satisfy a key grammar.

    ``value`` is the offending input exactly as it was passed in.
    """

    def __init__(self, reason: FormatReason, value: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.value = value
