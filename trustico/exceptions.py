"""Errors raised by the Trustico client."""

from __future__ import annotations


class TrusticoError(RuntimeError):
    """Base exception for every failure reported by the client."""


class CallerInputError(TrusticoError, ValueError):
    """Raised before any network call when the caller's input cannot be sent."""


class CatalogError(CallerInputError):
    """Raised when the product catalog holds an entry the client cannot use."""


class TransportError(TrusticoError):
    """Raised when the API cannot be reached or answers with a non-success HTTP status."""


class ApplicationError(TrusticoError):
    """Raised when the API parses cleanly but rejects the request."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProtocolError(TrusticoError):
    """Raised when the response body is not a list of ``Name|Value|`` records."""

    def __init__(self, message: str, *, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


__all__ = [
    "ApplicationError",
    "CallerInputError",
    "CatalogError",
    "ProtocolError",
    "TransportError",
    "TrusticoError",
]
