"""
Custom exceptions for the service and API layers.
Separates business exceptions from HTTP exceptions.
"""
from typing import Optional
from fastapi import status


class LegalEaseError(Exception):
    """Base class for business exceptions that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LegalEaseError):
    """Raised when an upload or request payload is rejected."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(LegalEaseError):
    """Raised when the bearer token is missing, expired or invalid."""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(LegalEaseError):
    """Raised when a record is missing or owned by another account."""
    status_code = status.HTTP_404_NOT_FOUND


class PreconditionError(LegalEaseError):
    """Raised when a document has no extracted text yet."""
    status_code = status.HTTP_409_CONFLICT


class ConflictError(LegalEaseError):
    """Raised when an analysis of the same type is already in flight for a document."""
    status_code = status.HTTP_409_CONFLICT


class ExtractionError(Exception):
    """Raised by text extractors. Recovered into a FAILED document, never surfaced to HTTP."""
    pass


class GatewayError(Exception):
    """
    Classified failure from the model gateway.

    Recovered into a FAILED analysis by the job engine.
    """

    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    PROVIDER_ERROR = "provider_error"
    MALFORMED_RESPONSE = "malformed_response"
    NOT_CONFIGURED = "not_configured"

    RETRYABLE_KINDS = frozenset({RATE_LIMITED, UNAVAILABLE})

    def __init__(self, kind: str, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return self.kind in self.RETRYABLE_KINDS

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"
