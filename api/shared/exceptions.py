"""Shared exceptions for the chat backend API."""
from typing import Any, Dict, Optional


class ChatBackendException(Exception):
    """Base exception for the chat backend.

    ``status_code`` is the HTTP status the API reports for the error and
    ``payload`` holds extra top-level keys merged into the error body.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.payload: Dict[str, Any] = {}
        super().__init__(self.message)


class ValidationError(ChatBackendException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundError(ChatBackendException):
    """Raised when a resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} with identifier '{identifier}' not found"
        super().__init__(message, "NOT_FOUND", {"resource": resource, "identifier": identifier})


class ForbiddenError(ChatBackendException):
    """Raised when the caller does not own the requested resource."""

    status_code = 403

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "FORBIDDEN", details)


class ConflictError(ChatBackendException):
    """Raised when there's a conflict with existing data."""

    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFLICT", details)


class GatewayError(ChatBackendException):
    """Raised when the model provider is unreachable or answers with an error.

    Never reaches API callers: the gateway turns it into a degraded reply.
    """

    status_code = 502

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "GATEWAY_ERROR", details)
