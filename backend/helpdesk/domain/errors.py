"""Domain Errors - Typed failures raised by the field engine and workflow"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base of every engine error; carries a stable code and HTTP status"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400
    # Informational errors are shown as notices rather than failures
    informational: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """JSON error envelope returned by the API"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Input
class ValidationError(DomainError):
    """Input validation failed (required field, reject comment, draft length)"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


# Lookup
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


# Workflow state
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class InvalidStateError(ConflictError):
    """Action not valid for current ticket status"""
    error_code = "INVALID_STATE"


class DuplicateActionError(ConflictError):
    """Action already recorded or already in flight"""
    error_code = "DUPLICATE_ACTION"
    informational = True


# Helpdesk backend
class ExternalServiceError(DomainError):
    """External service failure"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502


class SchemaLoadError(ExternalServiceError):
    """Field definitions could not be loaded for a template"""
    error_code = "SCHEMA_LOAD_ERROR"


class TransportError(ExternalServiceError):
    """Helpdesk backend returned a non-2xx response or was unreachable"""
    error_code = "TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details=details)
        self.status_code = status_code
