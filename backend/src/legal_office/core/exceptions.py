"""
Domain exceptions for the Legal Office backend.

Services raise these; the application-level handlers in ``main.py`` turn
them into the standard response envelope with the matching HTTP status.
``user_message`` overrides the generic Arabic message chosen by status.
"""

from typing import Any, Dict, Optional


class LegalOfficeException(Exception):
    """Base class for every business error."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.user_message = user_message
        super().__init__(self.message)


class ResourceNotFoundError(LegalOfficeException):
    """Resource does not exist or is not visible to the caller."""

    def __init__(self, resource_type: str, resource_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message, status_code=404, details=details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ValidationError(LegalOfficeException):
    """Invalid input that passed schema validation but breaks a business rule."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message, status_code=422, details=details, user_message=user_message)
        self.field = field


class ConflictError(LegalOfficeException):
    """Unique constraint violation (duplicate e-mail, case number, ...)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, user_message: Optional[str] = None):
        super().__init__(message, status_code=409, details=details, user_message=user_message)


class AuthenticationError(LegalOfficeException):

    def __init__(
        self,
        message: str = "Authentication required",
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message, status_code=401, details=details, user_message=user_message)


class AuthorizationError(LegalOfficeException):

    def __init__(self, message: str = "Not authorized to access this resource", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=403, details=details)


class ExternalServiceError(LegalOfficeException):
    """Failure while calling an external LLM provider."""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        status_code: int = 502,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message, status_code=status_code, details=details, user_message=user_message)
        self.service_name = service_name
