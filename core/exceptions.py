"""Custom exception classes for the metrics service.

Service functions raise these; the handlers in `core.error_handlers` turn
them into JSON error responses with the matching HTTP status.
"""

from typing import Optional, Any, Dict


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a profile or log entry does not exist."""

    def __init__(self, resource: str, identifier: Any):
        """Initialize not found error.

        Args:
            resource: Type of resource (e.g., 'Profile', 'WeightLog').
            identifier: ID or identifier that was not found.
        """
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class ValidationError(AppException):
    """Raised when input fails a check Pydantic cannot express."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class ConflictError(AppException):
    """Raised when a unique value (e.g. profile email) is already taken."""

    def __init__(self, field: str, value: Any):
        super().__init__(
            f"{field} already exists",
            status_code=409,
            details={"field": field, "value": value}
        )


class OnboardingRequiredError(AppException):
    """Raised when an operation needs a profile that has finished onboarding."""

    def __init__(self, profile_id: Any):
        super().__init__(
            "Please complete onboarding first",
            status_code=403,
            details={"profile_id": profile_id, "onboarding_endpoint": f"/api/profiles/{profile_id}/onboarding"}
        )


class DatabaseError(AppException):
    """Exception raised when database operations fail."""

    def __init__(self, message: str, operation: Optional[str] = None):
        """Initialize database error.

        Args:
            message: Database error message.
            operation: Optional operation that failed (e.g., 'create', 'update').
        """
        details = {"operation": operation} if operation else {}
        super().__init__(message, status_code=500, details=details)
