"""
API error definitions and exception classes.

Provides consistent error handling across all API endpoints.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standard API error codes."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class APIError(Exception):
    """
    Base API exception with structured error response.

    Usage:
        raise APIError(
            code=ErrorCode.PRODUCT_NOT_FOUND,
            message="Product '7' not found",
            status=404,
            details={"product_id": "7"}
        )
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}

    def to_dict(self, request_id: Optional[str] = None) -> Dict[str, Any]:
        """Convert to API response format."""
        error_dict: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            error_dict["details"] = self.details
        if request_id:
            error_dict["request_id"] = request_id
        return {"error": error_dict}


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        code: ErrorCode = ErrorCode.PRODUCT_NOT_FOUND,
    ):
        super().__init__(
            code=code,
            message=f"{resource_type} '{resource_id}' not found",
            status=404,
            details={f"{resource_type.lower()}_id": resource_id},
        )


class ValidationError(APIError):
    """Request validation error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status=400,
            details=details,
        )
