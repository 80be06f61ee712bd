"""
Custom Exception Classes with Structured Error Handling
Enables consistent error payloads for whatever layer calls the engine
"""
from typing import Any, Dict, List, Optional
from pydantic import ValidationError as PydanticValidationError
import logging

logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base matching exception.
    All custom exceptions should inherit from this.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AppException):
    """Raised when input validation fails"""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details={"field": field, **(details or {})}
        )

    @property
    def field(self) -> Optional[str]:
        return self.details.get("field")

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError, prefix: str = "") -> "ValidationError":
        """
        Convert a pydantic ValidationError into the structured form.
        The first error decides the reported field; all errors are kept in details.
        """
        errors: List[Dict[str, Any]] = []
        for error in exc.errors():
            loc = ".".join(str(part) for part in error.get("loc", ()))
            path = ".".join(part for part in (prefix, loc) if part)
            errors.append({"field": path or None, "message": error.get("msg", "")})

        first = errors[0] if errors else {"field": prefix or None, "message": str(exc)}
        message = f"Invalid {first['field']}: {first['message']}" if first["field"] else first["message"]
        return cls(message, field=first["field"], details={"errors": errors})


class MatchingCancelledError(AppException):
    """Raised when the caller cancels a matching run between candidates"""

    def __init__(self, scored: int, total: int):
        super().__init__(
            message=f"Matching cancelled after {scored} of {total} candidates",
            status_code=499,
            error_code="MATCHING_CANCELLED",
            details={"scored": scored, "total": total}
        )
