"""
Custom exception classes for the application.

The planning engines themselves never raise: they clamp and score.
These errors belong to the workflow and API edge around them.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PURCHASING_NOT_PERMITTED")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class PermissionDeniedError(AppError):
    """Caller lacks a required capability (403)."""

    def __init__(
        self,
        capability: str,
        message: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{capability.upper()}_NOT_PERMITTED",
            message=message,
            status_code=403,
            details={"capability": capability}
        )


# ===================
# PLANNING ERRORS
# ===================

class InvalidPlanModeError(ValidationError):
    """Unknown count plan mode."""

    def __init__(self, mode: str, valid: list[str]):
        super().__init__(
            code="INVALID_PLAN_MODE",
            message=f"Plan mode must be one of: {', '.join(valid)}",
            details={"provided": mode, "valid": valid}
        )


# ===================
# PURCHASE ORDER ERRORS
# ===================

class PurchasingNotPermittedError(PermissionDeniedError):
    """Draft purchase orders need the purchasing capability."""

    def __init__(self):
        super().__init__(
            capability="purchasing",
            message="Only owners and managers can create purchase orders.",
            code="PURCHASING_NOT_PERMITTED"
        )


class NoActionableLinesError(ValidationError):
    """Nothing in the snapshot needs ordering."""

    def __init__(self, source: str, item_count: int):
        super().__init__(
            code="NO_ACTIONABLE_LINES",
            message="No actionable items are ready for a purchase order.",
            details={"source": source, "items_evaluated": item_count}
        )
