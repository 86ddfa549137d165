"""
Custom exceptions module.

Raised at the workflow/API edge; the planning engines clamp instead.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,
    PermissionDeniedError,

    # Planning
    InvalidPlanModeError,

    # Purchase orders
    PurchasingNotPermittedError,
    NoActionableLinesError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",
    "PermissionDeniedError",

    # Planning
    "InvalidPlanModeError",

    # Purchase orders
    "PurchasingNotPermittedError",
    "NoActionableLinesError",
]
