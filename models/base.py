"""
Base schemas for all models.

Engine inputs are plain BaseSchema models; engine outputs are frozen
so a built plan or order line cannot be edited after the fact.
"""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict
from typing import Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class FrozenSchema(BaseSchema):
    """Immutable engine output; rebuilt on every call."""
    model_config = ConfigDict(frozen=True)


def clamp_non_negative(value: Optional[int]) -> int:
    """None and negatives become 0."""
    if value is None:
        return 0
    return max(0, value)


def clamp_non_negative_decimal(value: Optional[Decimal]) -> Decimal:
    """None and negatives become Decimal 0."""
    if value is None:
        return Decimal("0")
    return max(Decimal("0"), value)
