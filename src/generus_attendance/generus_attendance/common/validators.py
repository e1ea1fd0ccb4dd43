from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_range(value: float, field_name: str, low: float, high: float) -> float:
    if value is None or value < low or value > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value


def require_enum(enum_cls: Type[E], value, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not valid")


def optional_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None
