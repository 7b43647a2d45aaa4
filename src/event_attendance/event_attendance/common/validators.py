from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


def optional_int(value, field_name: str, *, min_value: Optional[int] = None, max_value: Optional[int] = None) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if min_value is not None and number < min_value:
        raise ValidationError(f"{field_name} must be >= {min_value}")
    if max_value is not None and number > max_value:
        raise ValidationError(f"{field_name} must be <= {max_value}")
    return number
