from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(
            f"{field_name} is required",
            [{"field": field_name, "message": f"{field_name} is required"}],
        )
    return str(value).strip()


def require_in_range(value: int, field_name: str, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not low <= number <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def optional_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def parse_bool(value: object, field_name: str) -> bool:
    """Accept real booleans, 0/1, and the usual true/false spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    raise ValidationError(
        f"{field_name} must be true or false",
        [{"field": field_name, "message": f"Invalid boolean: {value!r}"}],
    )


def require_string_list(value: object, field_name: str) -> list[str]:
    if not isinstance(value, (list, tuple, set)) or not all(isinstance(v, str) for v in value):
        raise ValidationError(
            f"{field_name} must be a list of strings",
            [{"field": field_name, "message": f"{field_name} must be a list of strings"}],
        )
    return [v.strip() for v in value if v.strip()]
