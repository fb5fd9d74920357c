from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(value)  # type: ignore[call-arg]
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)  # type: ignore[attr-defined]
        raise ValidationError(f"Invalid {field_name}: {value!r} (allowed: {allowed})")


def optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    """Return a stripped string, or None when the key is absent/empty."""
    value = payload.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None
