from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..core.exceptions import ValidationError


def require_sequence(value: Any, field_name: str) -> Sequence:
    """Fail fast when a collaborator hands over something that is not a list-like."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValidationError(f"{field_name} must be a sequence, got {type(value).__name__}")
    return value


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()
