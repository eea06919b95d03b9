"""Input validation for snapshot records.

Malformed input fails fast with a ``ValidationError`` that says which entity
and field were wrong and whether the field was missing or held an unparseable
date. Core derivation functions only ever see validated records.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


class ValidationErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    UNPARSEABLE_DATE = "unparseable_date"


class ValidationError(ValueError):
    """Raised when a snapshot record cannot be turned into a typed model."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        entity: str,
        field: str,
        value: Any = None,
    ) -> None:
        self.kind = kind
        self.entity = entity
        self.field = field
        self.value = value
        if kind == ValidationErrorKind.MISSING_FIELD:
            message = f"{entity}: missing required field '{field}'"
        else:
            message = f"{entity}: field '{field}' is not a valid timestamp ({value!r})"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "kind": self.kind.value,
            "entity": self.entity,
            "field": self.field,
        }


def require(data: Mapping[str, Any], entity: str, *keys: str) -> Any:
    """Return the first present, non-null value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    raise ValidationError(ValidationErrorKind.MISSING_FIELD, entity, keys[0])


def parse_timestamp(value: Any, entity: str, field: str) -> datetime:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime."""
    if value is None or value == "":
        raise ValidationError(ValidationErrorKind.MISSING_FIELD, entity, field)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(
                ValidationErrorKind.UNPARSEABLE_DATE, entity, field, value,
            ) from None
    else:
        raise ValidationError(ValidationErrorKind.UNPARSEABLE_DATE, entity, field, value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_optional_timestamp(value: Any, entity: str, field: str) -> datetime | None:
    if value is None or value == "":
        return None
    return parse_timestamp(value, entity, field)
