"""
Record and identifier validation.

validate_record() dispatches on the `type` discriminator to one model per
kind and reports every violation at once instead of stopping at the first.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Optional

import pydantic

from .models import RECORD_MODELS, SchemaType

SCHEMA_ID_MAX_LENGTH = 50
_SCHEMA_ID_RE = re.compile(r"[A-Za-z0-9_-]+")

VALID_TYPES = [t.value for t in SchemaType]


@dataclass
class FieldViolation:
    """One failed check. `path` is dotted, e.g. productData.aggregateRating.ratingValue."""
    path: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.path, "message": self.message}


@dataclass
class ValidationResult:
    success: bool
    data: Optional[dict] = None
    errors: list[FieldViolation] = field(default_factory=list)


@dataclass
class IdValidationResult:
    success: bool
    error: Optional[str] = None


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def _violations(exc: pydantic.ValidationError) -> list[FieldViolation]:
    return [FieldViolation(_field_path(err["loc"]), err["msg"]) for err in exc.errors()]


def validate_record(payload: Any) -> ValidationResult:
    """
    Validate an untyped payload as one of the supported record kinds.

    Returns:
        ValidationResult with `data` holding the normalized camelCase record
        (defaults applied, unset optional fields dropped) on success, or the
        complete list of violations on failure.
    """
    if not isinstance(payload, dict):
        return ValidationResult(False, errors=[FieldViolation("", "Expected an object")])

    schema_type = payload.get("type")
    if schema_type is None:
        return ValidationResult(False, errors=[FieldViolation("type", "Field required")])

    model = RECORD_MODELS.get(schema_type) if isinstance(schema_type, str) else None
    if model is None:
        return ValidationResult(False, errors=[FieldViolation(
            "type", f"Invalid schema type. Expected one of: {', '.join(VALID_TYPES)}"
        )])

    try:
        record = model.model_validate(payload)
    except pydantic.ValidationError as e:
        return ValidationResult(False, errors=_violations(e))

    data = record.model_dump(mode="json", by_alias=True, exclude_none=True)
    return ValidationResult(True, data=data)


def validate_schema_id(value: Any) -> IdValidationResult:
    """Check a schema identifier: 1-50 characters from [A-Za-z0-9_-]."""
    if not isinstance(value, str) or not value:
        return IdValidationResult(False, "Schema ID is required")
    if len(value) > SCHEMA_ID_MAX_LENGTH:
        return IdValidationResult(
            False, f"Schema ID must be at most {SCHEMA_ID_MAX_LENGTH} characters"
        )
    if not _SCHEMA_ID_RE.fullmatch(value):
        return IdValidationResult(False, "Invalid schema ID format")
    return IdValidationResult(True)
