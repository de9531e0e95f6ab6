"""
Result records shared by every validator.
Uses Pydantic for validation and type safety.
"""

import logging
import re
from datetime import date, datetime
from typing import Annotated, Any, Dict, Optional, Type, Union

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationError,
    create_model,
    model_validator,
)

logger = logging.getLogger(__name__)

ROOT_ERROR_KEY = "__root__"

_URL_ADAPTER = TypeAdapter(AnyUrl)
# Date and time are both mandatory, with Z or an explicit +HH:MM / -HH:MM offset.
_ISO_DATETIME_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})"
)
_FRACTION = re.compile(r"\.(\d+)")


def min_length(limit: int, message: str) -> AfterValidator:
    """String length check that reports a custom (localized) message."""
    def check(value: str) -> str:
        if len(value) < limit:
            raise ValueError(message)
        return value
    return AfterValidator(check)


def max_length(limit: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) > limit:
            raise ValueError(message)
        return value
    return AfterValidator(check)


def number_range(message: str, ge: Optional[float] = None, le: Optional[float] = None) -> AfterValidator:
    """Inclusive numeric bounds with a custom message."""
    def check(value):
        if ge is not None and value < ge:
            raise ValueError(message)
        if le is not None and value > le:
            raise ValueError(message)
        return value
    return AfterValidator(check)


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("URL non valido") from None
    return value


def parse_iso_datetime(value: str) -> Optional[datetime]:
    """
    Read an ISO 8601 string, or return None when it cannot be read.

    "Z" is taken as UTC and fractional seconds of any precision are accepted
    (cut or padded to microseconds, as datetime.fromisoformat needs before 3.11).
    """
    text = value.strip().replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _check_iso_datetime(value: str) -> str:
    if not _ISO_DATETIME_PATTERN.fullmatch(value) or parse_iso_datetime(value) is None:
        raise ValueError("Data e ora non valide (formato ISO 8601 richiesto)")
    return value


# Kept as plain strings; only the format is checked.
Url = Annotated[str, AfterValidator(_check_url)]
IsoDateTime = Annotated[str, AfterValidator(_check_iso_datetime)]


def partial_model(model: Type[BaseModel], name: str, **extra_fields: Any) -> Type[BaseModel]:
    """
    Build a model where every field of `model` is optional with no default applied.

    Field constraints travel with the annotation, so they still apply to values that
    are provided. Model-level validators of `model` are not carried over.
    extra_fields use create_model syntax: name=(type, default).
    """
    fields: Dict[str, Any] = {}
    for field_name, info in model.model_fields.items():
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        fields[field_name] = (Optional[annotation], None)
    fields.update(extra_fields)
    return create_model(name, **fields)


class ValidationResult(BaseModel):
    """
    Uniform outcome of a single-field validator.

    When valid is False, error is always populated. formatted_value is only
    set on success, and only when normalization produced a value.
    """
    model_config = ConfigDict(frozen=True)

    valid: bool
    error: Optional[str] = None
    field: Optional[str] = None
    formatted_value: Optional[str] = None

    @model_validator(mode="after")
    def _error_on_failure(self):
        if not self.valid and not self.error:
            raise ValueError("an invalid result must carry an error message")
        if not self.valid and self.formatted_value is not None:
            raise ValueError("an invalid result cannot carry a formatted value")
        return self

    @classmethod
    def ok(cls, formatted_value: Optional[str] = None) -> "ValidationResult":
        return cls(valid=True, formatted_value=formatted_value)

    @classmethod
    def fail(cls, error: str, field: Optional[str] = None) -> "ValidationResult":
        return cls(valid=False, error=error, field=field)


class ContactFormData(BaseModel):
    """Raw or sanitized contact form. Every field may be missing on raw input."""
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    materia: Optional[str] = None


class ValidatedProfileData(BaseModel):
    """Normalized student profile, produced only when every field passed."""
    fiscal_code: str
    date_of_birth: date
    phone: str
    address: str
    city: str
    province: str
    postal_code: str


class ValidatedParentData(BaseModel):
    """Normalized parent/guardian record. Optional fields stay None when not provided."""
    relationship: str
    first_name: str
    last_name: str
    fiscal_code: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None


class FormResult(BaseModel):
    """
    Outcome of an accumulate-all form validator.

    success=True carries data; success=False carries one message per failing field.
    """
    success: bool
    data: Optional[Union[ValidatedProfileData, ValidatedParentData]] = None
    errors: Dict[str, str] = {}


class SchemaResult(BaseModel):
    """Non-raising outcome of parse_schema."""
    success: bool
    data: Any = None
    errors: Dict[str, str] = {}


def _error_key(loc) -> str:
    parts = [str(p) for p in loc]
    return ".".join(parts) if parts else ROOT_ERROR_KEY


def _error_message(err: dict) -> str:
    # Custom ValueError messages from our validators arrive prefixed by pydantic.
    msg = err.get("msg", "")
    if err.get("type") == "value_error" and msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    return msg


def flatten_errors(exc: ValidationError) -> Dict[str, str]:
    """Map each failing location to its first message. Model-level errors go under __root__."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        key = _error_key(err.get("loc", ()))
        errors.setdefault(key, _error_message(err))
    return errors


def parse_schema(schema: Union[Type[BaseModel], TypeAdapter], data: Any) -> SchemaResult:
    """
    Validate data against a pydantic model class or TypeAdapter without raising.

    Args:
        schema: BaseModel subclass or TypeAdapter
        data: Raw input (usually a dict)

    Returns:
        SchemaResult with the parsed value on success, or a {location: message} map
    """
    try:
        if isinstance(schema, TypeAdapter):
            parsed = schema.validate_python(data)
        else:
            parsed = schema.model_validate(data)
    except ValidationError as exc:
        errors = flatten_errors(exc)
        logger.debug(f"Schema {exc.title} rejected input: {sorted(errors)}")
        return SchemaResult(success=False, errors=errors)
    return SchemaResult(success=True, data=parsed)
