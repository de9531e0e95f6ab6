"""
Shared result records, error flattening and the partial-model helper.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, List, Optional

import pytest
from pydantic import BaseModel, Field, TypeAdapter, ValidationError, model_validator

from validations.schema import (
    ROOT_ERROR_KEY,
    FormResult,
    IsoDateTime,
    Url,
    ValidationResult,
    flatten_errors,
    max_length,
    min_length,
    number_range,
    parse_iso_datetime,
    parse_schema,
    partial_model,
)


class Lesson(BaseModel):
    title: Annotated[str, min_length(3, "Titolo troppo corto"), max_length(10, "Titolo troppo lungo")]
    minutes: Annotated[int, number_range("Durata non valida", ge=1, le=180)] = 60
    tags: List[str] = []
    starts_at: Optional[IsoDateTime] = None
    link: Optional[Url] = None

    @model_validator(mode="after")
    def _no_short_tagged(self):
        if self.tags and self.minutes < 10:
            raise ValueError("Lezione troppo breve per avere tag")
        return self


class Course(BaseModel):
    name: str
    lessons: List[Lesson]


def test_validation_result_helpers():
    ok = ValidationResult.ok("RM")
    assert ok.valid is True
    assert ok.formatted_value == "RM"
    assert ok.error is None

    fail = ValidationResult.fail("Errore", field="city")
    assert fail.valid is False
    assert fail.field == "city"
    assert fail.formatted_value is None


def test_validation_result_invariants():
    with pytest.raises(ValidationError):
        ValidationResult(valid=False)
    with pytest.raises(ValidationError):
        ValidationResult(valid=False, error="x", formatted_value="y")


def test_validation_result_is_frozen():
    result = ValidationResult.ok()
    with pytest.raises(ValidationError):
        result.valid = False


def test_form_result_defaults():
    result = FormResult(success=False, errors={"city": "La città è obbligatoria"})
    assert result.data is None
    assert FormResult(success=True).errors == {}


def test_parse_schema_success_returns_model():
    result = parse_schema(Lesson, {"title": "Algebra"})
    assert result.success is True
    assert result.errors == {}
    assert result.data.minutes == 60


def test_parse_schema_custom_messages_have_no_prefix():
    result = parse_schema(Lesson, {"title": "ab", "minutes": 0})
    assert result.errors == {"title": "Titolo troppo corto", "minutes": "Durata non valida"}


def test_parse_schema_model_level_error_goes_to_root():
    result = parse_schema(Lesson, {"title": "Algebra", "minutes": 5, "tags": ["x"]})
    assert result.errors == {ROOT_ERROR_KEY: "Lezione troppo breve per avere tag"}


def test_parse_schema_nested_locations_are_dotted():
    result = parse_schema(Course, {"name": "Matematica", "lessons": [{"title": "Algebra"}, {"title": "x"}]})
    assert result.errors == {"lessons.1.title": "Titolo troppo corto"}


def test_parse_schema_with_type_adapter():
    adapter = TypeAdapter(List[Annotated[int, Field(ge=0)]])
    assert parse_schema(adapter, [1, 2]).data == [1, 2]
    assert "1" in parse_schema(adapter, [1, -2]).errors


def test_parse_schema_non_mapping_input():
    result = parse_schema(Lesson, "not a dict")
    assert result.success is False
    assert ROOT_ERROR_KEY in result.errors


def test_parse_schema_logs_rejections(caplog):
    with caplog.at_level(logging.DEBUG, logger="validations.schema"):
        parse_schema(Lesson, {"title": ""})
    assert "Lesson" in caplog.text


def test_flatten_errors_keeps_first_message_per_key():
    with pytest.raises(ValidationError) as excinfo:
        Course.model_validate({"lessons": "nope"})
    errors = flatten_errors(excinfo.value)
    assert set(errors) == {"name", "lessons"}
    assert all(isinstance(msg, str) and msg for msg in errors.values())


@pytest.mark.parametrize(
    "value",
    [
        "2025-01-01T10:00:00Z",
        "2025-01-01T10:00:00.123Z",
        "2025-01-01T10:00:00.1Z",
        "2025-01-01T10:00:00.12345Z",
        "2025-01-01T10:00:00.123456789Z",
        "2025-01-01T10:00:00+02:00",
        "2025-01-01T10:00:00-05:30",
    ],
)
def test_iso_datetime_accepts(value):
    assert parse_schema(Lesson, {"title": "Algebra", "starts_at": value}).success is True


@pytest.mark.parametrize(
    "value",
    ["2025-01-01", "2025-01-01T10:00:00", "2025-13-01T10:00:00Z", "01/01/2025 10:00", "2025-01-01 10:00:00Z"],
)
def test_iso_datetime_rejects(value):
    result = parse_schema(Lesson, {"title": "Algebra", "starts_at": value})
    assert result.errors == {"starts_at": "Data e ora non valide (formato ISO 8601 richiesto)"}


def test_parse_iso_datetime():
    assert parse_iso_datetime("2025-01-01T10:00:00Z") == datetime(2025, 1, 1, 10, tzinfo=timezone.utc)
    assert parse_iso_datetime("2025-01-01T10:00:00.5Z").microsecond == 500000
    assert parse_iso_datetime("2025-01-01T10:00:00.123456789+02:00").microsecond == 123456
    assert parse_iso_datetime("2025-01-01T10:00:00-05:30").utcoffset() == timedelta(hours=-5, minutes=-30)
    assert parse_iso_datetime("not-a-date") is None
    assert parse_iso_datetime("2025-02-30T10:00:00Z") is None


def test_url_is_kept_as_given():
    result = parse_schema(Lesson, {"title": "Algebra", "link": "https://example.com/video"})
    assert result.data.link == "https://example.com/video"
    assert parse_schema(Lesson, {"title": "Algebra", "link": "example"}).errors == {"link": "URL non valido"}


def test_partial_model_makes_every_field_optional():
    LessonUpdate = partial_model(Lesson, "LessonUpdate", id=(str, ...))
    update = LessonUpdate.model_validate({"id": "l1"})
    assert update.model_dump(exclude_unset=True) == {"id": "l1"}
    assert update.minutes is None
    assert update.tags is None


def test_partial_model_keeps_field_validators():
    LessonUpdate = partial_model(Lesson, "LessonUpdate")
    result = parse_schema(LessonUpdate, {"title": "ab", "minutes": 500})
    assert result.errors == {"title": "Titolo troppo corto", "minutes": "Durata non valida"}
    # Model-level rules of the source model are not carried over
    assert parse_schema(LessonUpdate, {"minutes": 5, "tags": ["x"]}).success is True
