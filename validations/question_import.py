"""
Spreadsheet import: turns ImportQuestionRow records into CreateQuestion payloads.

Rows are validated one by one; a bad row is reported with its 1-based number and
never stops the batch.
"""

import logging
import string
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from validations.question_validation import (
    CreateQuestion,
    DifficultyLevel,
    ImportQuestionRow,
    QuestionAnswer,
    QuestionKeyword,
    QuestionStatus,
    validate_question_answers,
    validate_question_keywords,
)
from validations.schema import ROOT_ERROR_KEY, SchemaResult, parse_schema

logger = logging.getLogger(__name__)

ANSWER_COLUMNS = ("answer_a", "answer_b", "answer_c", "answer_d", "answer_e")


class ImportRowError(BaseModel):
    row: int
    error: str


class ImportReport(BaseModel):
    imported: int = 0
    skipped: int = 0
    questions: List[CreateQuestion] = []
    errors: List[ImportRowError] = []


def build_import_answers(row: ImportQuestionRow) -> List[QuestionAnswer]:
    """
    Answers from columns A-E. Empty columns are skipped but keep their letter,
    so "A,C" in correct_answers always refers to the same columns.
    """
    correct = {s.strip() for s in (row.correct_answers or "").upper().split(",")}
    answers = []
    for idx, column in enumerate(ANSWER_COLUMNS):
        text = getattr(row, column)
        if not text:
            continue
        label = string.ascii_uppercase[idx]
        answers.append(QuestionAnswer(text=text, is_correct=label in correct, order=idx, label=label))
    return answers


def build_import_keywords(keywords: Optional[str]) -> List[QuestionKeyword]:
    if not keywords:
        return []
    words = [k.strip() for k in keywords.split(",")]
    return [QuestionKeyword(keyword=k, weight=1) for k in words if k]


def parse_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def match_subject_id(
    subject_code: Optional[str],
    default_subject_id: Optional[str],
    subject_by_code: Mapping[str, str],
) -> Optional[str]:
    """Subject id for a code (case-insensitive), or the default when the code is missing or unknown."""
    if not subject_code:
        return default_subject_id
    return subject_by_code.get(subject_code.upper(), default_subject_id)


def match_topic_id(
    topic_name: Optional[str],
    subject_id: Optional[str],
    topics: Iterable[Mapping[str, str]],
) -> Optional[str]:
    """Topic id by case-insensitive name within the given subject."""
    if not topic_name or not subject_id:
        return None
    wanted = topic_name.lower()
    for topic in topics:
        if topic["subject_id"] == subject_id and topic["name"].lower() == wanted:
            return topic["id"]
    return None


def import_row_to_question(
    raw: Any,
    default_subject_id: Optional[str] = None,
    subject_by_code: Optional[Mapping[str, str]] = None,
    topics: Iterable[Mapping[str, str]] = (),
) -> SchemaResult:
    """
    Validate one raw row and build a draft CreateQuestion from it.

    Returns SchemaResult with the question on success. Structural errors are keyed
    by field; answer or keyword rule failures are reported under __root__.
    """
    parsed = parse_schema(ImportQuestionRow, raw)
    if not parsed.success:
        return parsed
    row: ImportQuestionRow = parsed.data

    subject_id = match_subject_id(row.subject_code, default_subject_id, subject_by_code or {})
    payload: Dict[str, Any] = {
        "text": row.text,
        "type": row.type,
        "status": QuestionStatus.DRAFT,
        "difficulty": row.difficulty or DifficultyLevel.MEDIUM,
        "subject_id": subject_id,
        "topic_id": match_topic_id(row.topic_name, subject_id, topics),
        "points": row.points if row.points is not None else 1,
        "negative_points": row.negative_points if row.negative_points is not None else 0,
        "correct_explanation": row.correct_explanation,
        "wrong_explanation": row.wrong_explanation,
        "tags": parse_tags(row.tags),
        "year": row.year,
        "source": row.source,
        "external_id": row.external_id,
        "answers": build_import_answers(row),
        "keywords": build_import_keywords(row.keywords),
    }
    built = parse_schema(CreateQuestion, payload)
    if not built.success:
        return built
    question: CreateQuestion = built.data

    for check in (
        validate_question_answers(question.type, question.answers),
        validate_question_keywords(question.type, question.open_validation_type, question.keywords),
    ):
        if not check.valid:
            return SchemaResult(success=False, errors={ROOT_ERROR_KEY: check.error})

    return built


def _first_error(result: SchemaResult) -> str:
    key, message = next(iter(result.errors.items()))
    return message if key == ROOT_ERROR_KEY else f"{key}: {message}"


def import_rows(
    rows: Iterable[Any],
    default_subject_id: Optional[str] = None,
    subject_by_code: Optional[Mapping[str, str]] = None,
    topics: Iterable[Mapping[str, str]] = (),
    existing_external_ids: Collection[str] = (),
    skip_duplicates: bool = True,
) -> ImportReport:
    """
    Validate a batch of rows.

    Rows whose external_id is already in existing_external_ids are skipped when
    skip_duplicates is set. Invalid rows are collected in errors with their 1-based row number.
    """
    topics = list(topics)
    report = ImportReport()
    for number, raw in enumerate(rows, start=1):
        external_id = raw.get("external_id") if isinstance(raw, Mapping) else None
        if skip_duplicates and external_id and external_id in existing_external_ids:
            report.skipped += 1
            continue

        result = import_row_to_question(raw, default_subject_id, subject_by_code, topics)
        if result.success:
            report.questions.append(result.data)
            report.imported += 1
        else:
            report.errors.append(ImportRowError(row=number, error=_first_error(result)))

    logger.info(
        f"Question import: {report.imported} imported, {report.skipped} skipped, "
        f"{len(report.errors)} failed"
    )
    return report
