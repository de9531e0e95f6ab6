#!/usr/bin/env python3
"""
Validate a JSON file of form/schema records and print a report.

Input is a list of {"kind": ..., "data": {...}} objects. Supported kinds:
contact, profile, parent, question, assignment, bulk_assignment, quick_quiz, simulation,
notification.

Usage:
    python scripts/validate_records.py records.json
    python scripts/validate_records.py records.json --only-invalid --output report.json

Exit code is 1 when at least one record is invalid.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from validations.config import configure_logging
from validations.form_validation import validate_contact_form
from validations.notification_validation import CreateNotification
from validations.profile_validation import validate_parent_guardian_form, validate_profile_form
from validations.question_validation import (
    CreateQuestion,
    validate_question_answers,
    validate_question_keywords,
)
from validations.sanitize import sanitize_contact_form
from validations.schema import parse_schema
from validations.simulation_validation import (
    AssignmentTarget,
    BulkAssignment,
    CreateSimulation,
    QuickQuizConfig,
)

logger = logging.getLogger(__name__)


def _contact(data: Dict[str, Any]) -> Dict[str, Any]:
    result = validate_contact_form(data)
    if not result.valid:
        return {"valid": False, "errors": {result.field or "form": result.error}}
    return {"valid": True, "errors": {}, "data": sanitize_contact_form(data).model_dump(exclude_none=True)}


def _form(validator: Callable) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    def run(data: Dict[str, Any]) -> Dict[str, Any]:
        result = validator(data)
        return {"valid": result.success, "errors": result.errors}
    return run


def _schema(schema: Any) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    def run(data: Dict[str, Any]) -> Dict[str, Any]:
        result = parse_schema(schema, data)
        return {"valid": result.success, "errors": result.errors}
    return run


def _question(data: Dict[str, Any]) -> Dict[str, Any]:
    result = parse_schema(CreateQuestion, data)
    if not result.success:
        return {"valid": False, "errors": result.errors}
    question = result.data
    errors = {}
    answers = validate_question_answers(question.type, question.answers)
    if not answers.valid:
        errors["answers"] = answers.error
    keywords = validate_question_keywords(question.type, question.open_validation_type, question.keywords)
    if not keywords.valid:
        errors["keywords"] = keywords.error
    return {"valid": not errors, "errors": errors}


VALIDATORS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "contact": _contact,
    "profile": _form(validate_profile_form),
    "parent": _form(validate_parent_guardian_form),
    "question": _question,
    "assignment": _schema(AssignmentTarget),
    "bulk_assignment": _schema(BulkAssignment),
    "quick_quiz": _schema(QuickQuizConfig),
    "simulation": _schema(CreateSimulation),
    "notification": _schema(CreateNotification),
}


def validate_record(kind: str, data: Any) -> Dict[str, Any]:
    validator = VALIDATORS.get(kind)
    if validator is None:
        return {"valid": False, "errors": {"kind": f"Unknown record kind: {kind!r}"}}
    if not isinstance(data, dict):
        return {"valid": False, "errors": {"data": "Record data must be an object"}}
    return validator(data)


def build_report(records: Iterable[Any], only_invalid: bool = False) -> Dict[str, Any]:
    rows: List[Dict[str, Any]] = []
    total = invalid = 0
    for index, record in enumerate(records):
        total += 1
        if isinstance(record, dict):
            kind = record.get("kind", "")
            outcome = validate_record(kind, record.get("data"))
        else:
            kind = ""
            outcome = {"valid": False, "errors": {"record": "Record must be an object"}}
        if not outcome["valid"]:
            invalid += 1
        elif only_invalid:
            continue
        rows.append({"index": index, "kind": kind, **outcome})
    return {"total": total, "valid": total - invalid, "invalid": invalid, "records": rows}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a JSON file of form and schema records.")
    parser.add_argument("input", type=Path, help="JSON file with a list of {kind, data} records")
    parser.add_argument("--output", type=Path, default=None, help="Write the report here instead of stdout")
    parser.add_argument("--only-invalid", action="store_true", help="Only list records that failed")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    records = json.loads(args.input.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        logger.error(f"{args.input} must contain a JSON list")
        return 2

    report = build_report(records, only_invalid=args.only_invalid)
    payload = json.dumps(report, indent=2, ensure_ascii=False, default=str)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        logger.info(f"Report written to {args.output}")
    else:
        print(payload)

    logger.info(f"{report['valid']}/{report['total']} records valid")
    return 1 if report["invalid"] else 0


if __name__ == "__main__":
    sys.exit(main())
