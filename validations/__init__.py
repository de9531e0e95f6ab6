"""
Validation layer for the platform admin: pure validators and schemas for
contact forms, Italian profile data, questions and simulations.

Validators report invalid input through the returned result instead of raising.
"""

from validations.form_validation import validate_contact_form
from validations.profile_validation import (
    PARENT_RELATIONSHIP_TYPES,
    calculate_age,
    is_minor,
    validate_codice_fiscale,
    validate_parent_guardian_form,
    validate_profile_form,
)
from validations.question_validation import validate_question_answers, validate_question_keywords
from validations.reference_data import PROVINCE_ITALIANE
from validations.sanitize import sanitize_contact_form, sanitize_input
from validations.schema import FormResult, SchemaResult, ValidationResult, parse_schema
from validations.simulation_validation import (
    SIMULATION_PRESETS,
    get_difficulty_ratios,
    validate_date_range,
    validate_passing_score,
    validate_question_distribution,
)

__all__ = [
    "FormResult",
    "PARENT_RELATIONSHIP_TYPES",
    "PROVINCE_ITALIANE",
    "SIMULATION_PRESETS",
    "SchemaResult",
    "ValidationResult",
    "calculate_age",
    "get_difficulty_ratios",
    "is_minor",
    "parse_schema",
    "sanitize_contact_form",
    "sanitize_input",
    "validate_codice_fiscale",
    "validate_contact_form",
    "validate_date_range",
    "validate_parent_guardian_form",
    "validate_passing_score",
    "validate_profile_form",
    "validate_question_answers",
    "validate_question_distribution",
    "validate_question_keywords",
]
