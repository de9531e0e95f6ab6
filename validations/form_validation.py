"""
Contact form validation: primitive field validators plus a fail-fast form check.

Every validator returns a ValidationResult whose field names the offending input,
so callers can render the error next to the right widget.
"""

import logging
import re
from typing import Mapping, Union

from validations.schema import ContactFormData, ValidationResult
from validations.validation_config import get_length_rule

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_CHARS_PATTERN = re.compile(r"[0-9+\s\-]+")
PHONE_SEPARATORS_PATTERN = re.compile(r"[\s\-+]")


def is_letters_only(text: str, extra: str = "") -> bool:
    """True if every character is a Unicode letter, whitespace, or one of extra."""
    return all(ch.isalpha() or ch.isspace() or ch in extra for ch in text)


def validate_email(email: str) -> ValidationResult:
    if not email:
        return ValidationResult.fail("Email obbligatoria", "email")
    rule = get_length_rule("email")
    if not rule.allows(len(email)):
        return ValidationResult.fail(rule.message, "email")
    if not EMAIL_PATTERN.fullmatch(email):
        return ValidationResult.fail("Formato email non valido", "email")
    return ValidationResult.ok()


def validate_phone(phone: str) -> ValidationResult:
    """Generic phone: 10-15 digits once spaces, dashes and plus signs are removed."""
    if not phone:
        return ValidationResult.fail("Telefono obbligatorio", "phone")
    rule = get_length_rule("phone")
    digits = PHONE_SEPARATORS_PATTERN.sub("", phone)
    if not rule.allows(len(digits)):
        return ValidationResult.fail(rule.message, "phone")
    if not PHONE_CHARS_PATTERN.fullmatch(phone):
        return ValidationResult.fail("Il numero può contenere solo cifre, +, - e spazi", "phone")
    return ValidationResult.ok()


def validate_name(name: str) -> ValidationResult:
    """Full person name: 8-100 chars of letters (accents allowed), spaces and apostrophes."""
    if not name:
        return ValidationResult.fail("Nome obbligatorio", "name")
    rule = get_length_rule("name")
    if not rule.allows(len(name)):
        return ValidationResult.fail(rule.message, "name")
    if not is_letters_only(name, extra="'"):
        return ValidationResult.fail("Il nome può contenere solo lettere", "name")
    return ValidationResult.ok()


def validate_subject(subject: str) -> ValidationResult:
    if not subject:
        return ValidationResult.fail("Oggetto obbligatorio", "subject")
    rule = get_length_rule("subject")
    if not rule.allows(len(subject)):
        return ValidationResult.fail(rule.message, "subject")
    return ValidationResult.ok()


def validate_message(message: str) -> ValidationResult:
    if not message:
        return ValidationResult.fail("Messaggio obbligatorio", "message")
    rule = get_length_rule("message")
    if not rule.allows(len(message)):
        return ValidationResult.fail(rule.message, "message")
    return ValidationResult.ok()


def validate_contact_form(data: Union[ContactFormData, Mapping]) -> ValidationResult:
    """
    Fail-fast validation of a whole contact form.

    Order: required check, then name, email, phone, subject, message, and finally
    the optional materia. The first failure is returned as is.
    """
    form = data if isinstance(data, ContactFormData) else ContactFormData(**data)

    if not all([form.name, form.phone, form.email, form.subject, form.message]):
        logger.debug("Contact form rejected: missing required fields")
        return ValidationResult.fail("Tutti i campi sono obbligatori")

    checks = (
        (validate_name, form.name),
        (validate_email, form.email),
        (validate_phone, form.phone),
        (validate_subject, form.subject),
        (validate_message, form.message),
    )
    for validator, value in checks:
        result = validator(value)
        if not result.valid:
            logger.debug(f"Contact form rejected on field '{result.field}'")
            return result

    if form.materia is not None:
        rule = get_length_rule("materia")
        if not rule.allows(len(form.materia)):
            return ValidationResult.fail(rule.message, "materia")

    return ValidationResult.ok()
