"""
Italian profile data: validators that also normalize the value they accept.

Each single-field validator returns ValidationResult with formatted_value set on
success. The two form validators run every field and collect all errors.
"""

import logging
import re
from datetime import date, datetime
from typing import Mapping, Optional, Union

from validations.codice_fiscale import CODICE_FISCALE_PATTERN, has_valid_check_character
from validations.form_validation import EMAIL_PATTERN, is_letters_only
from validations.reference_data import is_provincia
from validations.schema import FormResult, ValidatedParentData, ValidatedProfileData, ValidationResult
from validations.validation_config import AGE_RULE, get_length_rule

logger = logging.getLogger(__name__)

PARENT_RELATIONSHIP_TYPES = (
    {"value": "PADRE", "label": "Padre"},
    {"value": "MADRE", "label": "Madre"},
    {"value": "TUTORE_LEGALE", "label": "Tutore legale"},
    {"value": "ALTRO", "label": "Altro"},
)
_RELATIONSHIP_VALUES = frozenset(t["value"] for t in PARENT_RELATIONSHIP_TYPES)

_WORD_START = re.compile(r"(^|[\s'\-])(\w)")

DateInput = Union[str, date, datetime, None]


def validate_codice_fiscale(value: Optional[str]) -> ValidationResult:
    cleaned = re.sub(r"\s", "", value or "").upper()
    if not cleaned:
        return ValidationResult.fail("Il codice fiscale è obbligatorio")
    if len(cleaned) != 16:
        return ValidationResult.fail("Il codice fiscale deve essere di 16 caratteri")
    if not CODICE_FISCALE_PATTERN.match(cleaned):
        return ValidationResult.fail("Formato codice fiscale non valido")
    if not has_valid_check_character(cleaned):
        return ValidationResult.fail("Codice fiscale non valido (carattere di controllo errato)")
    return ValidationResult.ok(cleaned)


def validate_telefono(value: Optional[str]) -> ValidationResult:
    """
    Italian phone number. Accepts +39, 0039 or bare national numbers.
    Returns the number as "+39 XXX XXX XXXX".
    """
    cleaned = re.sub(r"[^\d+]", "", value or "")
    if not cleaned:
        return ValidationResult.fail("Il numero di telefono è obbligatorio")

    if cleaned.startswith("+39"):
        cleaned = cleaned[3:]
    elif cleaned.startswith("0039"):
        cleaned = cleaned[4:]

    if not cleaned.isdigit():
        return ValidationResult.fail("Il numero di telefono contiene caratteri non validi")

    rule = get_length_rule("telefono")
    if not rule.allows(len(cleaned)):
        return ValidationResult.fail(rule.message)

    return ValidationResult.ok(f"+39 {cleaned[:3]} {cleaned[3:6]} {cleaned[6:]}")


def validate_cap(value: Optional[str]) -> ValidationResult:
    cleaned = re.sub(r"\D", "", value or "")
    if not cleaned:
        return ValidationResult.fail("Il CAP è obbligatorio")
    if len(cleaned) != 5:
        return ValidationResult.fail("Il CAP deve essere di 5 cifre")
    # Italian CAPs range from 00010 to 98168
    if not 10 <= int(cleaned) <= 98168:
        return ValidationResult.fail("CAP non valido")
    return ValidationResult.ok(cleaned)


def validate_provincia(value: Optional[str]) -> ValidationResult:
    cleaned = re.sub(r"\s", "", value or "").upper()
    if not cleaned:
        return ValidationResult.fail("La provincia è obbligatoria")
    if len(cleaned) != 2:
        return ValidationResult.fail("La provincia deve essere di 2 lettere (es. RM)")
    if not is_provincia(cleaned):
        return ValidationResult.fail("Sigla provincia non valida")
    return ValidationResult.ok(cleaned)


def _capitalize_words(text: str, keep_numeric: bool = False) -> str:
    words = []
    for word in text.lower().split(" "):
        if keep_numeric and word[:1].isdigit():
            words.append(word)
        else:
            words.append(word[:1].upper() + word[1:])
    return " ".join(words)


def format_citta(value: Optional[str]) -> ValidationResult:
    """Title-case a city name: reggio emilia -> Reggio Emilia."""
    cleaned = (value or "").strip()
    if not cleaned:
        return ValidationResult.fail("La città è obbligatoria")
    rule = get_length_rule("citta")
    if not rule.allows(len(cleaned)):
        return ValidationResult.fail(rule.message)
    return ValidationResult.ok(_capitalize_words(cleaned))


def format_indirizzo(value: Optional[str]) -> ValidationResult:
    """Title-case an address (via roma 123 -> Via Roma 123). Words starting with a digit are kept."""
    cleaned = (value or "").strip()
    if not cleaned:
        return ValidationResult.fail("L'indirizzo è obbligatorio")
    rule = get_length_rule("indirizzo")
    if not rule.allows(len(cleaned)):
        return ValidationResult.fail(rule.message)
    return ValidationResult.ok(_capitalize_words(cleaned, keep_numeric=True))


def _parse_date(value: DateInput) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def calculate_age(value: DateInput, today: Optional[date] = None) -> int:
    """
    Age in whole years on `today` (defaults to the current date).
    Raises ValueError if value cannot be read as a date.
    """
    birth = _parse_date(value)
    today = today or date.today()
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def is_minor(value: DateInput, today: Optional[date] = None) -> bool:
    return calculate_age(value, today) < AGE_RULE.adult_age


def validate_data_nascita(value: DateInput, today: Optional[date] = None) -> ValidationResult:
    """Date of birth for a registering user: age must be 14-100."""
    if not value:
        return ValidationResult.fail("La data di nascita è obbligatoria")

    if isinstance(value, str):
        # A full ISO timestamp is accepted; only its date part is read
        parts = re.split(r"[T ]", value.strip(), maxsplit=1)[0].split("-")
        if len(parts) != 3:
            return ValidationResult.fail("Formato data non valido")
        try:
            birth = date(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return ValidationResult.fail("Data di nascita non valida")
    else:
        try:
            birth = _parse_date(value)
        except ValueError:
            return ValidationResult.fail("Formato data non valido")

    age = calculate_age(birth, today)
    if age < AGE_RULE.min_age:
        return ValidationResult.fail("Devi avere almeno 14 anni per registrarti")
    if age > AGE_RULE.max_age:
        return ValidationResult.fail("Data di nascita non valida")
    return ValidationResult.ok(birth.isoformat())


def validate_nome(value: Optional[str], field_name: str = "nome") -> ValidationResult:
    """
    Single given or family name. field_name is substituted into error messages
    (e.g. "cognome"). Normalizes to title case, also after apostrophes and hyphens.
    """
    cleaned = (value or "").strip()
    if not cleaned:
        return ValidationResult.fail(f"Il {field_name} è obbligatorio")
    rule = get_length_rule("nome")
    if len(cleaned) < rule.min_length:
        return ValidationResult.fail(f"Il {field_name} è troppo corto")
    if len(cleaned) > rule.max_length:
        return ValidationResult.fail(f"Il {field_name} è troppo lungo")
    if not is_letters_only(cleaned, extra="'-"):
        return ValidationResult.fail(f"Il {field_name} contiene caratteri non validi")

    formatted = _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), cleaned.lower())
    return ValidationResult.ok(formatted)


def validate_relationship(value: Optional[str]) -> ValidationResult:
    if not value:
        return ValidationResult.fail("Il tipo di relazione è obbligatorio")
    if value not in _RELATIONSHIP_VALUES:
        return ValidationResult.fail("Tipo di relazione non valido")
    return ValidationResult.ok(value)


def validate_email_optional(value: Optional[str]) -> ValidationResult:
    """Blank means not provided and is valid. Otherwise lower-cased and checked."""
    cleaned = (value or "").strip()
    if not cleaned:
        return ValidationResult.ok()
    cleaned = cleaned.lower()
    if not EMAIL_PATTERN.fullmatch(cleaned):
        return ValidationResult.fail("Formato email non valido")
    return ValidationResult.ok(cleaned)


def validate_profile_form(data: Mapping, today: Optional[date] = None) -> FormResult:
    """
    Validate every profile field and collect all failures.

    Expected keys: fiscal_code, date_of_birth, phone, address, city, province, postal_code.
    """
    results = {
        "fiscal_code": validate_codice_fiscale(data.get("fiscal_code")),
        "date_of_birth": validate_data_nascita(data.get("date_of_birth"), today),
        "phone": validate_telefono(data.get("phone")),
        "address": format_indirizzo(data.get("address")),
        "city": format_citta(data.get("city")),
        "province": validate_provincia(data.get("province")),
        "postal_code": validate_cap(data.get("postal_code")),
    }
    errors = {key: r.error for key, r in results.items() if not r.valid}
    if errors:
        logger.debug(f"Profile form rejected: {sorted(errors)}")
        return FormResult(success=False, errors=errors)

    values = {key: r.formatted_value for key, r in results.items()}
    values["date_of_birth"] = date.fromisoformat(values["date_of_birth"])
    return FormResult(success=True, data=ValidatedProfileData(**values))


_OPTIONAL_PARENT_FIELDS = {
    "email": validate_email_optional,
    "address": format_indirizzo,
    "city": format_citta,
    "province": validate_provincia,
    "postal_code": validate_cap,
}


def validate_parent_guardian_form(data: Mapping) -> FormResult:
    """
    Validate a parent/guardian record and collect all failures.

    relationship, first_name, last_name, fiscal_code and phone are required.
    email, address, city, province and postal_code are checked only when not blank.
    """
    results = {
        "relationship": validate_relationship(data.get("relationship")),
        "first_name": validate_nome(data.get("first_name"), "nome"),
        "last_name": validate_nome(data.get("last_name"), "cognome"),
        "fiscal_code": validate_codice_fiscale(data.get("fiscal_code")),
        "phone": validate_telefono(data.get("phone")),
    }
    for key, validator in _OPTIONAL_PARENT_FIELDS.items():
        raw = data.get(key)
        if raw is not None and str(raw).strip():
            results[key] = validator(raw)

    errors = {key: r.error for key, r in results.items() if not r.valid}
    if errors:
        logger.debug(f"Parent/guardian form rejected: {sorted(errors)}")
        return FormResult(success=False, errors=errors)

    values = {key: r.formatted_value for key, r in results.items()}
    return FormResult(success=True, data=ValidatedParentData(**values))
