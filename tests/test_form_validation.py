"""
Contact form validation: primitive validators and fail-fast form order.
"""

import pytest

from validations.form_validation import (
    validate_contact_form,
    validate_email,
    validate_message,
    validate_name,
    validate_phone,
    validate_subject,
)


def _base_form(**overrides):
    base = {
        "name": "Mario Rossi",
        "email": "mario.rossi@example.com",
        "phone": "+39 340 123 4567",
        "subject": "Richiesta informazioni",
        "message": "Vorrei avere maggiori informazioni sui corsi di preparazione.",
    }
    base.update(overrides)
    return base


def test_validate_email_accepts_plain_address():
    result = validate_email("test@example.com")
    assert result.valid is True
    assert result.error is None


@pytest.mark.parametrize("email", ["test@", "testexample.com", "test @example.com", "@example.com", "test@example"])
def test_validate_email_rejects_malformed(email):
    result = validate_email(email)
    assert result.valid is False
    assert result.error == "Formato email non valido"
    assert result.field == "email"


def test_validate_email_missing_and_too_long():
    assert validate_email("").error == "Email obbligatoria"
    too_long = "a" * 95 + "@x.com"
    assert len(too_long) == 101
    assert validate_email(too_long).error == "Email troppo lunga (max 100 caratteri)"


@pytest.mark.parametrize("phone", ["3401234567", "+39 340 123 4567", "340-123-4567", "+393401234567"])
def test_validate_phone_accepts(phone):
    assert validate_phone(phone).valid is True


def test_validate_phone_nine_digits_is_too_short():
    result = validate_phone("123456789")
    assert result.valid is False
    assert result.error == "Numero di telefono non valido (10-15 cifre)"
    assert result.field == "phone"


def test_validate_phone_sixteen_digits_is_too_long():
    assert validate_phone("1234567890123456").error == "Numero di telefono non valido (10-15 cifre)"


@pytest.mark.parametrize("phone", ["340.123.4567", "(340) 1234567", "abcdefghij"])
def test_validate_phone_rejects_other_characters(phone):
    result = validate_phone(phone)
    assert result.valid is False
    assert result.error == "Il numero può contenere solo cifre, +, - e spazi"


def test_validate_phone_required():
    assert validate_phone("").error == "Telefono obbligatorio"


@pytest.mark.parametrize("name", ["Mario Rossi", "José Müller", "Mario D'Angelo", "Niccolò Façade"])
def test_validate_name_accepts_unicode_letters(name):
    assert validate_name(name).valid is True


@pytest.mark.parametrize("name", ["Mario123 Rossi", "Mario 😀 Rossi", "Mario_Rossi!", "Mario-Rossi"])
def test_validate_name_rejects_non_letters(name):
    result = validate_name(name)
    assert result.valid is False
    assert result.error == "Il nome può contenere solo lettere"


def test_validate_name_length_bounds():
    assert validate_name("Rossi").error == "Nome non valido (8-100 caratteri)"
    assert validate_name("A" * 101).error == "Nome non valido (8-100 caratteri)"
    assert validate_name("A" * 8).valid is True
    assert validate_name("").error == "Nome obbligatorio"


def test_validate_subject_and_message_bounds():
    assert validate_subject("Ciao").error == "Oggetto non valido (6-200 caratteri)"
    assert validate_subject("Ciao!!").valid is True
    assert validate_subject("").field == "subject"
    assert validate_message("Troppo breve").error == "Messaggio non valido (20-2000 caratteri)"
    assert validate_message("x" * 2001).valid is False
    assert validate_message("x" * 20).valid is True
    assert validate_message("").error == "Messaggio obbligatorio"


def test_contact_form_happy_path():
    assert validate_contact_form(_base_form()).valid is True


def test_contact_form_any_empty_field_gives_generic_error():
    result = validate_contact_form(_base_form(subject=""))
    assert result.valid is False
    assert result.error == "Tutti i campi sono obbligatori"
    assert result.field is None


def test_contact_form_missing_key_gives_generic_error():
    form = _base_form()
    del form["message"]
    assert validate_contact_form(form).error == "Tutti i campi sono obbligatori"


def test_contact_form_reports_first_failure_in_fixed_order():
    # name is checked before email, email before phone
    result = validate_contact_form(_base_form(name="Bob", email="bad", phone="12"))
    assert result.field == "name"

    result = validate_contact_form(_base_form(email="bad", phone="12"))
    assert result.field == "email"

    result = validate_contact_form(_base_form(phone="12", message="corto"))
    assert result.field == "phone"

    result = validate_contact_form(_base_form(subject="abc", message="corto"))
    assert result.field == "subject"

    result = validate_contact_form(_base_form(message="corto"))
    assert result.field == "message"


@pytest.mark.parametrize("materia", ["", "M"])
def test_contact_form_short_materia_is_rejected(materia):
    result = validate_contact_form(_base_form(materia=materia))
    assert result.valid is False
    assert result.error == "Materia non valida"
    assert result.field == "materia"


def test_contact_form_valid_materia_and_absent_materia():
    assert validate_contact_form(_base_form(materia="Matematica")).valid is True
    assert validate_contact_form(_base_form(materia=None)).valid is True
