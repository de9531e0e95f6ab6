"""
Config-driven length and age rules for form fields.

Messages are part of the public contract: callers and tests compare them verbatim.

Adding a new bounded field: extend LENGTH_RULES and call get_length_rule from its validator.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class LengthRule:
    """Inclusive length bounds for a text field, with the message shown when they are violated."""

    min_length: int = 0
    max_length: Optional[int] = None
    message: str = ""

    def allows(self, length: int) -> bool:
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length


@dataclass(frozen=True)
class AgeRule:
    min_age: int = 14
    max_age: int = 100
    adult_age: int = 18


LENGTH_RULES: Dict[str, LengthRule] = {
    # Contact form
    "email": LengthRule(max_length=100, message="Email troppo lunga (max 100 caratteri)"),
    "phone": LengthRule(
        min_length=10,
        max_length=15,
        message="Numero di telefono non valido (10-15 cifre)",
    ),
    "name": LengthRule(min_length=8, max_length=100, message="Nome non valido (8-100 caratteri)"),
    "subject": LengthRule(min_length=6, max_length=200, message="Oggetto non valido (6-200 caratteri)"),
    "message": LengthRule(
        min_length=20,
        max_length=2000,
        message="Messaggio non valido (20-2000 caratteri)",
    ),
    "materia": LengthRule(min_length=2, message="Materia non valida"),
    # Profile / parent forms
    "nome": LengthRule(min_length=2, max_length=50),
    "citta": LengthRule(min_length=2, message="Il nome della città è troppo corto"),
    "indirizzo": LengthRule(min_length=5, message="L'indirizzo è troppo corto"),
    "telefono": LengthRule(
        min_length=9,
        max_length=10,
        message="Il numero di telefono deve avere 9-10 cifre",
    ),
}

AGE_RULE = AgeRule()


def get_length_rule(field: str) -> LengthRule:
    """Return the length rule for a field. Unknown fields are a programming error."""
    return LENGTH_RULES[field]
