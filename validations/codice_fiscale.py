"""
Italian fiscal code (codice fiscale) checksum and calculation.

The check character is derived from the first 15 characters: characters at odd
positions (1-indexed) are mapped through ODD_VALUES, those at even positions
through EVEN_VALUES, and the sum modulo 26 selects a letter A-Z.
"""

import logging
import re
import string
from datetime import date
from typing import List, Optional

from validations.reference_data import COMUNI_CATASTALI, MESI_CODICE_FISCALE

logger = logging.getLogger(__name__)

CODICE_FISCALE_PATTERN = re.compile(r"^[A-Z]{6}[0-9]{2}[A-Z][0-9]{2}[A-Z][0-9]{3}[A-Z]$")

EVEN_VALUES = {
    **{d: int(d) for d in string.digits},
    **{c: i for i, c in enumerate(string.ascii_uppercase)},
}

_ODD_DIGITS = [1, 0, 5, 7, 9, 13, 15, 17, 19, 21]
_ODD_LETTERS = [
    1, 0, 5, 7, 9, 13, 15, 17, 19, 21, 2, 4, 18,
    20, 11, 3, 6, 8, 12, 14, 16, 10, 22, 25, 24, 23,
]
ODD_VALUES = {
    **dict(zip(string.digits, _ODD_DIGITS)),
    **dict(zip(string.ascii_uppercase, _ODD_LETTERS)),
}

_CONSONANTS = re.compile(r"[^BCDFGHJKLMNPQRSTVWXYZ]")
_VOWELS = re.compile(r"[^AEIOU]")


def compute_check_character(partial: str) -> str:
    """Return the check letter for the first 15 characters of a fiscal code."""
    total = 0
    for i, char in enumerate(partial[:15]):
        # 0-based even index is an odd position in the official numbering
        table = ODD_VALUES if i % 2 == 0 else EVEN_VALUES
        total += table[char]
    return string.ascii_uppercase[total % 26]


def has_valid_check_character(code: str) -> bool:
    """True if code is structurally valid and its 16th character matches the checksum."""
    if not CODICE_FISCALE_PATTERN.match(code or ""):
        return False
    return compute_check_character(code[:15]) == code[15]


def _consonants(text: str) -> str:
    return _CONSONANTS.sub("", text.upper())


def _vowels(text: str) -> str:
    return _VOWELS.sub("", text.upper())


def _surname_code(cognome: str) -> str:
    return (_consonants(cognome) + _vowels(cognome) + "XXX")[:3]


def _name_code(nome: str) -> str:
    consonants = _consonants(nome)
    if len(consonants) > 3:
        return consonants[0] + consonants[2] + consonants[3]
    return (consonants + _vowels(nome) + "XXX")[:3]


def _date_code(data_nascita: date, sesso: str) -> str:
    day = data_nascita.day + (40 if sesso == "F" else 0)
    return f"{data_nascita.year % 100:02d}{MESI_CODICE_FISCALE[data_nascita.month]}{day:02d}"


def calcola_codice_fiscale(
    nome: Optional[str],
    cognome: Optional[str],
    data_nascita: Optional[date],
    sesso: Optional[str],
    comune_nascita: Optional[str],
) -> Optional[str]:
    """
    Compute the fiscal code from personal data.

    Args:
        nome: Given name
        cognome: Family name
        data_nascita: Date of birth
        sesso: "M" or "F"
        comune_nascita: Municipality of birth (must be in COMUNI_CATASTALI)

    Returns:
        The 16-character code, or None when data is incomplete or the municipality
        is not supported (the user must then type the code manually).
    """
    if not nome or not cognome or not data_nascita or not sesso or not comune_nascita:
        return None

    comune = comune_nascita.strip().upper()
    codice_catastale = COMUNI_CATASTALI.get(comune)
    if codice_catastale is None:
        logger.warning(f"Comune '{comune}' not supported for fiscal code calculation")
        return None

    partial = _surname_code(cognome) + _name_code(nome) + _date_code(data_nascita, sesso) + codice_catastale
    return partial + compute_check_character(partial)


def is_comune_supportato(comune: str) -> bool:
    return comune.strip().upper() in COMUNI_CATASTALI


def get_comuni_supportati() -> List[str]:
    return sorted(COMUNI_CATASTALI)
