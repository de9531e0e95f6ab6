"""
Unit tests for fiscal code checksum and calculation.
"""

import unittest
from datetime import date

from validations.codice_fiscale import (
    calcola_codice_fiscale,
    compute_check_character,
    get_comuni_supportati,
    has_valid_check_character,
    is_comune_supportato,
)
from validations.profile_validation import validate_codice_fiscale
from validations.reference_data import COMUNI_CATASTALI


class TestCheckCharacter(unittest.TestCase):

    def test_known_codes(self):
        """Check letters of hand-verified codes."""
        self.assertEqual(compute_check_character("RSSMRA80A01H501"), "U")
        self.assertEqual(compute_check_character("BNCLRD85M10H501"), "A")
        self.assertEqual(compute_check_character("VRDGPP90B15F205"), "M")

    def test_has_valid_check_character(self):
        self.assertTrue(has_valid_check_character("RSSMRA85M01H501Q"))
        self.assertFalse(has_valid_check_character("RSSMRA85M01H501A"))
        # Lowercase or malformed input is not accepted here
        self.assertFalse(has_valid_check_character("rssmra85m01h501q"))
        self.assertFalse(has_valid_check_character(""))
        self.assertFalse(has_valid_check_character(None))


class TestCalcolaCodiceFiscale(unittest.TestCase):

    def test_male_born_in_rome(self):
        self.assertEqual(
            calcola_codice_fiscale("Mario", "Rossi", date(1980, 1, 1), "M", "Roma"),
            "RSSMRA80A01H501U",
        )

    def test_female_day_is_shifted_by_40(self):
        code = calcola_codice_fiscale("Maria", "Bianchi", date(1990, 5, 15), "F", "Milano")
        self.assertEqual(code, "BNCMRA90E55F205F")
        self.assertEqual(code[9:11], "55")

    def test_long_name_skips_second_consonant(self):
        """Names with more than three consonants use the 1st, 3rd and 4th."""
        code = calcola_codice_fiscale("Gianfranco", "Verdi", date(1975, 3, 10), "M", "firenze")
        self.assertEqual(code, "VRDGFR75C10D612T")

    def test_short_names_are_padded(self):
        code = calcola_codice_fiscale("Al", "Fo", date(2001, 12, 3), "M", "Roma")
        self.assertEqual(code[:6], "FOXLAX")
        self.assertEqual(code[6:11], "01T03")

        code = calcola_codice_fiscale("Luca", "Ugo", date(2001, 12, 3), "M", "Roma")
        self.assertEqual(code[:6], "GUOLCU")

    def test_missing_data_returns_none(self):
        self.assertIsNone(calcola_codice_fiscale("", "Rossi", date(1980, 1, 1), "M", "Roma"))
        self.assertIsNone(calcola_codice_fiscale("Mario", None, date(1980, 1, 1), "M", "Roma"))
        self.assertIsNone(calcola_codice_fiscale("Mario", "Rossi", None, "M", "Roma"))
        self.assertIsNone(calcola_codice_fiscale("Mario", "Rossi", date(1980, 1, 1), "", "Roma"))
        self.assertIsNone(calcola_codice_fiscale("Mario", "Rossi", date(1980, 1, 1), "M", ""))

    def test_unsupported_comune_logs_and_returns_none(self):
        with self.assertLogs("validations.codice_fiscale", level="WARNING") as captured:
            result = calcola_codice_fiscale("Mario", "Rossi", date(1980, 1, 1), "M", "Atlantide")
        self.assertIsNone(result)
        self.assertIn("ATLANTIDE", captured.output[0])

    def test_every_computed_code_passes_the_validator(self):
        """Whatever the calculator emits, validate_codice_fiscale accepts unchanged."""
        people = [
            ("Mario", "Rossi", date(1980, 1, 1), "M"),
            ("Maria", "Bianchi", date(1990, 5, 15), "F"),
            ("Al", "Fo", date(2001, 12, 31), "F"),
            ("Gianfranco", "D'Angelo", date(1969, 7, 20), "M"),
        ]
        for comune in COMUNI_CATASTALI:
            for nome, cognome, nascita, sesso in people:
                code = calcola_codice_fiscale(nome, cognome, nascita, sesso, comune)
                result = validate_codice_fiscale(code)
                self.assertTrue(result.valid, f"{code} rejected for {comune}")
                self.assertEqual(result.formatted_value, code)


class TestComuni(unittest.TestCase):

    def test_is_comune_supportato(self):
        self.assertTrue(is_comune_supportato("Roma"))
        self.assertTrue(is_comune_supportato("  milano "))
        self.assertTrue(is_comune_supportato("Forlì"))
        self.assertFalse(is_comune_supportato("Atlantide"))

    def test_get_comuni_supportati_is_sorted(self):
        comuni = get_comuni_supportati()
        self.assertEqual(comuni, sorted(comuni))
        self.assertEqual(len(comuni), len(COMUNI_CATASTALI))
        self.assertIn("ROMA", comuni)


if __name__ == "__main__":
    unittest.main()
