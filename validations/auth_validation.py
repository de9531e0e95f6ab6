"""
Credential helpers used by sign-up forms: a cheap email shape check and a password strength score.
"""

import re

from pydantic import BaseModel

MAX_EMAIL_LENGTH = 254

STRENGTH_LABELS = ("Molto debole", "Molto debole", "Debole", "Media", "Forte", "Molto forte")


class PasswordStrength(BaseModel):
    score: int
    label: str


def is_valid_email(email: str) -> bool:
    """
    Structural email check without a regex: one @ with something before it,
    and a dot at least two characters after the @ that is not the last character.
    """
    # Length cap first so oversized input is rejected before scanning
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False
    if any(ord(ch) <= 32 or ord(ch) == 127 for ch in email):
        return False

    at = email.find("@")
    if at < 1 or at == len(email) - 1:
        return False
    if email.find("@", at + 1) != -1:
        return False

    dot = email.rfind(".")
    if dot < at + 2 or dot == len(email) - 1:
        return False
    return True


def calculate_password_strength(password: str) -> PasswordStrength:
    """Score 0-5: length >= 8, length >= 12, mixed case, a digit, a symbol."""
    score = 0
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    if re.search(r"[a-z]", password) and re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"\d", password):
        score += 1
    if re.search(r"[^a-zA-Z0-9]", password):
        score += 1
    return PasswordStrength(score=score, label=STRENGTH_LABELS[score])
