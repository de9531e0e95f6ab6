"""
Text sanitizers for user-submitted strings.
"""

import re
from typing import Mapping, Optional, Union

from validations.schema import ContactFormData

HTML_TAG_PATTERN = re.compile(r"<[^>]*>")
DANGEROUS_CHARS_PATTERN = re.compile(r"[<>\"']")

CONTACT_FIELDS = ("name", "phone", "email", "subject", "message")


def sanitize_input(raw: Optional[str]) -> str:
    """
    Strip HTML tags and the characters < > " ', then trim.
    Idempotent: sanitizing an already sanitized string returns it unchanged.
    """
    if raw is None:
        return ""
    text = HTML_TAG_PATTERN.sub("", str(raw))
    text = DANGEROUS_CHARS_PATTERN.sub("", text)
    return text.strip()


def sanitize_contact_form(data: Union[ContactFormData, Mapping]) -> ContactFormData:
    """Sanitize every contact field. Missing fields become "", materia stays None when absent."""
    if isinstance(data, ContactFormData):
        data = data.model_dump()
    cleaned = {field: sanitize_input(data.get(field)) for field in CONTACT_FIELDS}
    if data.get("materia") is not None:
        cleaned["materia"] = sanitize_input(data["materia"])
    return ContactFormData(**cleaned)
