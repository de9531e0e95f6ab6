"""
Upload checks: size limits, MIME allow-lists, dangerous extensions and filename cleanup.
"""

import logging
import re
from types import MappingProxyType
from typing import Mapping, Optional, Union

from pydantic import BaseModel

logger = logging.getLogger(__name__)

MB = 1024 * 1024

MAX_FILE_SIZES = MappingProxyType({
    "CV": 5 * MB,
    "IMAGE": 2 * MB,
    "DOCUMENT": 10 * MB,
    "SIGNATURE": 500 * 1024,
})

_PDF = "application/pdf"
_DOC = "application/msword"
_DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
_XLS = "application/vnd.ms-excel"
_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ALLOWED_MIME_TYPES = MappingProxyType({
    "CV": (_PDF, _DOC, _DOCX),
    "IMAGE": ("image/jpeg", "image/png", "image/gif", "image/webp"),
    "DOCUMENT": (_PDF, _DOC, _DOCX, _XLS, _XLSX),
    "SIGNATURE": ("image/png", "image/jpeg", "image/svg+xml"),
})

MIME_EXTENSIONS = {
    _PDF: ".pdf",
    _DOC: ".doc",
    _DOCX: ".docx",
    _XLS: ".xls",
    _XLSX: ".xlsx",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}

DANGEROUS_EXTENSIONS = (
    ".exe", ".bat", ".cmd", ".com", ".scr", ".pif",
    ".js", ".jse", ".vbs", ".vbe", ".wsf", ".wsh",
    ".ps1", ".psm1", ".psd1",
    ".sh", ".bash", ".zsh",
    ".php", ".phtml", ".php3", ".php4", ".php5", ".phps",
    ".asp", ".aspx", ".cer", ".csr",
    ".jar", ".msi", ".dll", ".reg",
    ".hta", ".cpl", ".msc", ".scf",
)

MAX_FILENAME_LENGTH = 200
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_\-.\s]")
_DATA_URL_MIME = re.compile(r"^data:([^;]+);")


class UploadedFile(BaseModel):
    name: str
    size: int
    type: str  # MIME type reported by the client


class FileValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None
    sanitized_name: Optional[str] = None


def has_dangerous_extension(filename: str) -> bool:
    return filename.lower().endswith(DANGEROUS_EXTENSIONS)


def sanitize_filename(filename: str) -> str:
    """Drop path separators, traversal and control characters; replace anything else unusual with _."""
    name = filename.replace("..", "")
    name = re.sub(r"[/\\]", "", name)
    name = _CONTROL_CHARS.sub("", name)
    name = _UNSAFE_CHARS.sub("_", name)
    return name.strip()[:MAX_FILENAME_LENGTH]


def get_file_extension(filename: str) -> str:
    """Lower-cased extension including the dot, or "" when there is none."""
    dot = filename.rfind(".")
    if dot == -1 or dot == len(filename) - 1:
        return ""
    return filename[dot:].lower()


def _accepted_extensions(category: str) -> str:
    seen = []
    for mime in ALLOWED_MIME_TYPES[category]:
        ext = MIME_EXTENSIONS.get(mime, mime)
        if ext not in seen:
            seen.append(ext)
    return ", ".join(seen)


def validate_file(file: Union[UploadedFile, Mapping], category: str) -> FileValidationResult:
    """
    Check an upload against the limits of its category (CV, IMAGE, DOCUMENT, SIGNATURE).

    Checks run in order: size, empty file, MIME type, dangerous extension, filename.
    """
    if not isinstance(file, UploadedFile):
        file = UploadedFile.model_validate(file)
    max_size = MAX_FILE_SIZES[category]

    if file.size > max_size:
        max_mb = round(max_size / MB, 1)
        return FileValidationResult(
            valid=False, error=f"Il file è troppo grande. Dimensione massima: {max_mb:g}MB"
        )
    if file.size == 0:
        return FileValidationResult(valid=False, error="Il file è vuoto")
    if file.type not in ALLOWED_MIME_TYPES[category]:
        return FileValidationResult(
            valid=False,
            error=f"Tipo di file non consentito. Formati accettati: {_accepted_extensions(category)}",
        )
    if has_dangerous_extension(file.name):
        logger.warning(f"Rejected upload with dangerous extension: {file.name!r}")
        return FileValidationResult(valid=False, error="Tipo di file non consentito per motivi di sicurezza")

    sanitized = sanitize_filename(file.name)
    if len(sanitized) < 3:
        return FileValidationResult(valid=False, error="Nome file non valido")
    return FileValidationResult(valid=True, sanitized_name=sanitized)


def validate_cv_file(file: Optional[Union[UploadedFile, Mapping]]) -> FileValidationResult:
    # The CV is optional on job applications
    if not file:
        return FileValidationResult(valid=True)
    return validate_file(file, "CV")


def validate_signature_data_url(data_url: Optional[str]) -> FileValidationResult:
    """Drawn signature sent as a base64 data URL."""
    if not data_url:
        return FileValidationResult(valid=False, error="Firma obbligatoria")
    if not data_url.startswith("data:image/"):
        return FileValidationResult(valid=False, error="Formato firma non valido")

    parts = data_url.split(",")
    payload = parts[1] if len(parts) > 1 else ""
    # base64 -> bytes, approximately
    if round(len(payload) * 3 / 4) > MAX_FILE_SIZES["SIGNATURE"]:
        return FileValidationResult(valid=False, error="Firma troppo grande. Riprova con un tratto più semplice.")

    match = _DATA_URL_MIME.match(data_url)
    if not match:
        return FileValidationResult(valid=False, error="Formato firma non riconosciuto")
    if match.group(1) not in ALLOWED_MIME_TYPES["SIGNATURE"]:
        return FileValidationResult(valid=False, error="Formato firma non supportato")
    return FileValidationResult(valid=True)
