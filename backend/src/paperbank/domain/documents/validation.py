"""Input validation for paper submissions

Required descriptive fields are checked before any store is touched.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from .errors import DocumentValidationError

# Only PDFs are accepted for upload
SUPPORTED_MIME_TYPES = {
    'application/pdf',
}

DEFAULT_MAX_FILE_SIZE = 8 * 1024 * 1024

REQUIRED_FIELDS = ("title", "subject", "class_name", "semester", "year", "exam_type")


@dataclass
class PaperSubmission:
    """Descriptive fields of a new paper, as entered by the uploader."""
    title: str
    subject: str
    class_name: str
    semester: str
    year: str
    exam_type: str
    tags: list[str] = field(default_factory=list)


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    """Check if MIME type is supported for upload

    Example:
        >>> is_supported_mime_type('application/pdf')
        True
        >>> is_supported_mime_type('image/png')
        False
    """
    return mime_type in SUPPORTED_MIME_TYPES


def validate_file_size(size_bytes: int, max_size: int = DEFAULT_MAX_FILE_SIZE) -> Tuple[bool, Optional[str]]:
    """Validate file size is within limits

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> validate_file_size(1024)
        (True, None)
        >>> validate_file_size(0)
        (False, 'File is empty (0 bytes)')
    """
    if size_bytes == 0:
        return False, "File is empty (0 bytes)"

    if size_bytes > max_size:
        return False, f"File exceeds maximum size of {max_size} bytes (got {size_bytes} bytes)"

    return True, None


def missing_required_fields(submission: PaperSubmission) -> list[str]:
    """Names of required fields that are absent or blank."""
    missing = []
    for name in REQUIRED_FIELDS:
        value = getattr(submission, name)
        if value is None or not str(value).strip():
            missing.append(name)
    return missing


def normalize_tags(tags: Optional[Iterable[str]]) -> list[str]:
    """Trim tags, drop blanks and collapse duplicates (case-insensitive).

    Example:
        >>> normalize_tags([' graphs', 'Graphs', '', 'trees'])
        ['graphs', 'trees']
    """
    seen = set()
    result = []
    for tag in tags or []:
        cleaned = str(tag).strip()
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        result.append(cleaned)
    return result


def validate_submission(submission: PaperSubmission, payload: Optional[bytes]) -> None:
    """Raise DocumentValidationError if the submission cannot be stored."""
    missing = missing_required_fields(submission)
    if missing:
        raise DocumentValidationError(
            f"Please provide all the required fields: {', '.join(missing)}",
            fields=missing,
        )

    if not payload:
        raise DocumentValidationError("No file uploaded", fields=["file"])
