"""Failure taxonomy for the document lifecycle.

Every error carries a machine-readable ``kind`` and a human message. The HTTP
layer maps kinds to status codes; services never build HTTP responses.
"""

from typing import Optional

from .document_status import DocumentStatus


class DocumentError(Exception):
    """Base exception for document lifecycle failures."""
    kind = "document_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DocumentValidationError(DocumentError):
    """Missing or malformed input, rejected before any store access."""
    kind = "validation"

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        self.fields = fields or []
        super().__init__(message)


class DocumentNotFoundError(DocumentError):
    """Unknown document id, or a document the caller may not see."""
    kind = "not_found"


class StatusConflictError(DocumentError):
    """Moderation attempted on a document that is no longer pending."""
    kind = "conflict"

    def __init__(self, current_status: DocumentStatus):
        self.current_status = current_status
        super().__init__(f"Paper is already {current_status.value}")


class DocumentAccessError(DocumentError):
    """Visibility or ownership check failed."""
    kind = "authorization"


class StorageError(DocumentError):
    """Object storage failure (fatal during upload)."""
    kind = "storage_failure"


class StorageKeyConflictError(StorageError):
    """An object already exists under the requested key; nothing was written."""

    def __init__(self, storage_key: str):
        self.storage_key = storage_key
        super().__init__(f"Storage key already in use: {storage_key}")
