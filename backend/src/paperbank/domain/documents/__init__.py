"""Documents domain module - paper lifecycle, storage keys, status management"""

from .document_status import (
    DocumentStatus,
    StateTransitionError,
    can_transition,
    validate_transition,
    ALLOWED_TRANSITIONS,
)
from .errors import (
    DocumentError,
    DocumentValidationError,
    DocumentNotFoundError,
    StatusConflictError,
    DocumentAccessError,
    StorageError,
    StorageKeyConflictError,
)
from .filters import DocumentFilter, FacetField, SortOrder, APPROVED_ONLY
from .storage_keys import (
    sanitize_title,
    generate_storage_key,
    build_public_url,
    extract_storage_key,
)
from .validation import (
    PaperSubmission,
    is_supported_mime_type,
    validate_file_size,
    validate_submission,
    normalize_tags,
    SUPPORTED_MIME_TYPES,
)

__all__ = [
    "DocumentStatus",
    "StateTransitionError",
    "can_transition",
    "validate_transition",
    "ALLOWED_TRANSITIONS",
    "DocumentError",
    "DocumentValidationError",
    "DocumentNotFoundError",
    "StatusConflictError",
    "DocumentAccessError",
    "StorageError",
    "StorageKeyConflictError",
    "DocumentFilter",
    "FacetField",
    "SortOrder",
    "APPROVED_ONLY",
    "sanitize_title",
    "generate_storage_key",
    "build_public_url",
    "extract_storage_key",
    "PaperSubmission",
    "is_supported_mime_type",
    "validate_file_size",
    "validate_submission",
    "normalize_tags",
    "SUPPORTED_MIME_TYPES",
]
