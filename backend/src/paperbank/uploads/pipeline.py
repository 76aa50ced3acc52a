"""Upload pipeline for new paper submissions.

Processing:
1. Validate required fields and payload (before touching any store)
2. Derive a title-based storage key
3. Write the blob to object storage
4. Insert the pending document record
5. Increment the uploader's upload_count

The blob is written first so that no document can reference a missing file.
If the registry write fails afterwards, the blob is left behind as an orphan
and logged for reconciliation; it is not removed synchronously.
"""

import logging

from ..domain.actor import Actor
from ..domain.documents.errors import (
    DocumentValidationError,
    StorageError,
    StorageKeyConflictError,
)
from ..domain.documents.ports.document_registry_port import (
    DocumentRegistryPort,
    NewDocument,
)
from ..domain.documents.ports.object_storage_port import ObjectStoragePort
from ..domain.documents.storage_keys import (
    DEFAULT_KEY_PREFIX,
    current_millis,
    generate_storage_key,
)
from ..domain.documents.validation import PaperSubmission, validate_submission
from ..models.document import Document
from ..observability.metrics import orphan_blobs_total, papers_uploaded_total

logger = logging.getLogger(__name__)

# Candidate keys tried per upload before giving up
MAX_KEY_ATTEMPTS = 5


async def submit_document(
    registry: DocumentRegistryPort,
    storage: ObjectStoragePort,
    actor: Actor,
    submission: PaperSubmission,
    payload: bytes,
    content_type: str,
    key_prefix: str = DEFAULT_KEY_PREFIX,
) -> Document:
    """Store a new paper and register it for moderation.

    Args:
        registry: Document registry
        storage: Object storage adapter
        actor: Uploading user
        submission: Descriptive fields and tags
        payload: File content
        content_type: MIME type of the payload
        key_prefix: Storage key prefix

    Returns:
        Document: The created document (status pending, download_count 0)

    Raises:
        DocumentValidationError: If a required field or the payload is missing
        StorageError: If the blob write fails (nothing is persisted)
    """
    try:
        validate_submission(submission, payload)
    except DocumentValidationError:
        papers_uploaded_total.labels(status="validation_error").inc()
        raise

    try:
        storage_key, file_url = await _store_blob(storage, submission.title, key_prefix, payload, content_type)
    except StorageError:
        papers_uploaded_total.labels(status="storage_error").inc()
        raise

    try:
        document = registry.insert(
            NewDocument(
                title=submission.title,
                subject=submission.subject,
                class_name=submission.class_name,
                semester=submission.semester,
                year=submission.year,
                exam_type=submission.exam_type,
                file_name=storage_key,
                file_url=file_url,
                uploaded_by_id=actor.user_id,
                tags=submission.tags,
            )
        )
        registry.increment_upload_count(actor.user_id)
    except Exception:
        papers_uploaded_total.labels(status="registry_error").inc()
        log_orphan_blob(storage_key, actor, reason="registry insert failed")
        raise

    papers_uploaded_total.labels(status="success").inc()
    logger.info(
        f"Paper submitted for moderation: document_id={document.id}, "
        f"storage_key={storage_key}, size={len(payload)}",
        extra={"user_id": actor.user_id, "document_id": document.id},
    )
    return document


def log_orphan_blob(storage_key: str, actor: Actor, reason: str) -> None:
    """Record a blob that has no metadata record, for out-of-band cleanup."""
    orphan_blobs_total.inc()
    logger.warning(
        f"Orphan blob left in storage: storage_key={storage_key}, reason={reason}",
        extra={"user_id": actor.user_id},
    )


async def _store_blob(
    storage: ObjectStoragePort,
    title: str,
    key_prefix: str,
    payload: bytes,
    content_type: str,
) -> tuple[str, str]:
    """Write the payload under a fresh title-based key.

    A key taken by another upload in the same millisecond is retried with the
    following millisecond, so two papers never share a blob.

    Returns:
        (storage_key, file_url)

    Raises:
        StorageError: If the write fails or every candidate key is taken
    """
    timestamp_ms = current_millis()
    for attempt in range(MAX_KEY_ATTEMPTS):
        storage_key = generate_storage_key(title, prefix=key_prefix, timestamp_ms=timestamp_ms + attempt)
        try:
            file_url = await storage.put(storage_key, payload, content_type)
        except StorageKeyConflictError:
            logger.info(f"Storage key taken, retrying with next millisecond: storage_key={storage_key}")
            continue
        return storage_key, file_url

    logger.error(f"No free storage key after {MAX_KEY_ATTEMPTS} attempts: title={title!r}")
    raise StorageError("Failed to upload file to cloud storage")
