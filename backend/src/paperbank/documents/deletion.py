"""Deletion orchestrator for papers.

The metadata record is removed first and, when the caller passes a commit
hook, made durable before object storage is touched. Blob removal is best
effort afterwards: a storage failure is logged and reported in the
DeletionResult, never raised. If the commit fails the blob is left alone, so a
surviving record never points at a deleted file.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from ..domain.actor import Actor
from ..domain.documents.document_status import DocumentStatus
from ..domain.documents.errors import DocumentAccessError, DocumentNotFoundError
from ..domain.documents.ports.document_registry_port import DocumentRegistryPort
from ..domain.documents.ports.object_storage_port import ObjectStoragePort
from ..observability.metrics import paper_deletions_total

logger = logging.getLogger(__name__)

# Ends the unit of work that holds the metadata delete (e.g. Session.commit)
CommitHook = Callable[[], None]


@dataclass
class DeletionResult:
    """Outcome of a paper deletion.

    metadata_deleted is always True on return; blob_deleted is False when the
    paper had no blob or its removal failed (see blob_error).
    """
    document_id: UUID
    metadata_deleted: bool
    blob_deleted: bool
    message: str
    storage_key: Optional[str] = None
    blob_error: Optional[str] = None


async def delete_document(
    registry: DocumentRegistryPort,
    storage: ObjectStoragePort,
    document_id: UUID,
    actor: Optional[Actor] = None,
    commit: Optional[CommitHook] = None,
) -> DeletionResult:
    """Delete a paper's metadata record, then its blob (best effort).

    Args:
        registry: Document registry
        storage: Object storage adapter
        document_id: Paper to delete
        actor: Requester (for logging)
        commit: Called after the record is deleted and before the blob is;
            whatever it raises propagates and the blob is kept

    Raises:
        DocumentNotFoundError: If the paper does not exist (nothing is touched)
    """
    document = registry.find_by_id(document_id)
    if document is None:
        raise DocumentNotFoundError("Paper not found")

    file_url = document.file_url

    registry.delete_by_id(document_id)
    if commit is not None:
        commit()

    blob_deleted = False
    storage_key = None
    blob_error = None

    if file_url:
        blob_result = await storage.delete(file_url)
        blob_deleted = blob_result.success
        storage_key = blob_result.storage_key
        if not blob_result.success:
            blob_error = blob_result.error or blob_result.message
            logger.warning(
                f"Blob removal failed after metadata delete: document_id={document_id}, "
                f"storage_key={storage_key}, error={blob_error}",
                extra={"document_id": document_id},
            )
    else:
        blob_error = "no file url recorded"

    paper_deletions_total.labels(blob_deleted=str(blob_deleted).lower()).inc()

    if blob_deleted:
        message = "Paper and file deleted successfully"
    else:
        message = "Paper deleted; file could not be removed from storage"

    logger.info(
        f"Paper deleted: document_id={document_id}, blob_deleted={blob_deleted}",
        extra={
            "user_id": actor.user_id if actor else None,
            "document_id": document_id,
        },
    )

    return DeletionResult(
        document_id=document_id,
        metadata_deleted=True,
        blob_deleted=blob_deleted,
        message=message,
        storage_key=storage_key,
        blob_error=blob_error,
    )


async def delete_own_document(
    registry: DocumentRegistryPort,
    storage: ObjectStoragePort,
    document_id: UUID,
    actor: Actor,
    commit: Optional[CommitHook] = None,
) -> DeletionResult:
    """Let an uploader withdraw their own paper.

    Owners may delete pending or rejected papers. Approved papers and other
    users' papers need moderator privileges.

    Raises:
        DocumentNotFoundError: If the paper does not exist
        DocumentAccessError: If the actor may not delete this paper
    """
    document = registry.find_by_id(document_id)
    if document is None:
        raise DocumentNotFoundError("Paper not found")

    if not actor.is_privileged:
        if document.uploaded_by_id != actor.user_id:
            raise DocumentAccessError("You can only delete your own papers")
        if document.status == DocumentStatus.APPROVED:
            raise DocumentAccessError("Approved papers can only be removed by an admin")

    return await delete_document(registry, storage, document_id, actor, commit=commit)
