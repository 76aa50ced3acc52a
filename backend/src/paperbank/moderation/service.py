"""Moderation service for submitted papers.

Approving or rejecting is a single conditional update on the registry
(status must still be pending). When the guard fails the record is re-read so
the conflict reports whichever status won the race.
"""

import logging
from typing import Optional
from uuid import UUID

from ..domain.actor import Actor
from ..domain.documents.document_status import (
    DocumentStatus,
    StateTransitionError,
    validate_transition,
)
from ..domain.documents.errors import DocumentNotFoundError, StatusConflictError
from ..domain.documents.ports.document_registry_port import DocumentRegistryPort
from ..models.document import Document
from ..observability.metrics import moderation_decisions_total

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "No reason provided"


def approve_document(
    registry: DocumentRegistryPort,
    document_id: UUID,
    actor: Optional[Actor] = None,
) -> Document:
    """Approve a pending paper.

    Args:
        registry: Document registry
        document_id: Paper to approve
        actor: Moderator performing the approval (for logging)

    Returns:
        Document: The approved paper (rejection_reason cleared)

    Raises:
        DocumentNotFoundError: If the paper does not exist
        StatusConflictError: If the paper is not pending
    """
    return _moderate(registry, document_id, DocumentStatus.APPROVED, None, actor)


def reject_document(
    registry: DocumentRegistryPort,
    document_id: UUID,
    reason: Optional[str] = None,
    actor: Optional[Actor] = None,
) -> Document:
    """Reject a pending paper.

    A blank reason is replaced with DEFAULT_REJECTION_REASON, so a rejected
    paper always carries a non-empty reason.
    """
    rejection_reason = (reason or "").strip() or DEFAULT_REJECTION_REASON
    return _moderate(registry, document_id, DocumentStatus.REJECTED, rejection_reason, actor)


def _moderate(
    registry: DocumentRegistryPort,
    document_id: UUID,
    target: DocumentStatus,
    rejection_reason: Optional[str],
    actor: Optional[Actor],
) -> Document:
    decision = "approve" if target == DocumentStatus.APPROVED else "reject"

    document = registry.find_by_id(document_id)
    if document is None:
        raise DocumentNotFoundError("Paper not found")

    try:
        validate_transition(document.status, target)
    except StateTransitionError:
        moderation_decisions_total.labels(decision=decision, result="conflict").inc()
        raise StatusConflictError(document.status)

    updated = registry.update_status(
        document_id,
        expected_status=DocumentStatus.PENDING,
        new_status=target,
        rejection_reason=rejection_reason,
    )

    if updated is None:
        # Lost the race: report what the other moderator (or a deletion) left behind
        current = registry.find_by_id(document_id)
        if current is None:
            raise DocumentNotFoundError("Paper not found")
        moderation_decisions_total.labels(decision=decision, result="conflict").inc()
        raise StatusConflictError(current.status)

    moderation_decisions_total.labels(decision=decision, result="applied").inc()
    logger.info(
        f"Paper moderated: document_id={document_id}, status={target.value}",
        extra={
            "user_id": actor.user_id if actor else None,
            "document_id": document_id,
        },
    )
    return updated
