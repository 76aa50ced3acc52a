"""Admin API endpoints for moderation

All routes require the admin role.

GET    /admin/pending-papers
GET    /admin/papers?status=
PUT    /admin/papers/{paper_id}/approve
PUT    /admin/papers/{paper_id}/reject
DELETE /admin/papers/{paper_id}
GET    /admin/stats
"""

import logging
from dataclasses import asdict
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Query

from ..auth.dependencies import AdminActor
from ..dependencies import AppSettings, BlobStore, DbSession, Registry
from ..documents import queries
from ..documents.deletion import delete_document
from ..documents.router import to_list_response
from ..documents.schemas import DeletionResponse, DocumentListResponse, DocumentResponse
from ..domain.documents.document_status import DocumentStatus
from .schemas import AdminStatsCounts, AdminStatsResponse, ModerationResponse, RejectRequest
from .service import approve_document, reject_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/pending-papers", response_model=DocumentListResponse)
def list_pending_papers(admin: AdminActor, registry: Registry):
    """Moderation queue, newest first."""
    return to_list_response(queries.list_pending(registry))


@router.get("/papers", response_model=DocumentListResponse)
def list_all_papers(
    admin: AdminActor,
    registry: Registry,
    status: Optional[DocumentStatus] = Query(None, description="Only papers in this status"),
):
    return to_list_response(queries.list_all_for_admin(registry, status))


@router.put("/papers/{paper_id}/approve", response_model=ModerationResponse)
def approve_paper(paper_id: UUID, admin: AdminActor, registry: Registry, db: DbSession):
    """Approve a pending paper (409 if it was already moderated)."""
    document = approve_document(registry, paper_id, admin)
    db.commit()

    return ModerationResponse(
        message="Paper approved successfully",
        paper=DocumentResponse.model_validate(document),
    )


@router.put("/papers/{paper_id}/reject", response_model=ModerationResponse)
def reject_paper(
    paper_id: UUID,
    admin: AdminActor,
    registry: Registry,
    db: DbSession,
    body: Optional[RejectRequest] = Body(None),
):
    """Reject a pending paper with an optional reason (409 if already moderated)."""
    document = reject_document(registry, paper_id, body.reason if body else None, admin)
    db.commit()

    return ModerationResponse(
        message="Paper rejected",
        paper=DocumentResponse.model_validate(document),
    )


@router.delete("/papers/{paper_id}", response_model=DeletionResponse)
async def delete_paper(
    paper_id: UUID,
    admin: AdminActor,
    registry: Registry,
    storage: BlobStore,
    db: DbSession,
):
    """Delete any paper and its file.

    The record is committed as deleted before the file is removed, and stays
    deleted even when the file cannot be; blob_deleted and blob_error report
    the storage outcome.
    """
    result = await delete_document(registry, storage, paper_id, admin, commit=db.commit)
    return DeletionResponse(**asdict(result))


@router.get("/stats", response_model=AdminStatsResponse)
def admin_stats(admin: AdminActor, registry: Registry, settings: AppSettings):
    stats = queries.admin_stats(registry, recent_limit=settings.RECENT_ACTIVITY_LIMIT)
    return AdminStatsResponse(
        stats=AdminStatsCounts(
            total_papers=stats.counts.total,
            pending_papers=stats.counts.pending,
            approved_papers=stats.counts.approved,
            rejected_papers=stats.counts.rejected,
            total_users=stats.total_users,
        ),
        recent_activity=[DocumentResponse.model_validate(d) for d in stats.recent_documents],
    )
