"""User dashboard endpoints

GET    /users/dashboard         own papers in every status, with counters
DELETE /users/papers/{paper_id} withdraw an own pending or rejected paper
"""

import logging
from dataclasses import asdict
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from ..auth.dependencies import CurrentActor
from ..dependencies import BlobStore, DbSession, Registry
from ..documents import queries
from ..documents.deletion import delete_own_document
from ..documents.schemas import DeletionResponse, DocumentResponse
from ..domain.documents.document_status import DocumentStatus
from .schemas import DashboardResponse, DashboardStats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/dashboard", response_model=DashboardResponse)
def my_dashboard(
    actor: CurrentActor,
    registry: Registry,
    status: Optional[DocumentStatus] = Query(None, description="Only list papers in this status"),
):
    dashboard = queries.my_documents(registry, actor.user_id, status)
    return DashboardResponse(
        stats=DashboardStats(
            total=dashboard.counts.total,
            pending=dashboard.counts.pending,
            approved=dashboard.counts.approved,
            rejected=dashboard.counts.rejected,
            total_downloads=dashboard.total_downloads,
        ),
        papers=[DocumentResponse.model_validate(d) for d in dashboard.documents],
    )


@router.delete("/papers/{paper_id}", response_model=DeletionResponse)
async def delete_my_paper(
    paper_id: UUID,
    actor: CurrentActor,
    registry: Registry,
    storage: BlobStore,
    db: DbSession,
):
    """Delete one of your own papers.

    Approved papers can only be removed by an admin (403).
    """
    result = await delete_own_document(registry, storage, paper_id, actor, commit=db.commit)
    return DeletionResponse(**asdict(result))
