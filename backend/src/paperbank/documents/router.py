"""Public paper API endpoints

GET  /papers                 approved papers, newest first
GET  /papers/filters         search approved papers
GET  /papers/filter-options  distinct filter values
GET  /papers/{paper_id}      one approved paper
POST /papers/{paper_id}/download
GET  /home/stats             homepage counters
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from ..auth.dependencies import OptionalActor
from ..dependencies import AppSettings, DbSession, Registry
from ..domain.documents.filters import DocumentFilter, SortOrder
from . import queries
from .download import download_document
from .schemas import (
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentResponse,
    DownloadResponse,
    FacetOptionsResponse,
    HomeStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/papers", tags=["Papers"])
home_router = APIRouter(prefix="/home", tags=["Home"])


def to_list_response(documents) -> DocumentListResponse:
    papers = [DocumentResponse.model_validate(document) for document in documents]
    return DocumentListResponse(count=len(papers), papers=papers)


@router.get("", response_model=DocumentListResponse)
def list_papers(registry: Registry, settings: AppSettings):
    """List approved papers, newest first."""
    return to_list_response(queries.list_approved(registry, limit=settings.LIST_PAGE_SIZE))


@router.get("/filters", response_model=DocumentListResponse)
def filter_papers(
    registry: Registry,
    settings: AppSettings,
    search: Optional[str] = Query(None, description="Matches title, subject or any tag"),
    subject: Optional[str] = Query(None, description="Case-insensitive substring"),
    class_name: Optional[str] = Query(None, alias="class", description="Case-insensitive substring"),
    semester: Optional[str] = Query(None, description="Exact match"),
    exam_type: Optional[str] = Query(None, description="Exact match"),
    year: Optional[str] = Query(None, description="Exact match"),
    sort_by: Optional[str] = Query(None, description="newest (default), popular or title"),
):
    """Search approved papers.

    Example:
        GET /api/papers/filters?subject=math&sort_by=popular
    """
    criteria = DocumentFilter(
        subject=subject,
        class_name=class_name,
        semester=semester,
        exam_type=exam_type,
        year=year,
        search=search,
    )
    documents = queries.filter_approved(
        registry,
        criteria,
        sort=SortOrder.parse(sort_by),
        limit=settings.FILTER_MAX_RESULTS,
    )
    return to_list_response(documents)


@router.get("/filter-options", response_model=FacetOptionsResponse)
def filter_options(registry: Registry):
    facets = queries.list_facets(registry)
    return FacetOptionsResponse(
        subjects=facets.subjects,
        classes=facets.classes,
        semesters=facets.semesters,
        exam_types=facets.exam_types,
        years=facets.years,
    )


@router.get("/{paper_id}", response_model=DocumentDetailResponse)
def get_paper(paper_id: UUID, registry: Registry):
    """Get one approved paper (404 for pending or rejected papers)."""
    document = queries.get_approved_by_id(registry, paper_id)
    return DocumentDetailResponse(paper=DocumentResponse.model_validate(document))


@router.post("/{paper_id}/download", response_model=DownloadResponse)
def download_paper(paper_id: UUID, registry: Registry, db: DbSession, actor: OptionalActor):
    """Count a download and return the file locator.

    Anonymous callers may download approved papers; admins may download any
    paper.
    """
    grant = download_document(registry, paper_id, actor)
    db.commit()

    return DownloadResponse(
        file_url=grant.file_url,
        file_name=grant.file_name,
        download_count=grant.download_count,
    )


@home_router.get("/stats", response_model=HomeStatsResponse)
def home_stats(registry: Registry):
    stats = queries.home_stats(registry)
    return HomeStatsResponse(
        total_papers=stats.approved_papers,
        total_users=stats.total_users,
        total_downloads=stats.total_downloads,
    )
