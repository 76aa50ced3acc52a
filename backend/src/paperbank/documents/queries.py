"""Read paths over the document registry.

Public listings only ever expose approved papers. Admin and dashboard views
see every status. Result sizes are capped by the caller-supplied limits
(LIST_PAGE_SIZE, FILTER_MAX_RESULTS, RECENT_ACTIVITY_LIMIT in settings).
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional
from uuid import UUID

from ..domain.documents.document_status import DocumentStatus
from ..domain.documents.errors import DocumentNotFoundError
from ..domain.documents.filters import (
    APPROVED_ONLY,
    DocumentFilter,
    FacetField,
    SortOrder,
)
from ..domain.documents.ports.document_registry_port import DocumentRegistryPort

DEFAULT_LIST_LIMIT = 50
DEFAULT_FILTER_LIMIT = 100
DEFAULT_RECENT_LIMIT = 5


@dataclass
class FacetOptions:
    """Distinct values available for each filter field."""
    subjects: list[str] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)
    semesters: list[str] = field(default_factory=list)
    exam_types: list[str] = field(default_factory=list)
    years: list[str] = field(default_factory=list)


@dataclass
class StatusCounts:
    total: int
    pending: int
    approved: int
    rejected: int


@dataclass
class AdminStats:
    counts: StatusCounts
    total_users: int
    recent_documents: list[Any]


@dataclass
class Dashboard:
    """A user's own papers plus their counters."""
    documents: list[Any]
    counts: StatusCounts
    total_downloads: int


@dataclass
class HomeStats:
    approved_papers: int
    total_users: int
    total_downloads: int


def list_approved(registry: DocumentRegistryPort, limit: int = DEFAULT_LIST_LIMIT) -> list[Any]:
    """Approved papers, newest first."""
    return registry.find_many(APPROVED_ONLY, SortOrder.NEWEST, limit=limit)


def get_approved_by_id(registry: DocumentRegistryPort, document_id: UUID) -> Any:
    """Fetch one publicly visible paper.

    Raises:
        DocumentNotFoundError: If the paper is missing or not approved
    """
    document = registry.find_by_id(document_id)
    if document is None or document.status != DocumentStatus.APPROVED:
        raise DocumentNotFoundError("Paper not found")
    return document


def filter_approved(
    registry: DocumentRegistryPort,
    criteria: DocumentFilter,
    sort: SortOrder = SortOrder.NEWEST,
    limit: int = DEFAULT_FILTER_LIMIT,
) -> list[Any]:
    """Search approved papers.

    Any status or owner constraint on criteria is overridden: the public
    search never leaks pending or rejected papers.

    Example:
        >>> filter_approved(registry, DocumentFilter(subject="math"), SortOrder.POPULAR)
    """
    approved = replace(criteria, status=DocumentStatus.APPROVED, uploaded_by_id=None)
    return registry.find_many(approved, sort, limit=limit)


def list_facets(registry: DocumentRegistryPort) -> FacetOptions:
    """Filter options drawn from approved papers.

    Values are sorted ascending, except years which are newest first.
    """
    def values(facet: FacetField) -> list[str]:
        return sorted(registry.distinct(facet, APPROVED_ONLY))

    return FacetOptions(
        subjects=values(FacetField.SUBJECT),
        classes=values(FacetField.CLASS),
        semesters=values(FacetField.SEMESTER),
        exam_types=values(FacetField.EXAM_TYPE),
        years=sorted(registry.distinct(FacetField.YEAR, APPROVED_ONLY), reverse=True),
    )


def list_pending(registry: DocumentRegistryPort) -> list[Any]:
    """Moderation queue, newest first."""
    return registry.find_many(DocumentFilter(status=DocumentStatus.PENDING), SortOrder.NEWEST)


def list_all_for_admin(
    registry: DocumentRegistryPort,
    status: Optional[DocumentStatus] = None,
) -> list[Any]:
    return registry.find_many(DocumentFilter(status=status), SortOrder.NEWEST)


def admin_stats(
    registry: DocumentRegistryPort,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> AdminStats:
    """Counts per status, user total and the latest submissions."""
    return AdminStats(
        counts=_status_counts(registry, DocumentFilter()),
        total_users=registry.count_users(),
        recent_documents=registry.find_many(DocumentFilter(), SortOrder.NEWEST, limit=recent_limit),
    )


def my_documents(
    registry: DocumentRegistryPort,
    owner_id: UUID,
    status: Optional[DocumentStatus] = None,
) -> Dashboard:
    """Everything a user uploaded, in any status.

    The status filter narrows the listing only; counters always cover all of
    the owner's papers.
    """
    owned = DocumentFilter(uploaded_by_id=owner_id)
    return Dashboard(
        documents=registry.find_many(replace(owned, status=status), SortOrder.NEWEST),
        counts=_status_counts(registry, owned),
        total_downloads=registry.sum_download_count(owned),
    )


def home_stats(registry: DocumentRegistryPort) -> HomeStats:
    return HomeStats(
        approved_papers=registry.count(APPROVED_ONLY),
        total_users=registry.count_users(),
        total_downloads=registry.sum_download_count(APPROVED_ONLY),
    )


def _status_counts(registry: DocumentRegistryPort, base: DocumentFilter) -> StatusCounts:
    return StatusCounts(
        total=registry.count(base),
        pending=registry.count(replace(base, status=DocumentStatus.PENDING)),
        approved=registry.count(replace(base, status=DocumentStatus.APPROVED)),
        rejected=registry.count(replace(base, status=DocumentStatus.REJECTED)),
    )
