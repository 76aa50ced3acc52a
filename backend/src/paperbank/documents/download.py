"""Download accounting.

Only approved papers are downloadable by ordinary users; moderators may fetch
any paper. Every granted download adds exactly one to download_count through a
single atomic UPDATE, so concurrent requests never lose increments.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ..domain.actor import Actor
from ..domain.documents.document_status import DocumentStatus
from ..domain.documents.errors import DocumentAccessError, DocumentNotFoundError
from ..domain.documents.ports.document_registry_port import DocumentRegistryPort
from ..observability.metrics import paper_downloads_total

logger = logging.getLogger(__name__)


@dataclass
class DownloadGrant:
    """Where to fetch the file and the post-increment counter."""
    file_url: str
    file_name: str
    download_count: int


def download_document(
    registry: DocumentRegistryPort,
    document_id: UUID,
    actor: Optional[Actor] = None,
) -> DownloadGrant:
    """Grant a download and count it.

    Args:
        registry: Document registry
        document_id: Paper to download
        actor: Requester; None for anonymous (treated as unprivileged)

    Raises:
        DocumentNotFoundError: If the paper or its file is missing
        DocumentAccessError: If the paper is not approved and the requester
            is not a moderator
    """
    document = registry.find_by_id(document_id)
    if document is None:
        raise DocumentNotFoundError("Paper not found")

    privileged = actor is not None and actor.is_privileged
    if document.status != DocumentStatus.APPROVED and not privileged:
        raise DocumentAccessError("Paper is not available for download")

    if not document.file_url:
        raise DocumentNotFoundError("File not found for this paper")

    download_count = registry.increment_download_count(document_id)
    if download_count is None:
        # Deleted between the read and the increment
        raise DocumentNotFoundError("Paper not found")

    paper_downloads_total.inc()
    logger.info(
        f"Download granted: document_id={document_id}, download_count={download_count}",
        extra={
            "user_id": actor.user_id if actor else None,
            "document_id": document_id,
        },
    )

    return DownloadGrant(
        file_url=document.file_url,
        file_name=f"{document.title}.pdf",
        download_count=download_count,
    )
