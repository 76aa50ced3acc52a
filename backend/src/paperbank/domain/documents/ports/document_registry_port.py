"""Document Registry Port - Domain interface for the metadata store.

The registry owns Document records and the User counters they reference.
Mutations that must not race (moderation, download counting) are exposed as
single conditional/atomic primitives rather than read-modify-write pairs.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from ..document_status import DocumentStatus
from ..filters import DocumentFilter, FacetField, SortOrder


@dataclass
class NewDocument:
    """Fields of a document about to be inserted (status is always pending)."""
    title: str
    subject: str
    class_name: str
    semester: str
    year: str
    exam_type: str
    file_name: str
    file_url: str
    uploaded_by_id: UUID
    tags: list[str] = field(default_factory=list)


class DocumentRegistryPort(ABC):
    """Port interface for document metadata persistence.

    Implementations return their own record objects; callers only rely on the
    attributes of the Document model (id, status, file_url, download_count...).
    """

    @abstractmethod
    def insert(self, new_document: NewDocument) -> Any:
        """Create a pending document with download_count 0."""

    @abstractmethod
    def find_by_id(self, document_id: UUID) -> Optional[Any]:
        """Return the document or None."""

    @abstractmethod
    def find_many(
        self,
        document_filter: DocumentFilter,
        sort: SortOrder = SortOrder.NEWEST,
        limit: Optional[int] = None,
    ) -> list[Any]:
        """Return documents matching the filter in the requested order."""

    @abstractmethod
    def update_status(
        self,
        document_id: UUID,
        expected_status: DocumentStatus,
        new_status: DocumentStatus,
        rejection_reason: Optional[str] = None,
    ) -> Optional[Any]:
        """Compare-and-swap the status.

        Returns:
            The updated document, or None if the document is missing or its
            status was not expected_status (nothing is written then).
        """

    @abstractmethod
    def increment_download_count(self, document_id: UUID) -> Optional[int]:
        """Atomically add one to download_count.

        Returns:
            The post-increment value, or None if the document does not exist.
        """

    @abstractmethod
    def delete_by_id(self, document_id: UUID) -> bool:
        """Delete the document; False if it did not exist."""

    @abstractmethod
    def distinct(self, facet: FacetField, document_filter: DocumentFilter) -> list[str]:
        """Distinct non-empty values of a descriptive field."""

    @abstractmethod
    def count(self, document_filter: DocumentFilter) -> int:
        """Number of documents matching the filter."""

    @abstractmethod
    def sum_download_count(self, document_filter: DocumentFilter) -> int:
        """Total downloads across documents matching the filter."""

    @abstractmethod
    def increment_upload_count(self, user_id: UUID) -> None:
        """Atomically add one to the user's upload_count."""

    @abstractmethod
    def count_users(self) -> int:
        """Number of registered users."""
