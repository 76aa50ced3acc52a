"""Document registry backed by SQLAlchemy.

Methods flush but never commit: the request that owns the session decides
when the unit of work ends.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session

from ...domain.documents.document_status import DocumentStatus
from ...domain.documents.filters import DocumentFilter, FacetField, SortOrder
from ...domain.documents.ports.document_registry_port import (
    DocumentRegistryPort,
    NewDocument,
)
from ...domain.documents.validation import normalize_tags
from ...models.base import utcnow
from ...models.document import Document, DocumentTag
from ...models.user import User

logger = logging.getLogger(__name__)

FACET_COLUMNS = {
    FacetField.SUBJECT: Document.subject,
    FacetField.CLASS: Document.class_name,
    FacetField.SEMESTER: Document.semester,
    FacetField.EXAM_TYPE: Document.exam_type,
    FacetField.YEAR: Document.year,
}

SORT_COLUMNS = {
    SortOrder.NEWEST: (Document.created_at.desc(),),
    SortOrder.POPULAR: (Document.download_count.desc(), Document.created_at.desc()),
    SortOrder.TITLE: (Document.title.asc(), Document.created_at.desc()),
}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally.

    Example:
        >>> escape_like('100%_done')
        '100\\\\%\\\\_done'
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_ci(column, value: str):
    """Case-insensitive substring predicate."""
    return column.ilike(f"%{escape_like(value)}%", escape="\\")


class SqlDocumentRegistry(DocumentRegistryPort):
    """Repository for document and uploader-counter persistence.

    Conditional status changes and download counting are single UPDATE
    statements, so concurrent requests cannot lose writes.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def insert(self, new_document: NewDocument) -> Document:
        document = Document(
            title=new_document.title.strip(),
            subject=new_document.subject.strip(),
            class_name=new_document.class_name.strip(),
            semester=new_document.semester.strip(),
            year=new_document.year.strip(),
            exam_type=new_document.exam_type.strip(),
            file_name=new_document.file_name,
            file_url=new_document.file_url,
            uploaded_by_id=new_document.uploaded_by_id,
            status=DocumentStatus.PENDING,
            rejection_reason=None,
            download_count=0,
            tag_rows=[DocumentTag(value=tag) for tag in normalize_tags(new_document.tags)],
        )
        self.db.add(document)
        self.db.flush()
        return document

    def find_by_id(self, document_id: UUID) -> Optional[Document]:
        return self.db.get(Document, document_id, populate_existing=True)

    def find_many(
        self,
        document_filter: DocumentFilter,
        sort: SortOrder = SortOrder.NEWEST,
        limit: Optional[int] = None,
    ) -> list[Document]:
        query = (
            select(Document)
            .where(*self._conditions(document_filter))
            .order_by(*SORT_COLUMNS[sort])
        )
        if limit is not None:
            query = query.limit(limit)

        return list(self.db.execute(query).unique().scalars().all())

    def update_status(
        self,
        document_id: UUID,
        expected_status: DocumentStatus,
        new_status: DocumentStatus,
        rejection_reason: Optional[str] = None,
    ) -> Optional[Document]:
        stmt = (
            update(Document)
            .where(Document.id == document_id, Document.status == expected_status)
            .values(status=new_status, rejection_reason=rejection_reason, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)

        if result.rowcount != 1:
            logger.info(
                f"Conditional status update matched nothing: document_id={document_id}, "
                f"expected={expected_status.value}, new={new_status.value}"
            )
            return None

        return self.db.get(Document, document_id, populate_existing=True)

    def increment_download_count(self, document_id: UUID) -> Optional[int]:
        stmt = (
            update(Document)
            .where(Document.id == document_id)
            .values(download_count=Document.download_count + 1)
            .returning(Document.download_count)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def delete_by_id(self, document_id: UUID) -> bool:
        document = self.db.get(Document, document_id)
        if document is None:
            return False

        self.db.delete(document)
        self.db.flush()
        return True

    def distinct(self, facet: FacetField, document_filter: DocumentFilter) -> list[str]:
        column = FACET_COLUMNS[facet]
        query = (
            select(column)
            .distinct()
            .where(*self._conditions(document_filter))
            .where(column.is_not(None), column != "")
        )
        return [value for value in self.db.execute(query).scalars().all() if value.strip()]

    def count(self, document_filter: DocumentFilter) -> int:
        query = select(func.count(Document.id)).where(*self._conditions(document_filter))
        return self.db.execute(query).scalar_one()

    def sum_download_count(self, document_filter: DocumentFilter) -> int:
        query = (
            select(func.coalesce(func.sum(Document.download_count), 0))
            .where(*self._conditions(document_filter))
        )
        return int(self.db.execute(query).scalar_one())

    def increment_upload_count(self, user_id: UUID) -> None:
        self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(upload_count=User.upload_count + 1)
            .execution_options(synchronize_session=False)
        )

    def count_users(self) -> int:
        return self.db.execute(select(func.count(User.id))).scalar_one()

    @staticmethod
    def _conditions(document_filter: DocumentFilter) -> list:
        """Translate a DocumentFilter into SQL predicates (combined with AND)."""
        f = document_filter.normalized()
        conditions = []

        if f.status is not None:
            conditions.append(Document.status == f.status)
        if f.uploaded_by_id is not None:
            conditions.append(Document.uploaded_by_id == f.uploaded_by_id)
        if f.subject:
            conditions.append(contains_ci(Document.subject, f.subject))
        if f.class_name:
            conditions.append(contains_ci(Document.class_name, f.class_name))
        if f.semester:
            conditions.append(Document.semester == f.semester)
        if f.exam_type:
            conditions.append(Document.exam_type == f.exam_type)
        if f.year:
            conditions.append(Document.year == f.year)
        if f.search:
            conditions.append(
                or_(
                    contains_ci(Document.title, f.search),
                    contains_ci(Document.subject, f.search),
                    Document.tag_rows.any(contains_ci(DocumentTag.value, f.search)),
                )
            )

        return conditions
