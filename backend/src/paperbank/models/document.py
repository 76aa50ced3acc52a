"""Document SQLAlchemy model

Document represents a submitted exam paper: the stored PDF's key and public
locator, its descriptive metadata, moderation status and download counter.
"""

from uuid import uuid4

from sqlalchemy import (
    Column,
    Text,
    ForeignKey,
    Integer,
    DateTime,
    Uuid,
    Enum as SQLEnum,
    Index,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow
from ..domain.documents.document_status import DocumentStatus


class Document(Base):
    """Document model representing a shared paper.

    The binary lives in object storage under file_name; file_url is the
    public locator and is present only while a blob exists. status moves
    pending → approved|rejected and nothing else.
    """
    __tablename__ = "document"
    __table_args__ = (
        Index("ix_document_status_created_at", "status", "created_at"),
        Index("ix_document_uploaded_by_id", "uploaded_by_id"),
        CheckConstraint("download_count >= 0", name="ck_document_download_count"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(Text, nullable=False)
    subject = Column(Text, nullable=False)
    class_name = Column("class", Text, nullable=False)
    semester = Column(Text, nullable=False)
    year = Column(Text, nullable=False)
    exam_type = Column(Text, nullable=False)
    file_name = Column(Text, nullable=False)  # Object storage key
    file_url = Column(Text, nullable=True)  # Public locator of the blob
    uploaded_by_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("user.id", ondelete="RESTRICT"),
        nullable=False
    )
    status = Column(
        SQLEnum(
            DocumentStatus,
            name="document_status",
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=DocumentStatus.PENDING
    )
    rejection_reason = Column(Text, nullable=True)
    download_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    uploaded_by = relationship("User", back_populates="documents", lazy="joined")
    tag_rows = relationship(
        "DocumentTag",
        back_populates="document",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        """Tag values, sorted for stable output."""
        return sorted(tag.value for tag in self.tag_rows)


class DocumentTag(Base):
    """Free-form search tag attached to a document."""
    __tablename__ = "document_tag"
    __table_args__ = (
        UniqueConstraint("document_id", "value", name="uq_document_tag_value"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("document.id", ondelete="CASCADE"),
        nullable=False
    )
    value = Column(Text, nullable=False)

    document = relationship("Document", back_populates="tag_rows")
