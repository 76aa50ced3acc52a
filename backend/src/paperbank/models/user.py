"""User SQLAlchemy model"""

import re
from uuid import uuid4

from sqlalchemy import Column, Text, Integer, CheckConstraint, DateTime, Uuid
from sqlalchemy.orm import relationship, validates

from .base import Base, utcnow


class User(Base):
    """User model representing members of the institution.

    Users are referenced by the documents they upload. Credential storage
    lives with the identity service; this table only carries what the
    document lifecycle needs (role for privilege checks, upload counter).
    """
    __tablename__ = "user"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    roll_number = Column(Text, nullable=True)
    role = Column(Text, nullable=False, default="student")
    upload_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    documents = relationship("Document", back_populates="uploaded_by")

    __table_args__ = (
        CheckConstraint(
            "role IN ('student', 'admin')",
            name="ck_user_role"
        ),
        CheckConstraint("upload_count >= 0", name="ck_user_upload_count"),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()
