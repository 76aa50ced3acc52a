"""SQLAlchemy Models for PaperBank"""

from .base import Base
from .user import User
from .document import Document, DocumentTag

__all__ = [
    "Base",
    "User",
    "Document",
    "DocumentTag",
]
