"""Query criteria shared by the registry and the read paths."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
from uuid import UUID

from .document_status import DocumentStatus


class SortOrder(str, Enum):
    """Result ordering for paper listings"""
    NEWEST = "newest"    # created_at descending (default)
    POPULAR = "popular"  # download_count descending, then newest
    TITLE = "title"      # title ascending

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        """Map a query-string value to a SortOrder, defaulting to NEWEST."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.NEWEST


class FacetField(str, Enum):
    """Descriptive fields exposed for filter discovery"""
    SUBJECT = "subject"
    CLASS = "class"
    SEMESTER = "semester"
    EXAM_TYPE = "exam_type"
    YEAR = "year"


@dataclass(frozen=True)
class DocumentFilter:
    """Conjunctive filter over documents.

    subject and class_name match as case-insensitive substrings; semester,
    exam_type and year match exactly; search matches title OR subject OR any
    tag as a case-insensitive substring. None means "no constraint".
    """
    status: Optional[DocumentStatus] = None
    uploaded_by_id: Optional[UUID] = None
    subject: Optional[str] = None
    class_name: Optional[str] = None
    semester: Optional[str] = None
    exam_type: Optional[str] = None
    year: Optional[str] = None
    search: Optional[str] = None

    def normalized(self) -> "DocumentFilter":
        """Copy with surrounding whitespace trimmed and blank values dropped."""
        def clean(value: Optional[str]) -> Optional[str]:
            if value is None:
                return None
            value = value.strip()
            return value or None

        return replace(
            self,
            subject=clean(self.subject),
            class_name=clean(self.class_name),
            semester=clean(self.semester),
            exam_type=clean(self.exam_type),
            year=clean(self.year),
            search=clean(self.search),
        )


APPROVED_ONLY = DocumentFilter(status=DocumentStatus.APPROVED)
