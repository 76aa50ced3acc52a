"""Paper API request/response schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..domain.documents.document_status import DocumentStatus


class UploaderSummary(BaseModel):
    """Public view of the user who uploaded a paper"""
    id: UUID
    name: str
    roll_number: Optional[str] = None

    class Config:
        from_attributes = True


class DocumentResponse(BaseModel):
    """A paper with its metadata, moderation status and counters"""
    id: UUID = Field(..., description="Paper UUID")
    title: str
    subject: str
    class_name: str = Field(..., description="Class/course the paper belongs to")
    semester: str
    year: str
    exam_type: str
    tags: List[str] = Field(default_factory=list)
    file_name: str = Field(..., description="Object storage key")
    file_url: Optional[str] = Field(None, description="Public locator of the PDF")
    status: DocumentStatus
    rejection_reason: Optional[str] = None
    download_count: int
    uploaded_by: Optional[UploaderSummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DocumentListResponse(BaseModel):
    success: bool = True
    count: int
    papers: List[DocumentResponse]


class DocumentDetailResponse(BaseModel):
    success: bool = True
    paper: DocumentResponse


class DownloadResponse(BaseModel):
    """Where to fetch the PDF, with the updated download counter"""
    success: bool = True
    message: str = "Download URL generated"
    file_url: str
    file_name: str = Field(..., description="Suggested file name (<title>.pdf)")
    download_count: int


class FacetOptionsResponse(BaseModel):
    """Distinct filter values over approved papers (years newest first)"""
    success: bool = True
    subjects: List[str]
    classes: List[str]
    semesters: List[str]
    exam_types: List[str]
    years: List[str]


class HomeStatsResponse(BaseModel):
    success: bool = True
    total_papers: int = Field(..., description="Approved papers")
    total_users: int
    total_downloads: int = Field(..., description="Downloads across approved papers")


class DeletionResponse(BaseModel):
    """Outcome of a deletion; the record is always removed, the blob may not be"""
    success: bool = True
    message: str
    document_id: UUID
    metadata_deleted: bool
    blob_deleted: bool
    storage_key: Optional[str] = None
    blob_error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned for every domain failure"""
    success: bool = False
    error: str = Field(..., description="Failure kind (validation, not_found, conflict, authorization, storage_failure)")
    message: str
