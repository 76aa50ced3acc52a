"""Admin API request/response schemas"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..documents.schemas import DocumentResponse


class RejectRequest(BaseModel):
    reason: Optional[str] = Field(None, description="Shown to the uploader; defaults to 'No reason provided'")


class ModerationResponse(BaseModel):
    success: bool = True
    message: str
    paper: DocumentResponse


class AdminStatsCounts(BaseModel):
    total_papers: int
    pending_papers: int
    approved_papers: int
    rejected_papers: int
    total_users: int


class AdminStatsResponse(BaseModel):
    success: bool = True
    stats: AdminStatsCounts
    recent_activity: List[DocumentResponse]
