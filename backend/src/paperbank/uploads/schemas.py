"""Upload API response schemas"""

from pydantic import BaseModel

from ..documents.schemas import DocumentResponse


class UploadResponse(BaseModel):
    """Response for a successful submission (paper is pending moderation)"""
    success: bool = True
    message: str = "Paper uploaded successfully! Waiting for admin approval"
    paper: DocumentResponse
