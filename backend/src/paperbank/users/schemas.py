"""User dashboard schemas"""

from typing import List

from pydantic import BaseModel

from ..documents.schemas import DocumentResponse


class DashboardStats(BaseModel):
    """Counters over all of the user's papers"""
    total: int
    pending: int
    approved: int
    rejected: int
    total_downloads: int


class DashboardResponse(BaseModel):
    success: bool = True
    stats: DashboardStats
    papers: List[DocumentResponse]
