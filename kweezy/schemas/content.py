"""
Novel, chapter and segment schemas
"""
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from kweezy.schemas.progress import ProgressResponse


class NovelListItem(BaseModel):
    """Novel in the public catalogue"""
    id: int
    title: str
    authorName: Optional[str] = None
    description: Optional[str] = None
    coverImageUrl: Optional[str] = None
    createdAt: Optional[datetime] = None


class ChapterSummary(BaseModel):
    id: int
    title: Optional[str] = None
    chapterNumber: int


class NovelDetailResponse(NovelListItem):
    """Novel with its chapters and the viewer's server-side progress"""
    chapters: List[ChapterSummary] = []
    userProgress: Optional[ProgressResponse] = None


class SegmentResponse(BaseModel):
    id: int
    segmentIndex: int
    segmentType: str
    textContent: str
