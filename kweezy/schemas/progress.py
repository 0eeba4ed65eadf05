"""
Reading progress schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProgressUpdate(BaseModel):
    """Progress upsert request"""
    lastReadChapterId: int = Field(..., ge=1, description="Chapter ID, must belong to the novel")
    lastReadScrollY: float = Field(..., ge=0, description="Non-negative scroll offset")


class ProgressResponse(BaseModel):
    """Stored progress with the chapter number resolved"""
    id: int
    userId: int
    novelId: int
    lastReadChapterId: int
    lastReadScrollY: float
    chapterNumber: Optional[int] = None
    updatedAt: Optional[datetime] = None
