"""
Admin console schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from kweezy.schemas.content import ChapterSummary


class NovelCreate(BaseModel):
    title: str
    authorName: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required.")
        return value

    @field_validator("authorName", "description")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value


class ChapterCreate(BaseModel):
    title: Optional[str] = None
    chapterNumber: int = Field(..., ge=1, description="Chapter number, unique within the novel")


class SegmentInput(BaseModel):
    segmentIndex: int = Field(..., ge=0)
    segmentType: str = "paragraph"
    textContent: str

    @field_validator("segmentType")
    @classmethod
    def check_type(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Segment type is required.")
        return value


class ChapterContentReplace(BaseModel):
    """Full segment set for a chapter, replaces whatever is stored"""
    segments: List[SegmentInput]

    @field_validator("segments")
    @classmethod
    def check_segments(cls, value: List[SegmentInput]) -> List[SegmentInput]:
        if not value:
            raise ValueError("Segments array is required and cannot be empty.")
        indexes = [seg.segmentIndex for seg in value]
        if len(indexes) != len(set(indexes)):
            raise ValueError("Segment indexes must be unique within a chapter.")
        return value


class NovelOption(BaseModel):
    id: int
    title: str


class NovelWithChapters(NovelOption):
    chapters: List[ChapterSummary] = []
