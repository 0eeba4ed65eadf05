"""
Blog schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


def _required_text(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required.")
    return value


class BlogPostCreate(BaseModel):
    title: str = Field(..., description="Post title, at most 255 characters")
    content: str
    publishNow: bool = False

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        value = _required_text(value, "Title")
        if len(value) > 255:
            raise ValueError("Title cannot exceed 255 characters.")
        return value

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _required_text(value, "Content")


class BlogPostUpdate(BaseModel):
    """Partial update; publishedAt may be set to null to unpublish"""
    title: Optional[str] = None
    content: Optional[str] = None
    publishedAt: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Title cannot be empty.")
        if len(value) > 255:
            raise ValueError("Title cannot exceed 255 characters.")
        return value

    @field_validator("content")
    @classmethod
    def check_content(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Content cannot be empty.")
        return value


class BlogAuthor(BaseModel):
    username: str


class BlogPostResponse(BaseModel):
    id: int
    title: str
    content: str
    authorId: int
    author: Optional[BlogAuthor] = None
    publishedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class BlogPostPage(BaseModel):
    posts: List[BlogPostResponse]
    totalPages: int
    currentPage: int
