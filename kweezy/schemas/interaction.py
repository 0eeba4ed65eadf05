"""
Comment, like and reaction schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from kweezy.schemas.common import UserSummary


class CommentCreate(BaseModel):
    """New comment request"""
    commentText: str = Field(..., description="Comment text, at most 1000 characters")
    parentCommentId: Optional[int] = Field(None, ge=1, description="Parent comment on the same segment")

    @field_validator("commentText")
    @classmethod
    def check_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment text cannot be empty.")
        if len(value) > 1000:
            raise ValueError("Comment cannot exceed 1000 characters.")
        return value


class CommentResponse(BaseModel):
    id: int
    commentText: str
    createdAt: Optional[datetime] = None
    parentCommentId: Optional[int] = None
    user: UserSummary
    likeCount: int = 0
    likedByCurrentUser: bool = False


class CommentPage(BaseModel):
    """One page of ranked comments"""
    comments: List[CommentResponse]
    totalPages: int
    currentPage: int


class ReactionToggle(BaseModel):
    """Reaction toggle request"""
    reactionType: str = Field(..., description="heart, fire, surprise, cry or angry by convention")

    @field_validator("reactionType")
    @classmethod
    def check_type(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Reaction type is required.")
        if len(value) > 20:
            raise ValueError("Reaction type too long.")
        return value


class ToggleResult(BaseModel):
    """Outcome of an existence toggle"""
    action: str  # added | removed | liked | unliked
    active: bool
