"""
Common schemas
"""
from pydantic import BaseModel
from typing import TypeVar, Optional

T = TypeVar('T')


class ResponseModel(BaseModel):
    """Standard response envelope"""
    code: int = 200
    message: Optional[str] = None
    data: Optional[T] = None


class UserSummary(BaseModel):
    """Public author info attached to comments"""
    id: int
    username: str
    usernameColor: Optional[str] = None
