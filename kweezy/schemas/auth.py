"""
Auth schemas
"""
import re
from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional
from datetime import datetime

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class RegisterRequest(BaseModel):
    """Registration request"""
    username: str = Field(..., description="Username, at least 3 characters")
    email: EmailStr
    password: str = Field(..., description="Password, at least 6 characters")

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Username must be at least 3 characters long.")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    """Login request"""
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required.")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class ProfileUpdateRequest(BaseModel):
    """Profile update request, both fields optional"""
    usernameColor: Optional[str] = None
    username: Optional[str] = None

    @field_validator("usernameColor")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not HEX_COLOR_RE.match(value):
            raise ValueError("Invalid hex color code.")
        return value

    @field_validator("username")
    @classmethod
    def check_username(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Username must be at least 3 characters long.")
        return value


class UserResponse(BaseModel):
    """User info returned to the owner"""
    id: int
    username: str
    email: str
    role: str
    usernameColor: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class LoginResponse(BaseModel):
    token: str
    user: UserResponse
