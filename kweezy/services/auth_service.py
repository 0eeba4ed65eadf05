"""
Account service
"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError

from kweezy.core.exceptions import AuthError, BadRequestError, ConflictError, NotFoundError
from kweezy.models.user import User
from kweezy.schemas.auth import UserResponse, LoginResponse
from kweezy.utils.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def format_user(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        usernameColor=user.username_color,
        createdAt=user.created_at,
        updatedAt=user.updated_at
    )


class AuthService:
    """Registration, login and profile updates"""

    @staticmethod
    async def _load(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @classmethod
    async def register(cls, db: AsyncSession, username: str, email: str, password: str) -> UserResponse:
        """
        Create a regular user account

        Args:
            db: database session
            username: unique username
            email: unique, already lower-cased email
            password: plain password, stored as a bcrypt hash

        Returns:
            UserResponse: the new account
        """
        existing = await db.execute(
            select(User.id).where(or_(User.username == username, User.email == email))
        )
        if existing.first() is not None:
            raise ConflictError("Username or email already exists.")

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role="user"
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Username or email already exists.")

        logger.info("Registered user %s", user.id)
        return format_user(await cls._load(db, user.id))

    @staticmethod
    async def login(db: AsyncSession, email: str, password: str) -> LoginResponse:
        """
        Check credentials and issue a token carrying the user ID and role

        Unknown email and wrong password produce the same error.
        """
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user or not verify_password(password, user.password_hash):
            raise AuthError("Invalid credentials.")

        token = create_access_token({"sub": str(user.id), "role": user.role})
        return LoginResponse(token=token, user=format_user(user))

    @classmethod
    async def get_profile(cls, db: AsyncSession, user_id: int) -> UserResponse:
        user = await cls._load(db, user_id)
        if not user:
            raise NotFoundError("User not found.")
        return format_user(user)

    @classmethod
    async def update_profile(
        cls,
        db: AsyncSession,
        user_id: int,
        username: Optional[str] = None,
        username_color: Optional[str] = None
    ) -> UserResponse:
        if username is None and username_color is None:
            raise BadRequestError("No update data provided (usernameColor or username).")

        user = await cls._load(db, user_id)
        if not user:
            raise NotFoundError("User not found.")

        if username is not None and username != user.username:
            taken = await db.execute(
                select(User.id).where(User.username == username, User.id != user_id)
            )
            if taken.first() is not None:
                raise ConflictError("Username already taken.")
            user.username = username
        if username_color is not None:
            user.username_color = username_color

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Username already taken.")
        return format_user(await cls._load(db, user_id))
