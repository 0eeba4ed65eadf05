"""
Shared fixtures: in-memory database, app client and data factories
"""
import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import random
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from kweezy.db.database import Base, get_db
from kweezy.models import (
    User, Novel, Chapter, ChapterContentSegment, Comment, CommentLike, BlogPost
)
from kweezy.api.interactions import get_comment_rng
from kweezy.utils.auth import create_access_token, hash_password
from main import app

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FirstOfPool(random.Random):
    """Always picks the first candidate of an injection pool"""

    def randrange(self, start, stop=None, step=1):
        return start


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_comment_rng] = lambda: FirstOfPool()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


async def make_user(
    db: AsyncSession,
    username: str = "reader",
    role: str = "user",
    password: Optional[str] = None,
    username_color: Optional[str] = None
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password) if password else "not-a-real-hash",
        role=role,
        username_color=username_color
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_novel(db: AsyncSession, title: str = "The Whispering Woods", chapters: int = 1, segments: int = 1) -> Novel:
    """Novel with numbered chapters, each holding `segments` paragraphs"""
    novel = Novel(title=title, author_name="Eliza Thorne", description="An ancient forest.")
    db.add(novel)
    await db.flush()
    for number in range(1, chapters + 1):
        chapter = Chapter(novel_id=novel.id, chapter_number=number, title=f"Chapter {number}")
        db.add(chapter)
        await db.flush()
        for index in range(segments):
            db.add(ChapterContentSegment(
                chapter_id=chapter.id,
                segment_index=index,
                text_content=f"Paragraph {index} of chapter {number}."
            ))
    await db.commit()
    await db.refresh(novel)
    return novel


async def chapter_of(db: AsyncSession, novel: Novel, number: int = 1) -> Chapter:
    from sqlalchemy import select
    result = await db.execute(
        select(Chapter).where(Chapter.novel_id == novel.id, Chapter.chapter_number == number)
    )
    return result.scalar_one()


async def segment_of(db: AsyncSession, chapter: Chapter, index: int = 0) -> ChapterContentSegment:
    from sqlalchemy import select
    result = await db.execute(
        select(ChapterContentSegment).where(
            ChapterContentSegment.chapter_id == chapter.id,
            ChapterContentSegment.segment_index == index
        )
    )
    return result.scalar_one()


async def make_comment(
    db: AsyncSession,
    segment: ChapterContentSegment,
    author: User,
    text: str,
    minutes: int = 0,
    likes: int = 0,
    likers: Optional[list] = None
) -> Comment:
    """Comment created `minutes` after BASE_TIME, liked by the first `likes` likers"""
    comment = Comment(
        segment_id=segment.id,
        user_id=author.id,
        comment_text=text,
        created_at=BASE_TIME + timedelta(minutes=minutes)
    )
    db.add(comment)
    await db.flush()
    for liker in (likers or [])[:likes]:
        db.add(CommentLike(user_id=liker.id, comment_id=comment.id))
    await db.commit()
    return comment


async def make_post(db: AsyncSession, author: User, title: str, published_days_ago: Optional[int] = 0) -> BlogPost:
    post = BlogPost(
        title=title,
        content=f"Body of {title}",
        author_id=author.id,
        published_at=None if published_days_ago is None else BASE_TIME - timedelta(days=published_days_ago)
    )
    db.add(post)
    await db.commit()
    await db.refresh(post)
    return post
