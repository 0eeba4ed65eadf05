"""
Blog post service
"""
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc
from sqlalchemy.exc import IntegrityError

from kweezy.core.exceptions import NotFoundError, ConflictError, BadRequestError
from kweezy.models.blog_post import BlogPost
from kweezy.schemas.blog import (
    BlogAuthor, BlogPostResponse, BlogPostPage, BlogPostUpdate
)
from kweezy.services.ranking import total_pages


def format_post(post: BlogPost) -> BlogPostResponse:
    return BlogPostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        authorId=post.author_id,
        author=BlogAuthor(username=post.author.username) if post.author else None,
        publishedAt=post.published_at,
        createdAt=post.created_at,
        updatedAt=post.updated_at
    )


class BlogService:
    """Public reads of published posts and admin authoring"""

    @staticmethod
    async def _load(db: AsyncSession, post_id: int, published_only: bool = False) -> Optional[BlogPost]:
        conditions = [BlogPost.id == post_id]
        if published_only:
            conditions.append(BlogPost.published_at.is_not(None))
        result = await db.execute(
            select(BlogPost).where(*conditions).execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()

    @staticmethod
    async def list_published(db: AsyncSession, page: int, limit: int) -> BlogPostPage:
        """
        Published posts, newest publication first
        """
        count_result = await db.execute(
            select(func.count(BlogPost.id)).where(BlogPost.published_at.is_not(None))
        )
        total = count_result.scalar() or 0

        result = await db.execute(
            select(BlogPost)
            .where(BlogPost.published_at.is_not(None))
            .order_by(desc(BlogPost.published_at), desc(BlogPost.id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        posts = result.unique().scalars().all()

        return BlogPostPage(
            posts=[format_post(post) for post in posts],
            totalPages=total_pages(total, limit),
            currentPage=page
        )

    @classmethod
    async def get_published(cls, db: AsyncSession, post_id: int) -> BlogPostResponse:
        post = await cls._load(db, post_id, published_only=True)
        if not post:
            raise NotFoundError("Blog post not found or not published.")
        return format_post(post)

    @classmethod
    async def create(
        cls,
        db: AsyncSession,
        author_id: int,
        title: str,
        content: str,
        publish_now: bool = False
    ) -> BlogPostResponse:
        post = BlogPost(
            title=title,
            content=content,
            author_id=author_id,
            published_at=datetime.now(timezone.utc) if publish_now else None
        )
        db.add(post)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("A blog post with this title already exists.")
        return format_post(await cls._load(db, post.id))

    @classmethod
    async def update(cls, db: AsyncSession, post_id: int, update_data: BlogPostUpdate) -> BlogPostResponse:
        """
        Apply only the fields present in the request body
        """
        fields = update_data.model_fields_set
        if not fields & {"title", "content", "publishedAt"}:
            raise BadRequestError("No update data provided (title, content, or publishedAt).")

        post = await cls._load(db, post_id)
        if not post:
            raise NotFoundError("Blog post not found.")

        if "title" in fields and update_data.title is not None:
            post.title = update_data.title
        if "content" in fields and update_data.content is not None:
            post.content = update_data.content
        if "publishedAt" in fields:
            post.published_at = update_data.publishedAt

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("A blog post with this title already exists.")
        return format_post(await cls._load(db, post_id))

    @classmethod
    async def delete(cls, db: AsyncSession, post_id: int) -> None:
        post = await cls._load(db, post_id)
        if not post:
            raise NotFoundError("Blog post not found.")
        await db.delete(post)
        await db.commit()
