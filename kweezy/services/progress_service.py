"""
Server-side reading progress service
"""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from kweezy.core.exceptions import BadRequestError
from kweezy.models.chapter import Chapter
from kweezy.models.reading_progress import UserNovelProgress
from kweezy.schemas.progress import ProgressResponse


def format_progress(progress: UserNovelProgress) -> ProgressResponse:
    return ProgressResponse(
        id=progress.id,
        userId=progress.user_id,
        novelId=progress.novel_id,
        lastReadChapterId=progress.last_read_chapter_id,
        lastReadScrollY=progress.last_read_scroll_y,
        chapterNumber=progress.chapter.chapter_number if progress.chapter else None,
        updatedAt=progress.updated_at
    )


class ProgressService:
    """One progress row per (user, novel), written only by upsert"""

    @staticmethod
    async def _load(db: AsyncSession, user_id: int, novel_id: int) -> Optional[UserNovelProgress]:
        result = await db.execute(
            select(UserNovelProgress)
            .where(
                UserNovelProgress.user_id == user_id,
                UserNovelProgress.novel_id == novel_id
            )
            .execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()

    @classmethod
    async def get(cls, db: AsyncSession, user_id: int, novel_id: int) -> Optional[ProgressResponse]:
        """
        Stored progress, or None when the user never saved any for this novel
        """
        progress = await cls._load(db, user_id, novel_id)
        return format_progress(progress) if progress else None

    @classmethod
    async def upsert(
        cls,
        db: AsyncSession,
        user_id: int,
        novel_id: int,
        chapter_id: int,
        scroll_y: float
    ) -> ProgressResponse:
        """
        Create or replace the (user, novel) progress row

        Args:
            db: database session
            user_id: user ID
            novel_id: novel ID
            chapter_id: last read chapter, must belong to the novel
            scroll_y: non-negative scroll offset

        Returns:
            ProgressResponse: the stored row with its chapter number
        """
        chapter_result = await db.execute(
            select(Chapter.novel_id).where(Chapter.id == chapter_id)
        )
        chapter_novel_id = chapter_result.scalar_one_or_none()
        if chapter_novel_id is None or chapter_novel_id != novel_id:
            raise BadRequestError("Invalid chapter ID for this novel.")

        progress = await cls._load(db, user_id, novel_id)
        if progress is None:
            progress = UserNovelProgress(
                user_id=user_id,
                novel_id=novel_id,
                last_read_chapter_id=chapter_id,
                last_read_scroll_y=float(scroll_y)
            )
            db.add(progress)
            try:
                await db.commit()
            except IntegrityError:
                # a concurrent first save created the row, update it instead
                await db.rollback()
                progress = await cls._load(db, user_id, novel_id)
                if progress is None:
                    # not the (user, novel) key, e.g. the user no longer exists
                    raise
                progress.last_read_chapter_id = chapter_id
                progress.last_read_scroll_y = float(scroll_y)
                await db.commit()
        else:
            progress.last_read_chapter_id = chapter_id
            progress.last_read_scroll_y = float(scroll_y)
            await db.commit()

        progress = await cls._load(db, user_id, novel_id)
        return format_progress(progress)
