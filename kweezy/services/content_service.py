"""
Novel, chapter and segment service
"""
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, desc, asc
from sqlalchemy.exc import IntegrityError

from kweezy.core.exceptions import NotFoundError, ConflictError
from kweezy.models.novel import Novel
from kweezy.models.chapter import Chapter
from kweezy.models.segment import ChapterContentSegment
from kweezy.models.comment import Comment
from kweezy.models.comment_like import CommentLike
from kweezy.models.reaction import Reaction
from kweezy.models.reading_progress import UserNovelProgress
from kweezy.schemas.admin import SegmentInput, NovelOption, NovelWithChapters
from kweezy.schemas.content import (
    NovelListItem, NovelDetailResponse, ChapterSummary, SegmentResponse
)
from kweezy.services.progress_service import ProgressService

logger = logging.getLogger(__name__)


def format_novel(novel: Novel) -> NovelListItem:
    return NovelListItem(
        id=novel.id,
        title=novel.title,
        authorName=novel.author_name,
        description=novel.description,
        coverImageUrl=novel.cover_image_url,
        createdAt=novel.created_at
    )


def format_chapter(chapter: Chapter) -> ChapterSummary:
    return ChapterSummary(id=chapter.id, title=chapter.title, chapterNumber=chapter.chapter_number)


class ContentService:
    """Catalogue reads for readers and content management for admins"""

    @staticmethod
    async def list_novels(db: AsyncSession) -> List[NovelListItem]:
        result = await db.execute(select(Novel).order_by(desc(Novel.created_at), desc(Novel.id)))
        return [format_novel(novel) for novel in result.scalars().all()]

    @staticmethod
    async def get_novel(db: AsyncSession, novel_id: int) -> Novel:
        result = await db.execute(select(Novel).where(Novel.id == novel_id))
        novel = result.scalar_one_or_none()
        if not novel:
            raise NotFoundError("Novel not found.")
        return novel

    @staticmethod
    async def list_chapters(db: AsyncSession, novel_id: int) -> List[Chapter]:
        result = await db.execute(
            select(Chapter)
            .where(Chapter.novel_id == novel_id)
            .order_by(asc(Chapter.chapter_number))
        )
        return list(result.scalars().all())

    @classmethod
    async def novel_detail(cls, db: AsyncSession, novel_id: int, viewer_id: Optional[int] = None) -> NovelDetailResponse:
        """
        Novel with ordered chapters; userProgress only when a viewer is known
        """
        novel = await cls.get_novel(db, novel_id)
        chapters = await cls.list_chapters(db, novel_id)
        user_progress = await ProgressService.get(db, viewer_id, novel_id) if viewer_id else None

        return NovelDetailResponse(
            **format_novel(novel).model_dump(),
            chapters=[format_chapter(chapter) for chapter in chapters],
            userProgress=user_progress
        )

    @staticmethod
    async def chapter_segments(db: AsyncSession, chapter_id: int) -> List[SegmentResponse]:
        chapter_result = await db.execute(select(Chapter.id).where(Chapter.id == chapter_id))
        if chapter_result.scalar_one_or_none() is None:
            raise NotFoundError("Chapter not found.")

        result = await db.execute(
            select(ChapterContentSegment)
            .where(ChapterContentSegment.chapter_id == chapter_id)
            .order_by(asc(ChapterContentSegment.segment_index))
        )
        return [
            SegmentResponse(
                id=segment.id,
                segmentIndex=segment.segment_index,
                segmentType=segment.segment_type,
                textContent=segment.text_content
            )
            for segment in result.scalars().all()
        ]

    # ---------- admin ----------

    @staticmethod
    async def novel_options(db: AsyncSession) -> List[NovelOption]:
        result = await db.execute(select(Novel.id, Novel.title).order_by(asc(Novel.title)))
        return [NovelOption(id=novel_id, title=title) for novel_id, title in result.all()]

    @classmethod
    async def novels_with_chapters(cls, db: AsyncSession) -> List[NovelWithChapters]:
        result = await db.execute(select(Novel).order_by(asc(Novel.title)))
        novels = result.scalars().all()

        chapter_result = await db.execute(
            select(Chapter).order_by(asc(Chapter.chapter_number))
        )
        chapters_by_novel = {}
        for chapter in chapter_result.scalars().all():
            chapters_by_novel.setdefault(chapter.novel_id, []).append(format_chapter(chapter))

        return [
            NovelWithChapters(id=novel.id, title=novel.title, chapters=chapters_by_novel.get(novel.id, []))
            for novel in novels
        ]

    @staticmethod
    async def create_novel(
        db: AsyncSession,
        title: str,
        author_name: Optional[str] = None,
        description: Optional[str] = None
    ) -> NovelListItem:
        existing = await db.execute(select(Novel.id).where(Novel.title == title))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("A novel with this title already exists.")

        novel = Novel(title=title, author_name=author_name, description=description)
        db.add(novel)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("A novel with this title already exists.")
        await db.refresh(novel)
        return format_novel(novel)

    @classmethod
    async def create_chapter(
        cls,
        db: AsyncSession,
        novel_id: int,
        chapter_number: int,
        title: Optional[str] = None
    ) -> ChapterSummary:
        await cls.get_novel(db, novel_id)

        message = f"Chapter number {chapter_number} already exists for this novel."
        existing = await db.execute(
            select(Chapter.id).where(
                Chapter.novel_id == novel_id,
                Chapter.chapter_number == chapter_number
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(message)

        chapter = Chapter(novel_id=novel_id, chapter_number=chapter_number, title=title)
        db.add(chapter)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(message)
        await db.refresh(chapter)
        return format_chapter(chapter)

    @staticmethod
    async def replace_chapter_content(
        db: AsyncSession,
        novel_id: int,
        chapter_number: int,
        segments: List[SegmentInput]
    ) -> int:
        """
        Replace every segment of a chapter in a single transaction

        The old segments (with their comments, likes and reactions) are
        deleted and the new set inserted; on any failure nothing changes.

        Args:
            db: database session
            novel_id: novel ID
            chapter_number: chapter number within the novel
            segments: the complete new segment set

        Returns:
            int: the chapter ID
        """
        result = await db.execute(
            select(Chapter.id).where(
                Chapter.novel_id == novel_id,
                Chapter.chapter_number == chapter_number
            )
        )
        chapter_id = result.scalar_one_or_none()
        if chapter_id is None:
            raise NotFoundError(f"Chapter {chapter_number} not found for Novel {novel_id}.")

        logger.info("Replacing content of chapter %s with %d segments", chapter_id, len(segments))
        try:
            segment_ids = select(ChapterContentSegment.id).where(ChapterContentSegment.chapter_id == chapter_id)
            await _delete_segment_dependents(db, segment_ids)
            await db.execute(
                delete(ChapterContentSegment).where(ChapterContentSegment.chapter_id == chapter_id)
            )
            db.add_all([
                ChapterContentSegment(
                    chapter_id=chapter_id,
                    segment_index=seg.segmentIndex,
                    segment_type=seg.segmentType,
                    text_content=seg.textContent
                )
                for seg in segments
            ])
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError(f"Duplicate segment index found for chapter {chapter_id}.")
        except Exception:
            await db.rollback()
            raise
        return chapter_id

    @classmethod
    async def delete_novel(cls, db: AsyncSession, novel_id: int) -> None:
        await cls.get_novel(db, novel_id)

        chapter_ids = select(Chapter.id).where(Chapter.novel_id == novel_id)
        segment_ids = select(ChapterContentSegment.id).where(ChapterContentSegment.chapter_id.in_(chapter_ids))
        try:
            await _delete_segment_dependents(db, segment_ids)
            await db.execute(delete(ChapterContentSegment).where(ChapterContentSegment.id.in_(segment_ids)))
            await db.execute(delete(UserNovelProgress).where(UserNovelProgress.novel_id == novel_id))
            await db.execute(delete(Chapter).where(Chapter.novel_id == novel_id))
            await db.execute(delete(Novel).where(Novel.id == novel_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    @staticmethod
    async def delete_chapter(db: AsyncSession, chapter_id: int) -> None:
        result = await db.execute(select(Chapter.id).where(Chapter.id == chapter_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Chapter not found.")

        segment_ids = select(ChapterContentSegment.id).where(ChapterContentSegment.chapter_id == chapter_id)
        try:
            await _delete_segment_dependents(db, segment_ids)
            await db.execute(delete(ChapterContentSegment).where(ChapterContentSegment.chapter_id == chapter_id))
            await db.execute(delete(UserNovelProgress).where(UserNovelProgress.last_read_chapter_id == chapter_id))
            await db.execute(delete(Chapter).where(Chapter.id == chapter_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise


async def _delete_segment_dependents(db: AsyncSession, segment_ids) -> None:
    """Delete likes, comments and reactions hanging off the given segments"""
    comment_ids = select(Comment.id).where(Comment.segment_id.in_(segment_ids))
    await db.execute(delete(CommentLike).where(CommentLike.comment_id.in_(comment_ids)))
    # replies reference their parents, remove them first
    await db.execute(
        delete(Comment).where(Comment.segment_id.in_(segment_ids), Comment.parent_comment_id.is_not(None))
    )
    await db.execute(delete(Comment).where(Comment.segment_id.in_(segment_ids)))
    await db.execute(delete(Reaction).where(Reaction.segment_id.in_(segment_ids)))
