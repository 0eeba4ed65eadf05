"""
Segment comment and comment like service
"""
import random
from typing import Optional, Dict, Set, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc
from sqlalchemy.exc import IntegrityError

from kweezy.core.exceptions import NotFoundError, BadRequestError, ConflictError
from kweezy.models.comment import Comment
from kweezy.models.comment_like import CommentLike
from kweezy.models.segment import ChapterContentSegment
from kweezy.schemas.common import UserSummary
from kweezy.schemas.interaction import CommentResponse, CommentPage, ToggleResult
from kweezy.services.ranking import RankedComment, rank_page


def format_comment(comment: Comment, like_count: int = 0, liked: bool = False) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        commentText=comment.comment_text,
        createdAt=comment.created_at,
        parentCommentId=comment.parent_comment_id,
        user=UserSummary(
            id=comment.user.id,
            username=comment.user.username,
            usernameColor=comment.user.username_color
        ),
        likeCount=like_count,
        likedByCurrentUser=liked
    )


class CommentService:
    """Comment listing, creation and like toggling"""

    @staticmethod
    async def ensure_segment(db: AsyncSession, segment_id: int) -> ChapterContentSegment:
        result = await db.execute(
            select(ChapterContentSegment).where(ChapterContentSegment.id == segment_id)
        )
        segment = result.scalar_one_or_none()
        if not segment:
            raise NotFoundError("Segment not found.")
        return segment

    @staticmethod
    async def _like_counts(db: AsyncSession, segment_id: int) -> Dict[int, int]:
        result = await db.execute(
            select(CommentLike.comment_id, func.count(CommentLike.id))
            .join(Comment, Comment.id == CommentLike.comment_id)
            .where(Comment.segment_id == segment_id)
            .group_by(CommentLike.comment_id)
        )
        return {comment_id: count for comment_id, count in result.all()}

    @staticmethod
    async def _viewer_likes(db: AsyncSession, segment_id: int, viewer_id: int) -> Set[int]:
        result = await db.execute(
            select(CommentLike.comment_id)
            .join(Comment, Comment.id == CommentLike.comment_id)
            .where(Comment.segment_id == segment_id, CommentLike.user_id == viewer_id)
        )
        return set(result.scalars().all())

    @classmethod
    async def list_ranked(
        cls,
        db: AsyncSession,
        segment_id: int,
        page: int,
        limit: int,
        viewer_id: Optional[int] = None,
        rng: Optional[random.Random] = None
    ) -> CommentPage:
        """
        One page of a segment's comments in ranked order

        Every comment of the segment is loaded so the injection passes draw
        from the true tail, then the page is cut.

        Args:
            db: database session
            segment_id: segment ID
            page: 1-based page number
            limit: page size
            viewer_id: requesting user, None when anonymous
            rng: random source for the injection passes

        Returns:
            CommentPage: comments, totalPages and currentPage
        """
        await cls.ensure_segment(db, segment_id)

        # 1. all comments, newest first (id breaks same-timestamp ties)
        result = await db.execute(
            select(Comment)
            .where(Comment.segment_id == segment_id)
            .order_by(desc(Comment.created_at), desc(Comment.id))
        )
        comments = result.unique().scalars().all()

        # 2. derived fields
        like_counts = await cls._like_counts(db, segment_id)
        liked_ids = await cls._viewer_likes(db, segment_id, viewer_id) if viewer_id else set()

        items = [
            RankedComment(
                comment=comment,
                like_count=like_counts.get(comment.id, 0),
                created_at=comment.created_at,
                liked_by_viewer=comment.id in liked_ids
            )
            for comment in comments
        ]

        # 3. rank and paginate
        ranked = rank_page(items, page, limit, rng)

        return CommentPage(
            comments=[
                format_comment(item.comment, item.like_count, item.liked_by_viewer)
                for item in ranked.items
            ],
            totalPages=ranked.total_pages,
            currentPage=ranked.current_page
        )

    @classmethod
    async def create(
        cls,
        db: AsyncSession,
        segment_id: int,
        user_id: int,
        comment_text: str,
        parent_comment_id: Optional[int] = None
    ) -> CommentResponse:
        """
        Create a comment, optionally as a reply within the same segment
        """
        await cls.ensure_segment(db, segment_id)

        if parent_comment_id:
            parent_result = await db.execute(
                select(Comment.segment_id).where(Comment.id == parent_comment_id)
            )
            parent_segment_id = parent_result.scalar_one_or_none()
            if parent_segment_id is None or parent_segment_id != segment_id:
                raise BadRequestError("Invalid parent comment.")

        comment = Comment(
            segment_id=segment_id,
            user_id=user_id,
            parent_comment_id=parent_comment_id,
            comment_text=comment_text
        )
        db.add(comment)
        await db.commit()

        result = await db.execute(
            select(Comment).where(Comment.id == comment.id).execution_options(populate_existing=True)
        )
        comment = result.unique().scalar_one()
        return format_comment(comment)

    @staticmethod
    async def _find_like(db: AsyncSession, comment_id: int, user_id: int) -> Optional[CommentLike]:
        result = await db.execute(
            select(CommentLike).where(
                CommentLike.user_id == user_id,
                CommentLike.comment_id == comment_id
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def toggle_like(db: AsyncSession, comment_id: int, user_id: int) -> Tuple[ToggleResult, int]:
        """
        Like the comment, or remove the like when it already exists

        Returns:
            the toggle outcome and the comment's like count afterwards
        """
        comment_result = await db.execute(select(Comment.id).where(Comment.id == comment_id))
        if comment_result.scalar_one_or_none() is None:
            raise NotFoundError("Comment not found.")

        existing = await CommentService._find_like(db, comment_id, user_id)

        if existing:
            await db.delete(existing)
            outcome = ToggleResult(action="unliked", active=False)
        else:
            db.add(CommentLike(user_id=user_id, comment_id=comment_id))
            outcome = ToggleResult(action="liked", active=True)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Like was changed by another request, please retry.")

        count_result = await db.execute(
            select(func.count(CommentLike.id)).where(CommentLike.comment_id == comment_id)
        )
        return outcome, count_result.scalar() or 0
