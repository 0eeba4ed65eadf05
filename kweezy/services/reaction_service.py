"""
Segment reaction service
"""
from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from kweezy.core.exceptions import ConflictError
from kweezy.models.reaction import Reaction
from kweezy.schemas.interaction import ToggleResult
from kweezy.services.comment_service import CommentService


class ReactionService:
    """Reaction toggling and per-type counts"""

    @staticmethod
    async def _find(db: AsyncSession, segment_id: int, user_id: int, reaction_type: str) -> Optional[Reaction]:
        result = await db.execute(
            select(Reaction).where(
                Reaction.user_id == user_id,
                Reaction.segment_id == segment_id,
                Reaction.reaction_type == reaction_type
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def counts(db: AsyncSession, segment_id: int) -> Dict[str, int]:
        """
        Reaction counts grouped by type, e.g. {"heart": 3, "fire": 1}
        """
        result = await db.execute(
            select(Reaction.reaction_type, func.count(Reaction.id))
            .where(Reaction.segment_id == segment_id)
            .group_by(Reaction.reaction_type)
        )
        return {reaction_type: count for reaction_type, count in result.all()}

    @staticmethod
    async def toggle(db: AsyncSession, segment_id: int, user_id: int, reaction_type: str) -> ToggleResult:
        """
        Add the (user, segment, type) reaction, or remove it when present

        The type is stored verbatim; any short non-empty string is accepted.
        """
        await CommentService.ensure_segment(db, segment_id)

        existing = await ReactionService._find(db, segment_id, user_id, reaction_type)

        if existing:
            await db.delete(existing)
            outcome = ToggleResult(action="removed", active=False)
        else:
            db.add(Reaction(user_id=user_id, segment_id=segment_id, reaction_type=reaction_type))
            outcome = ToggleResult(action="added", active=True)
        try:
            await db.commit()
        except IntegrityError:
            # another toggle for the same key committed first
            await db.rollback()
            raise ConflictError("Reaction was changed by another request, please retry.")
        return outcome
