"""
Comments, comment likes and segment reactions API
"""
import random
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.core.config import settings
from kweezy.db.database import get_db
from kweezy.schemas.common import ResponseModel
from kweezy.schemas.interaction import CommentCreate, ReactionToggle
from kweezy.services.comment_service import CommentService
from kweezy.services.reaction_service import ReactionService
from kweezy.utils.auth import CurrentUser, get_current_user, get_optional_user

router = APIRouter(prefix="/api/interactions", tags=["Interactions"])


def get_comment_rng() -> random.Random:
    """Random source for comment injection, overridden in tests"""
    return random.Random()


@router.get("/segments/{segmentId}/comments", response_model=ResponseModel)
async def list_comments(
    segmentId: int = Path(..., ge=1, description="Segment ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(settings.COMMENTS_DEFAULT_LIMIT, ge=1, le=settings.COMMENTS_MAX_LIMIT, description="Page size"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    rng: random.Random = Depends(get_comment_rng)
):
    """
    Ranked comments of a segment

    Anonymous viewers get the same ordering with likedByCurrentUser false.
    """
    viewer_id = current_user.user_id if current_user else None
    comment_page = await CommentService.list_ranked(
        db, segmentId, page, limit, viewer_id=viewer_id, rng=rng
    )
    return ResponseModel(code=200, message="success", data=comment_page)


@router.post("/segments/{segmentId}/comments", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    segmentId: int = Path(..., ge=1, description="Segment ID"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    comment = await CommentService.create(
        db,
        segment_id=segmentId,
        user_id=current_user.user_id,
        comment_text=comment_data.commentText,
        parent_comment_id=comment_data.parentCommentId
    )
    return ResponseModel(code=201, message="Comment created", data=comment)


@router.get("/segments/{segmentId}/reactions", response_model=ResponseModel)
async def get_reaction_counts(
    segmentId: int = Path(..., ge=1, description="Segment ID"),
    db: AsyncSession = Depends(get_db)
):
    counts = await ReactionService.counts(db, segmentId)
    return ResponseModel(code=200, message="success", data=counts)


@router.post("/segments/{segmentId}/reactions", response_model=ResponseModel)
async def toggle_reaction(
    reaction_data: ReactionToggle,
    response: Response,
    segmentId: int = Path(..., ge=1, description="Segment ID"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Add the reaction, or remove it when the caller already reacted with this type
    """
    result = await ReactionService.toggle(
        db, segmentId, current_user.user_id, reaction_data.reactionType
    )
    code = status.HTTP_201_CREATED if result.active else status.HTTP_200_OK
    response.status_code = code
    message = "Reaction added." if result.active else "Reaction removed."
    return ResponseModel(code=code, message=message, data=result)


@router.post("/comments/{commentId}/like", response_model=ResponseModel)
async def toggle_comment_like(
    response: Response,
    commentId: int = Path(..., ge=1, description="Comment ID"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    result, like_count = await CommentService.toggle_like(db, commentId, current_user.user_id)
    code = status.HTTP_201_CREATED if result.active else status.HTTP_200_OK
    response.status_code = code
    message = "Comment liked." if result.active else "Comment unliked."
    return ResponseModel(
        code=code,
        message=message,
        data={"action": result.action, "active": result.active, "likeCount": like_count}
    )
