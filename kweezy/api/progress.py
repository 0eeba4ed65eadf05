"""
Server-side reading progress API
"""
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.db.database import get_db
from kweezy.schemas.common import ResponseModel
from kweezy.schemas.progress import ProgressUpdate
from kweezy.services.progress_service import ProgressService
from kweezy.utils.auth import CurrentUser, get_current_user

router = APIRouter(prefix="/api/progress", tags=["Progress"])


@router.get("/novel/{novelId}", response_model=ResponseModel)
async def get_progress(
    novelId: int = Path(..., ge=1, description="Novel ID"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    The caller's progress for a novel; data is null when none was saved
    """
    progress = await ProgressService.get(db, current_user.user_id, novelId)
    return ResponseModel(code=200, message="success", data=progress)


@router.put("/novel/{novelId}", response_model=ResponseModel)
async def update_progress(
    progress_data: ProgressUpdate,
    novelId: int = Path(..., ge=1, description="Novel ID"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Create or replace the caller's progress for a novel
    """
    progress = await ProgressService.upsert(
        db,
        user_id=current_user.user_id,
        novel_id=novelId,
        chapter_id=progress_data.lastReadChapterId,
        scroll_y=progress_data.lastReadScrollY
    )
    return ResponseModel(code=200, message="Progress updated successfully", data=progress)
