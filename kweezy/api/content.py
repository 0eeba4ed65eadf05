"""
Public catalogue API: novels, chapters and segments
"""
from typing import Optional
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.db.database import get_db
from kweezy.schemas.common import ResponseModel
from kweezy.services.content_service import ContentService
from kweezy.utils.auth import CurrentUser, get_optional_user

router = APIRouter(prefix="/api/content", tags=["Content"])


@router.get("/novels", response_model=ResponseModel)
async def list_novels(db: AsyncSession = Depends(get_db)):
    novels = await ContentService.list_novels(db)
    return ResponseModel(code=200, message="success", data=novels)


@router.get("/novels/{novelId}", response_model=ResponseModel)
async def get_novel_detail(
    novelId: int = Path(..., ge=1, description="Novel ID"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[CurrentUser] = Depends(get_optional_user)
):
    """
    Novel with its chapters; userProgress is filled for logged-in viewers
    """
    viewer_id = current_user.user_id if current_user else None
    detail = await ContentService.novel_detail(db, novelId, viewer_id)
    return ResponseModel(code=200, message="success", data=detail)


@router.get("/chapters/{chapterId}/segments", response_model=ResponseModel)
async def get_chapter_segments(
    chapterId: int = Path(..., ge=1, description="Chapter ID"),
    db: AsyncSession = Depends(get_db)
):
    segments = await ContentService.chapter_segments(db, chapterId)
    return ResponseModel(code=200, message="success", data=segments)
