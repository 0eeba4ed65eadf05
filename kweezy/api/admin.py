"""
Admin content management API
"""
import logging
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.db.database import get_db
from kweezy.schemas.admin import NovelCreate, ChapterCreate, ChapterContentReplace
from kweezy.schemas.common import ResponseModel
from kweezy.services.content_service import ContentService
from kweezy.utils.auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/novels/list", response_model=ResponseModel)
async def list_novel_options(db: AsyncSession = Depends(get_db)):
    """
    Novel ids and titles for selection lists
    """
    options = await ContentService.novel_options(db)
    return ResponseModel(code=200, message="success", data=options)


@router.get("/novels/manage", response_model=ResponseModel)
async def list_novels_for_management(db: AsyncSession = Depends(get_db)):
    novels = await ContentService.novels_with_chapters(db)
    return ResponseModel(code=200, message="success", data=novels)


@router.post("/novels", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_novel(
    novel_data: NovelCreate,
    db: AsyncSession = Depends(get_db)
):
    novel = await ContentService.create_novel(
        db,
        title=novel_data.title,
        author_name=novel_data.authorName,
        description=novel_data.description
    )
    return ResponseModel(code=201, message="Novel created", data=novel)


@router.post("/novels/{novelId}/chapters", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_chapter(
    chapter_data: ChapterCreate,
    novelId: int = Path(..., ge=1, description="Novel ID"),
    db: AsyncSession = Depends(get_db)
):
    chapter = await ContentService.create_chapter(
        db,
        novel_id=novelId,
        chapter_number=chapter_data.chapterNumber,
        title=chapter_data.title
    )
    return ResponseModel(code=201, message="Chapter created", data=chapter)


@router.post("/novels/{novelId}/chapters/{chapterNumber}/content", response_model=ResponseModel)
async def replace_chapter_content(
    content_data: ChapterContentReplace,
    novelId: int = Path(..., ge=1, description="Novel ID"),
    chapterNumber: int = Path(..., ge=1, description="Chapter number"),
    db: AsyncSession = Depends(get_db)
):
    """
    Replace every segment of the chapter with the submitted set
    """
    chapter_id = await ContentService.replace_chapter_content(
        db, novelId, chapterNumber, content_data.segments
    )
    return ResponseModel(
        code=200,
        message=f"Content for chapter {chapterNumber} updated successfully.",
        data={"chapterId": chapter_id, "segmentCount": len(content_data.segments)}
    )


@router.delete("/novels/{novelId}", response_model=ResponseModel)
async def delete_novel(
    novelId: int = Path(..., ge=1, description="Novel ID"),
    db: AsyncSession = Depends(get_db)
):
    await ContentService.delete_novel(db, novelId)
    logger.info("Deleted novel %s", novelId)
    return ResponseModel(code=200, message="Novel deleted successfully.")


@router.delete("/chapters/{chapterId}", response_model=ResponseModel)
async def delete_chapter(
    chapterId: int = Path(..., ge=1, description="Chapter ID"),
    db: AsyncSession = Depends(get_db)
):
    await ContentService.delete_chapter(db, chapterId)
    logger.info("Deleted chapter %s", chapterId)
    return ResponseModel(code=200, message="Chapter deleted successfully.")
