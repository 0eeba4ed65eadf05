"""
Blog API: public reads and admin authoring
"""
from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.core.config import settings
from kweezy.db.database import get_db
from kweezy.schemas.blog import BlogPostCreate, BlogPostUpdate
from kweezy.schemas.common import ResponseModel
from kweezy.services.blog_service import BlogService
from kweezy.utils.auth import CurrentUser, require_admin

router = APIRouter(prefix="/api/blog", tags=["Blog"])


@router.get("/", response_model=ResponseModel)
async def list_posts(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(settings.BLOG_DEFAULT_LIMIT, ge=1, le=settings.BLOG_MAX_LIMIT, description="Page size"),
    db: AsyncSession = Depends(get_db)
):
    """
    Published posts, newest first
    """
    post_page = await BlogService.list_published(db, page, limit)
    return ResponseModel(code=200, message="success", data=post_page)


@router.get("/{postId}", response_model=ResponseModel)
async def get_post(
    postId: int = Path(..., ge=1, description="Post ID"),
    db: AsyncSession = Depends(get_db)
):
    post = await BlogService.get_published(db, postId)
    return ResponseModel(code=200, message="success", data=post)


@router.post("/", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: BlogPostCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    post = await BlogService.create(
        db,
        author_id=current_user.user_id,
        title=post_data.title,
        content=post_data.content,
        publish_now=post_data.publishNow
    )
    return ResponseModel(code=201, message="Blog post created", data=post)


@router.put("/{postId}", response_model=ResponseModel)
async def update_post(
    update_data: BlogPostUpdate,
    postId: int = Path(..., ge=1, description="Post ID"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """
    Partial update; send publishedAt null to unpublish
    """
    post = await BlogService.update(db, postId, update_data)
    return ResponseModel(code=200, message="Blog post updated", data=post)


@router.delete("/{postId}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    postId: int = Path(..., ge=1, description="Post ID"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    await BlogService.delete(db, postId)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
