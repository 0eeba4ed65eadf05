"""
Account API
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.db.database import get_db
from kweezy.schemas.auth import RegisterRequest, LoginRequest, ProfileUpdateRequest
from kweezy.schemas.common import ResponseModel
from kweezy.services.auth_service import AuthService
from kweezy.utils.auth import CurrentUser, get_current_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new reader account
    """
    user = await AuthService.register(
        db,
        username=register_data.username,
        email=register_data.email,
        password=register_data.password
    )
    return ResponseModel(
        code=201,
        message="User registered successfully",
        data={"user": user}
    )


@router.post("/login", response_model=ResponseModel)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Exchange email and password for a bearer token
    """
    result = await AuthService.login(db, email=login_data.email, password=login_data.password)
    return ResponseModel(code=200, message="Login successful", data=result)


@router.get("/profile", response_model=ResponseModel)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    user = await AuthService.get_profile(db, current_user.user_id)
    return ResponseModel(code=200, message="success", data=user)


@router.put("/profile", response_model=ResponseModel)
async def update_profile(
    update_data: ProfileUpdateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Update the caller's username and/or username color
    """
    user = await AuthService.update_profile(
        db,
        current_user.user_id,
        username=update_data.username,
        username_color=update_data.usernameColor
    )
    return ResponseModel(code=200, message="Profile updated successfully", data=user)
