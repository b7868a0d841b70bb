from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from blog.database import get_db
from blog.dependencies import get_requester
from blog.policy import Requester
from blog.schemas import UserCreate, UserResponse, UserDetail
from blog.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])

@router.get("", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await user_service.get_users(db)

@router.get("/{user_id}", response_model=UserDetail)
async def get_user(
    user_id: int,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    # Drafts show up only for the user themself or an administrator.
    public_only = not (requester.is_admin or requester.user_id == user_id)
    user = await user_service.get_user(db, user_id, public_only=public_only)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.post("", status_code=201, response_model=UserResponse)
async def create_user(
    data: UserCreate,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    if data.is_admin and not requester.is_admin:
        raise HTTPException(status_code=403, detail="Only administrators can create administrators")
    try:
        return await user_service.create_user(db, data)
    except IntegrityError:
        raise HTTPException(
            status_code=409,
            detail="A user with this username or email already exists",
        )
