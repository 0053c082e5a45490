"""User profile endpoints."""

from fastapi import APIRouter, HTTPException

from recipeshare.dependencies import UserDirectoryDep
from recipeshare.models import SessionUser, UserCreate

router = APIRouter()


@router.post("/", response_model=SessionUser, status_code=201)
async def save_user(body: UserCreate, service: UserDirectoryDep):
    return await service.save_user(body)


@router.get("/{uid}", response_model=SessionUser)
async def get_user(uid: str, service: UserDirectoryDep):
    user = await service.get_user(uid)
    if not user:
        raise HTTPException(404, "User not found")
    return user
