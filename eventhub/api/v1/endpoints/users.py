"""
User endpoints - listing, profile CRUD, registration and login.
Errors raised as HttpError are rendered by the app-level handler.
"""

from fastapi import APIRouter, status

from eventhub.core.dependencies import CurrentUser, UserRepo, UserSvc, ensure_can_modify
from eventhub.schemas.user import LoginRequest, TokenResponse, UserCreate, UserResponse, UserUpdate

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(repo: UserRepo):
    return await repo.read_all()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(repo: UserRepo, user_id: str):
    return await repo.read_by_id(user_id)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(service: UserSvc, data: UserCreate):
    """Create new user. Role and bio are assigned by the server."""
    return await service.register(data)


@router.post("/login", response_model=TokenResponse)
async def login(service: UserSvc, data: LoginRequest):
    """Authenticate by email or username and return a JWT."""
    return await service.login(data.key, data.identifier, data.password)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(service: UserSvc, current: CurrentUser, user_id: str, data: UserUpdate):
    ensure_can_modify(current, user_id)
    return await service.update(user_id, data)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(repo: UserRepo, current: CurrentUser, user_id: str):
    """Delete user and return its last state."""
    ensure_can_modify(current, user_id)
    return await repo.delete(user_id)
