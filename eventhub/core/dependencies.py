"""
FastAPI dependencies - repository/service injection and bearer-token auth.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eventhub.core.errors import HttpError
from eventhub.core.security import decode_access_token
from eventhub.db.repositories.user_repository import UserRepository
from eventhub.db.session import DbSession
from eventhub.services.user_service import UserService

security = HTTPBearer(auto_error=False)


def get_user_repository(session: DbSession) -> UserRepository:
    return UserRepository(session)


def get_user_service(repo: Annotated[UserRepository, Depends(get_user_repository)]) -> UserService:
    return UserService(repo)


@dataclass(frozen=True)
class AuthUser:
    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


async def get_current_user(
    repo: Annotated[UserRepository, Depends(get_user_repository)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthUser:
    """Resolve JWT to the stored user. Raises 401 if missing, invalid or deleted."""
    if not credentials:
        raise HttpError(401, "Unauthorized", "Not authenticated")
    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise HttpError(401, "Unauthorized", "Invalid or expired token")
    try:
        user = await repo.read_by_id(payload["sub"])
    except HttpError:
        raise HttpError(401, "Unauthorized", "User no longer exists")
    return AuthUser(id=user.id, role=user.role)


def ensure_can_modify(current: AuthUser, user_id: str) -> None:
    """Only the user themself or an admin may change or delete an account."""
    if current.id != user_id and not current.is_admin:
        raise HttpError(403, "Forbidden", "Not allowed to modify this user")


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
UserSvc = Annotated[UserService, Depends(get_user_service)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
