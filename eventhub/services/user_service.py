"""
User service - registration, login and password handling around the repository.
Keeps controllers thin; the repository stays free of hashing and token logic.
"""

import logging

from sqlalchemy.exc import IntegrityError

from eventhub.core.errors import HttpError
from eventhub.core.security import create_access_token, hash_password, verify_password
from eventhub.db.repositories.user_repository import UserRepository
from eventhub.schemas.user import TokenResponse, UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def register(self, data: UserCreate) -> UserResponse:
        """Hash the password and create the user. Duplicate username/email -> 409."""
        hashed = data.model_copy(update={"password": hash_password(data.password)})
        try:
            user = await self.user_repo.create(hashed)
        except IntegrityError:
            raise HttpError(409, "Conflict", "Username or email already registered") from None
        logger.info("Registered user %s (%s)", user.id, user.username)
        return user

    async def login(self, key: str, value: str, password: str) -> TokenResponse:
        """Check credentials and issue a JWT.

        A wrong password raises the same error as an unknown user, so the
        response does not reveal which half of the pair was wrong.
        """
        credentials = await self.user_repo.search_for_login(key, value)
        if not verify_password(password, credentials.password):
            logger.warning("Failed login for %s=%s", key, value)
            raise HttpError(404, "Not Found", f"Invalid {key} or password")

        token = create_access_token(credentials.id, credentials.role)
        user = await self.user_repo.read_by_id(credentials.id)
        return TokenResponse(token=token, user=user)

    async def update(self, id: str, data: UserUpdate) -> UserResponse:
        if data.password is not None:
            data = data.model_copy(update={"password": hash_password(data.password)})
        try:
            return await self.user_repo.update(id, data)
        except IntegrityError:
            raise HttpError(409, "Conflict", "Username or email already registered") from None
