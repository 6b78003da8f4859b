"""
User repository - all user data access behind a narrow interface.

Every read goes through a fixed projection: ``USER_PROJECTION`` for general
use and ``LOGIN_PROJECTION`` for authentication, which is the only one that
loads the password column.
"""

import logging

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, raiseload, selectinload

from eventhub.core.errors import HttpError
from eventhub.db.models import Event, User
from eventhub.db.repositories.base_repository import BaseRepository
from eventhub.schemas.user import (
    LoginKey,
    UserCreate,
    UserCredentials,
    UserResponse,
    UserUpdate,
    parse_birth_date,
)

logger = logging.getLogger(__name__)

EVENT_FIELDS = (Event.id, Event.title, Event.sport, Event.date, Event.location)

USER_PROJECTION = (
    load_only(
        User.id,
        User.username,
        User.email,
        User.role,
        User.avatar,
        User.location,
        User.birth_date,
        User.gender,
        User.bio,
    ),
    selectinload(User.events).load_only(*EVENT_FIELDS),
    selectinload(User.created_events).load_only(*EVENT_FIELDS),
)

LOGIN_PROJECTION = (
    load_only(User.id, User.username, User.email, User.role, User.password),
    raiseload("*"),
)

LOGIN_COLUMNS = {
    LoginKey.EMAIL: User.email,
    LoginKey.USERNAME: User.username,
}


def _not_found(id: str) -> HttpError:
    return HttpError(404, "Not Found", f"User {id} not found")


class UserRepository(BaseRepository[User]):
    """CRUD and login lookup for users. Operations return projected schemas."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)
        logger.debug("Instantiated users repository")

    def _projected(self) -> Select:
        return select(User).options(*USER_PROJECTION).execution_options(populate_existing=True)

    async def read_all(self) -> list[UserResponse]:
        result = await self.session.execute(self._projected().order_by(User.username))
        return [UserResponse.model_validate(user) for user in result.scalars().all()]

    async def read_by_id(self, id: str) -> UserResponse:
        result = await self.session.execute(self._projected().where(User.id == id))
        user = result.scalar_one_or_none()
        if user is None:
            raise _not_found(id)
        return UserResponse.model_validate(user)

    async def search_for_login(self, key: LoginKey | str, value: str) -> UserCredentials:
        """Find the first user whose email or username equals ``value``.

        Raises 404 for an unknown key before querying, and a generic 404 when
        nothing matches so callers cannot tell which credential was wrong.
        """
        try:
            login_key = LoginKey(key)
        except ValueError:
            raise HttpError(404, "Not Found", "Invalid query parameters") from None

        column = LOGIN_COLUMNS[login_key]
        result = await self.session.execute(
            select(User)
            .where(column == value)
            .options(*LOGIN_PROJECTION)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        user = result.scalars().first()
        if user is None:
            raise HttpError(404, "Not Found", f"Invalid {login_key.value} or password")
        return UserCredentials.model_validate(user)

    async def create(self, data: UserCreate) -> UserResponse:
        fields = data.model_dump(exclude={"birth_date_string"})
        user = User(
            **fields,
            birth_date=parse_birth_date(data.birth_date_string),
            role="user",
            bio="",
        )
        await self._add(user)
        logger.debug("Created user %s", user.id)
        return await self.read_by_id(user.id)

    async def update(self, id: str, data: UserUpdate) -> UserResponse:
        user = await self._lock_by_id(id, *USER_PROJECTION)
        if user is None:
            raise _not_found(id)

        # An explicit null clears a nullable column
        changes = data.model_dump(exclude_unset=True)
        if "birth_date_string" in changes:
            birth_date_string = changes.pop("birth_date_string")
            changes["birth_date"] = (
                parse_birth_date(birth_date_string) if birth_date_string is not None else None
            )
        for field, value in changes.items():
            setattr(user, field, value)

        await self.session.flush()
        logger.debug("Updated user %s fields=%s", id, sorted(changes))
        return await self.read_by_id(id)

    async def delete(self, id: str) -> UserResponse:
        user = await self._lock_by_id(id, *USER_PROJECTION)
        if user is None:
            raise _not_found(id)

        snapshot = UserResponse.model_validate(user)
        await self._remove(user)
        logger.debug("Deleted user %s", id)
        return snapshot
