"""
Base repository - session handling shared by model repositories.
Writes flush only; the request-scoped session commits (see eventhub.db.session).
"""

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses define projections and queries."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def _lock_by_id(self, id: str, *options) -> ModelType | None:
        """Fetch a row with SELECT ... FOR UPDATE inside the current transaction.

        The lock is held until the session commits or rolls back, so a
        following write in the same transaction cannot race a concurrent delete.
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .options(*options)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _add(self, entity: ModelType) -> ModelType:
        """Persist new entity. Caller commits session."""
        self.session.add(entity)
        await self.session.flush()  # Get ID without committing
        return entity

    async def _remove(self, entity: ModelType) -> None:
        await self.session.delete(entity)
        await self.session.flush()
