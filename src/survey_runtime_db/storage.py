"""SqlDraftStorage — :class:`DraftStorage` backed by the ``survey_drafts`` table.

Each call opens its own session and commits (or rolls back) before
returning, so a draft written by one player is visible to the next
process that opens the same database.

Usage::

    await init_models()
    drafts = DraftStore(SqlDraftStorage(get_session_factory()))
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from survey_runtime.errors import DraftStorageError
from survey_runtime.interfaces import DraftStorage
from survey_runtime_db.repository import DraftRepository

logger = logging.getLogger(__name__)


class SqlDraftStorage(DraftStorage):
    """Args:
        session_factory: async session factory bound to the drafts database
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._repo = DraftRepository()

    async def get(self, key: str) -> str | None:
        try:
            async with self._session_factory() as db:
                row = await self._repo.get(db, key)
                return row.value if row is not None else None
        except SQLAlchemyError as exc:
            raise DraftStorageError(f"Failed to read draft {key}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        async with self._session_factory() as db:
            try:
                await self._repo.upsert(db, key, value)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                raise DraftStorageError(f"Failed to write draft {key}: {exc}") from exc

    async def remove(self, key: str) -> None:
        async with self._session_factory() as db:
            try:
                removed = await self._repo.delete(db, key)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                raise DraftStorageError(f"Failed to remove draft {key}: {exc}") from exc
        if removed:
            logger.debug("Removed draft %s", key)
