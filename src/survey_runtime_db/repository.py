"""Async CRUD repository for SurveyDraft.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries.
"""

from datetime import datetime, timezone

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from survey_runtime_db.models.draft import SurveyDraft


class DraftRepository:
    """Async read/write operations on the ``survey_drafts`` table."""

    async def get(self, db: AsyncSession, key: str) -> SurveyDraft | None:
        """Fetch a draft row by key."""
        return await db.get(SurveyDraft, key)

    async def upsert(self, db: AsyncSession, key: str, value: str) -> SurveyDraft:
        """Insert or replace the value stored under *key*.

        The caller must ``await db.commit()`` to persist.
        """
        row = await db.get(SurveyDraft, key)
        if row is None:
            row = SurveyDraft(key=key, value=value)
            db.add(row)
        else:
            row.value = value
            row.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return row

    async def delete(self, db: AsyncSession, key: str) -> bool:
        """Delete the row under *key*.  Returns True if a row was removed."""
        result = await db.execute(delete(SurveyDraft).where(SurveyDraft.key == key))
        await db.flush()
        return result.rowcount > 0
