"""DraftStore — local cache of in-progress answers, keyed by survey.

Drafts let a respondent reload the page (or restart the CLI) and continue
where they left off.  One JSON object per survey is kept under the key
``formbricks-{survey_id}-responses``, mapping question id -> answer.

The store sits on top of an injected :class:`DraftStorage`, so tests use
:class:`InMemoryDraftStorage` while real sessions use the SQL-backed
storage from ``survey_runtime_db``.

Drafts are best-effort: a corrupt or unreadable draft is reported as
absent and a failed write is logged, never raised.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from survey_runtime.constants import DRAFT_KEY_TEMPLATE
from survey_runtime.errors import DraftStorageError
from survey_runtime.interfaces import DraftStorage

logger = logging.getLogger(__name__)


def draft_key(survey_id: str) -> str:
    return DRAFT_KEY_TEMPLATE.format(survey_id=survey_id)


class InMemoryDraftStorage(DraftStorage):
    """Dict-backed storage; lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)


class DraftStore:
    """Survey-scoped draft operations over a :class:`DraftStorage`.

    Args:
        storage: where the serialized drafts live
    """

    def __init__(self, storage: DraftStorage) -> None:
        self._storage = storage

    async def store(self, survey_id: str, answers: dict[str, Any]) -> None:
        """Merge *answers* into the survey's draft (existing keys are overwritten)."""
        merged = await self.get_all(survey_id) or {}
        merged.update(answers)
        try:
            await self._storage.set(draft_key(survey_id), json.dumps(merged))
        except DraftStorageError as exc:
            logger.warning("Could not store draft for survey %s: %s", survey_id, exc)

    async def get_all(self, survey_id: str) -> dict[str, Any] | None:
        """Return the whole draft, or None if missing or unreadable."""
        try:
            raw = await self._storage.get(draft_key(survey_id))
        except DraftStorageError as exc:
            logger.warning("Could not read draft for survey %s: %s", survey_id, exc)
            return None
        if raw is None:
            return None

        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Discarding corrupt draft for survey %s", survey_id)
            return None
        if not isinstance(parsed, dict):
            logger.warning(
                "Discarding draft for survey %s: expected an object, got %s",
                survey_id, type(parsed).__name__,
            )
            return None
        return parsed

    async def get_one(self, survey_id: str, question_id: str) -> Any:
        """Return the stored answer for one question, or None."""
        draft = await self.get_all(survey_id)
        if draft is None:
            return None
        return draft.get(question_id)

    async def clear(self, survey_id: str) -> None:
        try:
            await self._storage.remove(draft_key(survey_id))
        except DraftStorageError as exc:
            logger.warning("Could not clear draft for survey %s: %s", survey_id, exc)
