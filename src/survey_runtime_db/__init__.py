"""survey_runtime_db — SQL persistence for survey drafts.

This package provides the ORM model, async engine factory, repository and
the :class:`SqlDraftStorage` adapter that plugs into
``survey_runtime.DraftStore``, so in-progress answers survive restarts.
"""

from survey_runtime_db.engine import dispose_engine, get_engine, get_session_factory, init_models
from survey_runtime_db.models.draft import SurveyDraft
from survey_runtime_db.repository import DraftRepository
from survey_runtime_db.storage import SqlDraftStorage

__all__ = [
    "SurveyDraft",
    "get_engine",
    "get_session_factory",
    "init_models",
    "dispose_engine",
    "DraftRepository",
    "SqlDraftStorage",
]
