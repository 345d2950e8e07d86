"""ORM models for survey_runtime_db."""

from survey_runtime_db.models.base import Base
from survey_runtime_db.models.draft import SurveyDraft

__all__ = ["Base", "SurveyDraft"]
