"""SurveyDraft ORM model — one row per draft key.

The key is the survey-scoped draft key (``formbricks-{surveyId}-responses``)
and the value the serialized JSON answer map, exactly as the draft store
hands it over.  The table is a plain key-value store; it knows nothing
about surveys.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from survey_runtime_db.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SurveyDraft(Base):
    __tablename__ = "survey_drafts"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<SurveyDraft key={self.key!r} updated_at={self.updated_at}>"
