"""Survey document model — the immutable input of the player.

A survey is an ordered list of questions plus document-level settings
(redirect URL, languages, thank-you card).  The player never mutates it.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import model_validator

from survey_runtime.constants import DEFAULT_LANGUAGE, END_QUESTION_ID
from survey_runtime.models.i18n import LocalizedText
from survey_runtime.models.question import DocumentModel, Question


class SurveyLanguage(DocumentModel):
    """A language the survey is offered in.

    ``id`` is the key used in localized text maps; exactly one language
    is normally flagged ``default``.
    """

    id: str
    default: bool = False
    alias: Optional[str] = None


class ThankYouCard(DocumentModel):
    """Completion message shown once the survey is finished."""

    enabled: bool = True
    headline: Optional[LocalizedText] = None
    subheader: Optional[LocalizedText] = None


class Survey(DocumentModel):
    """Survey document supplied by the authoring backend."""

    id: str
    name: Optional[str] = None
    environment_id: Optional[str] = None
    questions: List[Question]
    redirect_url: Optional[str] = None
    languages: List[SurveyLanguage] = []
    thank_you_card: Optional[ThankYouCard] = None

    @model_validator(mode="after")
    def _chk(self):
        if not self.questions:
            raise ValueError("survey must contain at least one question")
        seen: set[str] = set()
        for q in self.questions:
            if q.id in seen:
                raise ValueError(f"duplicate question id: {q.id}")
            if q.id == END_QUESTION_ID:
                raise ValueError(f"question id '{END_QUESTION_ID}' is reserved")
            seen.add(q.id)
        return self

    @property
    def question_ids(self) -> list[str]:
        return [q.id for q in self.questions]

    @property
    def default_language(self) -> str:
        """Id of the default language, or the single-language key."""
        for lang in self.languages:
            if lang.default:
                return lang.id
        return DEFAULT_LANGUAGE

    def index_of(self, question_id: str) -> int:
        """Position of a question in document order, -1 if absent."""
        for i, q in enumerate(self.questions):
            if q.id == question_id:
                return i
        return -1

    def dangling_destinations(self) -> list[tuple[str, str]]:
        """Return (question_id, destination) pairs whose destination is unknown.

        Such rules raise at runtime when they fire; callers can use this to
        warn about a broken document up front.
        """
        known = set(self.question_ids) | {END_QUESTION_ID}
        return [
            (q.id, rule.destination)
            for q in self.questions
            for rule in q.logic
            if rule.destination and rule.destination not in known
        ]
