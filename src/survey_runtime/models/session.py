"""Player session models — the contract between the player and its UI.

These models define what the player returns at each step and the state it
keeps between steps.

Step types:
  - QuestionStep: present one question and wait for an answer
  - FinishedStep: the survey is complete

The ``StepResult`` union covers both cases so callers can dispatch on ``type``.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel, Field

from survey_runtime.constants import RESERVED_QUERY_PARAMS


class PlayerPhase(str, enum.Enum):
    """Lifecycle states of a survey player.

    Transitions:
        prefilling -> active    (startup done, no prefill or prefill did not finish the survey)
        prefilling -> finished  (prefilled answer completed a one-question survey)
        active -> finished      (last question answered or logic jumped to "end")
        finished -> active      (restart)
    """

    PREFILLING = "prefilling"
    ACTIVE = "active"
    FINISHED = "finished"


class PlayerContext(BaseModel):
    """Where and how the survey is being taken.

    Usually built from the survey URL with :meth:`from_url`.
    """

    # Full page URL, recorded in the response meta
    url: str = ""
    # Base URL of the client API; explicit because the player may run in an
    # embedded widget whose origin differs from the host page
    api_host: str = ""
    # Preview sessions never write to the backend
    preview: bool = False
    user_id: Optional[str] = None
    language: Optional[str] = None
    # Query parameters that may prefill the first question, keyed by question id
    prefill: dict[str, str] = {}

    @classmethod
    def from_url(cls, url: str, api_host: str | None = None) -> PlayerContext:
        """Parse the survey URL's query string.

        ``preview=true`` enables preview mode, ``userId`` identifies the
        respondent (ignored in preview), ``lang`` selects the language.
        Remaining parameters are prefill candidates; the first occurrence
        of a repeated parameter wins.
        """
        parts = urlsplit(url)
        params: dict[str, str] = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            params.setdefault(key, value)

        preview = params.get("preview") == "true"
        if api_host is None:
            api_host = f"{parts.scheme}://{parts.netloc}" if parts.netloc else ""

        return cls(
            url=url,
            api_host=api_host,
            preview=preview,
            user_id=None if preview else params.get("userId"),
            language=params.get("lang") or None,
            prefill={k: v for k, v in params.items() if k not in RESERVED_QUERY_PARAMS},
        )


class PlayerState(BaseModel):
    """Mutable state owned by one :class:`SurveyPlayer`."""

    phase: PlayerPhase = PlayerPhase.PREFILLING
    current_question_id: Optional[str] = None
    progress: float = 0.0
    finished: bool = False
    response_id: Optional[str] = None
    display_id: Optional[str] = None
    person_id: Optional[str] = None
    # Previously stored answer for the current question (resume / back)
    draft_value: Any = None
    # All answers committed in this session, merged with a resumed draft
    answers: dict[str, Any] = Field(default_factory=dict)
    # Set once a redirect has been scheduled
    redirect_url: Optional[str] = None


class QuestionPayload(BaseModel):
    """Flattened question for UI consumers.

    All localized text is already resolved to the active language and
    logic rules are stripped — the UI only needs what it renders.
    """

    id: str
    type: str
    headline: str
    subheader: str | None = None
    required: bool
    # [{id, label}] for choice types, [{id, image_url}] for pictureSelection
    options: list[dict] | None = None
    # {min, max} for nps/rating, {scale} for rating, {allow_multi} for pictures
    constraints: dict | None = None
    # Remaining resolved texts: placeholder, button labels, html...
    labels: dict[str, str] | None = None


class QuestionStep(BaseModel):
    """Player step: present a question and wait for an answer."""

    type: Literal["question"] = "question"
    question: QuestionPayload
    progress: float
    is_first: bool
    is_last: bool
    # Answer restored from the draft store, to pre-fill the input
    draft_value: Any = None
    # Set when the last submitted answer was rejected; the question is unchanged
    error: str | None = None


class FinishedStep(BaseModel):
    """Player step: the survey is complete."""

    type: Literal["finished"] = "finished"
    progress: float = 1.0
    response_id: str | None = None
    # Absolute URL the respondent will be sent to, if any
    redirect_url: str | None = None


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | FinishedStep
