"""survey_runtime — survey-taking runtime SDK.

Public API:
    SurveyPlayer        — state machine walking a respondent through a survey
    BranchingEvaluator  — resolves a question's logic rules against an answer
    DraftStore          — survey-scoped local drafts over a DraftStorage
    InMemoryDraftStorage — process-local DraftStorage
    HttpResponseBackend — ResponseBackend over the client HTTP API
    load_survey / load_surveys — read survey documents from YAML / JSON

Answer handling:
    validate_answer     — check a raw string answer
    check_answer        — check a typed answer
    normalize_answer    — raw string -> typed answer
    resolve             — pick the string for a language from localized text

Interfaces:
    ResponseBackend     — ABC for the remote response-storage service
    DraftStorage        — ABC for the key-value medium behind DraftStore

Step models:
    StepResult          — union type returned by player step methods
    QuestionStep        — step: present one question
    FinishedStep        — step: survey complete
    PlayerContext       — session inputs parsed from the survey URL
"""

from survey_runtime.client import HttpResponseBackend
from survey_runtime.drafts import DraftStore, InMemoryDraftStorage
from survey_runtime.errors import (
    BackendError,
    DraftStorageError,
    QuestionNotFoundError,
    SurveyRuntimeError,
)
from survey_runtime.evaluator import BranchingEvaluator
from survey_runtime.i18n import is_complete, resolve
from survey_runtime.interfaces import DraftStorage, ResponseBackend
from survey_runtime.loader import load_survey, load_surveys
from survey_runtime.models.session import (
    FinishedStep,
    PlayerContext,
    PlayerPhase,
    PlayerState,
    QuestionPayload,
    QuestionStep,
    StepResult,
)
from survey_runtime.models.survey import Survey
from survey_runtime.normalizer import normalize_answer
from survey_runtime.player import SurveyPlayer
from survey_runtime.validator import check_answer, validate_answer

__all__ = [
    # Player & collaborators
    "SurveyPlayer",
    "BranchingEvaluator",
    "DraftStore",
    "InMemoryDraftStorage",
    "HttpResponseBackend",
    "load_survey",
    "load_surveys",
    # Answer handling
    "validate_answer",
    "check_answer",
    "normalize_answer",
    "resolve",
    "is_complete",
    # Interfaces
    "ResponseBackend",
    "DraftStorage",
    # Models
    "Survey",
    "FinishedStep",
    "PlayerContext",
    "PlayerPhase",
    "PlayerState",
    "QuestionPayload",
    "QuestionStep",
    "StepResult",
    # Errors
    "SurveyRuntimeError",
    "QuestionNotFoundError",
    "BackendError",
    "DraftStorageError",
]
