"""Public model re-exports for survey_runtime.

Consumers should import from ``survey_runtime.models`` rather than
reaching into sub-modules directly.
"""

# --- Localized text ---
from survey_runtime.models.i18n import LocalizedMap, LocalizedText, PlainText

# --- Logic ---
from survey_runtime.models.logic import (
    LiteralRule,
    LogicRule,
    NumericRule,
    ScalarRule,
    SetRule,
)

# --- Questions ---
from survey_runtime.models.question import (
    BaseQuestion,
    Choice,
    ChoiceQuestion,
    ConsentQuestion,
    CTAQuestion,
    MultipleChoiceMultiQuestion,
    MultipleChoiceSingleQuestion,
    NPSQuestion,
    OpenTextQuestion,
    PictureChoice,
    PictureSelectionQuestion,
    Question,
    RatingQuestion,
    question_mapper,
)

# --- Survey document ---
from survey_runtime.models.survey import Survey, SurveyLanguage, ThankYouCard

# --- Backend records ---
from survey_runtime.models.response import (
    Display,
    Person,
    ResponseMeta,
    ResponsePayload,
    ResponseRecord,
)

# --- Session / step ---
from survey_runtime.models.session import (
    FinishedStep,
    PlayerContext,
    PlayerPhase,
    PlayerState,
    QuestionPayload,
    QuestionStep,
    StepResult,
)

__all__ = [
    # Localized text
    "LocalizedMap",
    "LocalizedText",
    "PlainText",
    # Logic
    "LiteralRule",
    "LogicRule",
    "NumericRule",
    "ScalarRule",
    "SetRule",
    # Questions
    "BaseQuestion",
    "Choice",
    "ChoiceQuestion",
    "ConsentQuestion",
    "CTAQuestion",
    "MultipleChoiceMultiQuestion",
    "MultipleChoiceSingleQuestion",
    "NPSQuestion",
    "OpenTextQuestion",
    "PictureChoice",
    "PictureSelectionQuestion",
    "Question",
    "RatingQuestion",
    "question_mapper",
    # Survey
    "Survey",
    "SurveyLanguage",
    "ThankYouCard",
    # Backend records
    "Display",
    "Person",
    "ResponseMeta",
    "ResponsePayload",
    "ResponseRecord",
    # Session
    "FinishedStep",
    "PlayerContext",
    "PlayerPhase",
    "PlayerState",
    "QuestionPayload",
    "QuestionStep",
    "StepResult",
]
