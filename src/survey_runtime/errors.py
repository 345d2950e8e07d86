"""Exception types raised by the survey runtime.

Only structural and I/O failures are exceptions.  An answer that does not
satisfy its question is reported as a ``False`` return value (or a step
carrying an ``error``), never raised.
"""


class SurveyRuntimeError(Exception):
    """Base class for all survey runtime errors."""


class QuestionNotFoundError(SurveyRuntimeError, KeyError):
    """A question id referenced at runtime does not exist in the survey.

    Typically caused by a logic rule pointing at a deleted or renamed
    question.  The survey document is corrupt and the player cannot
    continue safely.
    """

    def __init__(self, survey_id: str, question_id: str) -> None:
        super().__init__(f"Question not found: survey_id={survey_id}, question_id={question_id}")
        self.survey_id = survey_id
        self.question_id = question_id

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class BackendError(SurveyRuntimeError):
    """A call to the remote response backend failed (network or HTTP status)."""


class DraftStorageError(SurveyRuntimeError):
    """The draft storage could not be read or written."""
