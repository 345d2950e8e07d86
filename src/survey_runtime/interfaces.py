"""Abstract interfaces for the player's external collaborators.

These ABCs define the contract that implementations must fulfil.  The SDK
ships one concrete implementation of each:

  - :class:`ResponseBackend` -> :class:`survey_runtime.client.HttpResponseBackend`
  - :class:`DraftStorage` -> :class:`survey_runtime.drafts.InMemoryDraftStorage`
    (and ``survey_runtime_db.SqlDraftStorage`` for durable drafts)

Typical integration flow::

    context = PlayerContext.from_url(page_url)
    backend: ResponseBackend = HttpResponseBackend(timeout=10)
    drafts = DraftStore(SqlDraftStorage(get_session_factory()))

    player = SurveyPlayer(survey, drafts, backend, context=context)
    step = await player.start()
    while step.type == "question":
        step = await player.submit_answer(ask_user(step.question))
"""

from abc import ABC, abstractmethod

from survey_runtime.models.response import Display, Person, ResponsePayload, ResponseRecord


class ResponseBackend(ABC):
    """Interface to the remote response-storage service.

    Every call takes an explicit ``api_host`` because the player may run
    inside an embedded widget whose origin differs from the host page.
    Implementations raise :class:`~survey_runtime.errors.BackendError` on
    any transport or server failure.
    """

    @abstractmethod
    async def get_or_create_person(
        self, environment_id: str, user_id: str | None, api_host: str
    ) -> Person:
        """Resolve the respondent; ``user_id=None`` means anonymous."""
        ...

    @abstractmethod
    async def create_display(self, survey_id: str, api_host: str) -> Display:
        """Record that the survey was shown."""
        ...

    @abstractmethod
    async def mark_display_responded(self, display_id: str, api_host: str) -> None:
        """Flag a display as having led to a response."""
        ...

    @abstractmethod
    async def create_response(self, payload: ResponsePayload, api_host: str) -> ResponseRecord:
        """Create the response record and return it (with its id)."""
        ...

    @abstractmethod
    async def update_response(
        self, payload: ResponsePayload, response_id: str, api_host: str
    ) -> None:
        """Replace the data of an existing response record."""
        ...


class DraftStorage(ABC):
    """Minimal async string key-value storage backing the draft store.

    Implementations raise :class:`~survey_runtime.errors.DraftStorageError`
    when the underlying medium fails; a missing key is not an error.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        ...
