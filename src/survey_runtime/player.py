"""SurveyPlayer — the state machine that walks a respondent through a survey.

One player instance serves one respondent session.  It owns a
:class:`PlayerState` and talks to two collaborators:

  - a :class:`DraftStore` for local, resumable drafts
  - an optional :class:`ResponseBackend` for the remote response record

Lifecycle::

    prefilling --start()--> active --submit...--> finished
                                ^                    |
                                +----restart()-------+

``start()`` runs the prefilling phase: resolve the respondent, resume from
a draft, record the display and apply a first-question prefill from the
URL.  Submits are only accepted once the player is active.

Navigation:
  - after an answer, the question's logic rules pick the next question
    (first match wins); otherwise the next question in document order
  - ``go_back()`` always returns to the previous question in *document
    order*.  The path taken through branching logic is not recorded, so
    going back from a question reached by a jump lands on its document
    predecessor, not on the question that jumped.

Remote calls are best-effort: a :class:`BackendError` is logged and the
respondent keeps moving.  A logic rule naming an unknown question raises
:class:`QuestionNotFoundError`; the document is broken and the player
stops.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from survey_runtime.constants import DISMISSED, END_QUESTION_ID, NPS_MAX, NPS_MIN, REDIRECT_DELAY_SECONDS
from survey_runtime.drafts import DraftStore
from survey_runtime.errors import BackendError, QuestionNotFoundError
from survey_runtime.evaluator import BranchingEvaluator
from survey_runtime.i18n import is_survey_available_in_language, resolve
from survey_runtime.interfaces import ResponseBackend
from survey_runtime.models.question import (
    BaseQuestion,
    ChoiceQuestion,
    CTAQuestion,
    MultipleChoiceMultiQuestion,
    NPSQuestion,
    PictureSelectionQuestion,
    RatingQuestion,
)
from survey_runtime.models.response import ResponseMeta, ResponsePayload
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
from survey_runtime.validator import check_answer, validate_answer

logger = logging.getLogger(__name__)

# Error code carried by a QuestionStep when the submitted answer was rejected
INVALID_ANSWER = "invalid_answer"


class SurveyPlayer:
    """Drives one respondent through one survey.

    Args:
        survey: the survey document (never modified)
        drafts: local draft store
        backend: remote response backend; ``None`` disables remote sync
        context: session inputs (URL, preview flag, user id, language, prefill)
        evaluator: branching evaluator, mainly for tests
        on_redirect: called with the absolute URL when the redirect fires
        redirect_delay: seconds between finishing and the redirect
    """

    def __init__(
        self,
        survey: Survey,
        drafts: DraftStore,
        backend: ResponseBackend | None = None,
        *,
        context: PlayerContext | None = None,
        evaluator: BranchingEvaluator | None = None,
        on_redirect: Callable[[str], Any] | None = None,
        redirect_delay: float = REDIRECT_DELAY_SECONDS,
    ) -> None:
        self._survey = survey
        self._drafts = drafts
        self._backend = backend
        self._context = context or PlayerContext()
        self._evaluator = evaluator or BranchingEvaluator()
        self._on_redirect = on_redirect
        self._redirect_delay = redirect_delay

        self.state = PlayerState()
        self._default_language = survey.default_language
        self._language = self._context.language or self._default_language

        self._tasks: set[asyncio.Task] = set()
        self._display_task: asyncio.Task | None = None
        self._update_task: asyncio.Task | None = None
        self._redirect_handle: asyncio.TimerHandle | None = None

    @property
    def survey(self) -> Survey:
        return self._survey

    @property
    def language(self) -> str:
        return self._language

    @property
    def _remote(self) -> bool:
        """True if this session writes to the backend."""
        return self._backend is not None and not self._context.preview

    # ==================================================================
    # Startup (prefilling phase)
    # ==================================================================

    async def start(self) -> StepResult:
        """Initialise the session and return the first step to show.

        Raises:
            ValueError: if the player was already started.
        """
        if self.state.phase != PlayerPhase.PREFILLING or self.state.current_question_id is not None:
            raise ValueError("Player already started")

        survey = self._survey
        if not is_survey_available_in_language(survey, self._language):
            logger.info(
                "Survey %s is not translated to %r, falling back to %r",
                survey.id, self._language, self._default_language,
            )

        await self._resolve_person()
        await self._resume_or_begin()

        if self._remote:
            self._display_task = self._spawn(self._create_display())

        await self._apply_prefill()

        if not self.state.finished:
            self.state.phase = PlayerPhase.ACTIVE
        logger.info(
            "Survey %s started at question %s (preview=%s)",
            survey.id, self.state.current_question_id, self._context.preview,
        )
        return self.current_step()

    async def _resolve_person(self) -> None:
        if not self._remote or not self._survey.environment_id:
            return
        try:
            person = await self._backend.get_or_create_person(
                self._survey.environment_id, self._context.user_id, self._context.api_host,
            )
        except BackendError as exc:
            logger.warning("Survey %s: could not resolve respondent: %s", self._survey.id, exc)
            return
        self.state.person_id = person.id

    async def _resume_or_begin(self) -> None:
        """Position the player from the stored draft, or at question[0].

        The last answered question is the last one, in survey order, that
        has a key in the draft.  If it is not the final question the
        session resumes right after it.
        """
        survey = self._survey
        questions = survey.questions
        draft = await self._drafts.get_all(survey.id)

        last_idx = -1
        if draft:
            for i, q in enumerate(questions):
                if q.id in draft:
                    last_idx = i

        if 0 <= last_idx < len(questions) - 1:
            nxt = questions[last_idx + 1]
            self.state.answers = {q.id: draft[q.id] for q in questions if q.id in draft}
            self._move_to(nxt, draft.get(nxt.id))
            logger.info("Survey %s: resuming draft at question %s", survey.id, nxt.id)
            return

        self._move_to(questions[0], None)

    async def _apply_prefill(self) -> None:
        """Submit a URL-supplied answer for the first question, at most once."""
        first = self._survey.questions[0]
        if self.state.current_question_id != first.id:
            return
        if first.id not in self._context.prefill:
            return

        raw = self._context.prefill[first.id]
        if not validate_answer(
            first, raw, language=self._language, default_language=self._default_language
        ):
            logger.info("Survey %s: ignoring invalid prefill for %s: %r", self._survey.id, first.id, raw)
            return

        answer = normalize_answer(
            first, raw, language=self._language, default_language=self._default_language
        )
        logger.info("Survey %s: prefilled %s", self._survey.id, first.id)
        await self._commit(first, answer)

    # ==================================================================
    # Step API
    # ==================================================================

    def current_step(self) -> StepResult:
        """Return what the UI should show now.  Does not modify state."""
        state = self.state
        if state.finished:
            return FinishedStep(response_id=state.response_id, redirect_url=state.redirect_url)
        if state.current_question_id is None:
            raise ValueError("Player not started")

        question = self._question(state.current_question_id)
        idx = self._survey.index_of(question.id)
        return QuestionStep(
            question=self._to_payload(question),
            progress=state.progress,
            is_first=idx == 0,
            is_last=idx == len(self._survey.questions) - 1,
            draft_value=state.draft_value,
        )

    async def submit_answer(self, value: Any) -> StepResult:
        """Submit a typed answer for the current question and advance.

        An answer of the wrong shape leaves the state untouched and returns
        the same question with ``error`` set.

        Raises:
            ValueError: if the player is not active.
            QuestionNotFoundError: if a logic rule points at an unknown question.
        """
        question = self._require_active()
        if not check_answer(
            question, value, language=self._language, default_language=self._default_language
        ):
            logger.debug("Survey %s: rejected answer for %s: %r", self._survey.id, question.id, value)
            return self.current_step().model_copy(update={"error": INVALID_ANSWER})

        await self._commit(question, value)
        return self.current_step()

    async def submit_raw(self, raw: str) -> StepResult:
        """Submit a raw string answer; it is validated then normalized."""
        question = self._require_active()
        if not validate_answer(
            question, raw, language=self._language, default_language=self._default_language
        ):
            logger.debug("Survey %s: rejected raw answer for %s: %r", self._survey.id, question.id, raw)
            return self.current_step().model_copy(update={"error": INVALID_ANSWER})

        answer = normalize_answer(
            question, raw, language=self._language, default_language=self._default_language
        )
        await self._commit(question, answer)
        return self.current_step()

    async def go_back(self, answer: Any = None) -> StepResult:
        """Return to the previous question in document order.

        If *answer* is given and valid for the question being left, it is
        kept in the draft so it is restored when the respondent comes
        forward again.  An invalid answer is dropped.

        Raises:
            ValueError: if the player is not active or already at the first question.
        """
        question = self._require_active()
        idx = self._survey.index_of(question.id)
        if idx <= 0:
            raise ValueError("Cannot go back: already at the first question")

        if answer is not None and not self._context.preview:
            if check_answer(
                question, answer, language=self._language, default_language=self._default_language
            ):
                await self._drafts.store(self._survey.id, {question.id: answer})
            else:
                logger.debug(
                    "Survey %s: not keeping invalid answer for %s: %r", self._survey.id, question.id, answer,
                )

        previous = self._survey.questions[idx - 1]
        self._move_to(previous, await self._stored_value(previous.id))
        return self.current_step()

    def restart(self) -> StepResult:
        """Go back to question[0] with a clean in-memory state.

        The draft and the remote response are left as they are; later
        submits keep updating the same response record.
        """
        if self.state.current_question_id is None:
            raise ValueError("Player not started")

        self.cancel_redirect()
        state = self.state
        state.finished = False
        state.phase = PlayerPhase.ACTIVE
        state.redirect_url = None
        self._move_to(self._survey.questions[0], None)
        logger.info("Survey %s restarted", self._survey.id)
        return self.current_step()

    # ==================================================================
    # Redirect / teardown
    # ==================================================================

    def cancel_redirect(self) -> bool:
        """Cancel a scheduled redirect.  Returns True if one was pending."""
        if self._redirect_handle is None:
            return False
        self._redirect_handle.cancel()
        self._redirect_handle = None
        return True

    async def aclose(self) -> None:
        """Cancel the redirect and wait for background backend calls."""
        self.cancel_redirect()
        # Finishing tasks may spawn more (display -> responded)
        pending = [t for t in self._tasks if not t.done()]
        while pending:
            await asyncio.gather(*pending)
            pending = [t for t in self._tasks if not t.done()]

    def _schedule_redirect(self, url: str) -> None:
        if not url.startswith(("https://", "http://")):
            url = f"https://{url}"
        self.state.redirect_url = url
        loop = asyncio.get_running_loop()
        self._redirect_handle = loop.call_later(self._redirect_delay, self._fire_redirect, url)
        logger.info("Survey %s: redirecting to %s in %.1fs", self._survey.id, url, self._redirect_delay)

    def _fire_redirect(self, url: str) -> None:
        self._redirect_handle = None
        if self._on_redirect is not None:
            self._on_redirect(url)

    # ==================================================================
    # Internals
    # ==================================================================

    async def _commit(self, question: BaseQuestion, answer: Any) -> None:
        """Record a valid answer, sync it and move to the next question."""
        survey = self._survey
        next_id = self._evaluator.next_destination(question, answer)
        if next_id is None:
            idx = survey.index_of(question.id)
            is_last = idx == len(survey.questions) - 1
            next_id = END_QUESTION_ID if is_last else survey.questions[idx + 1].id

        # Resolve before touching any state: a broken destination is fatal
        next_question = None if next_id == END_QUESTION_ID else self._question(next_id)
        finished = next_question is None

        self.state.answers[question.id] = answer
        payload = ResponsePayload(
            survey_id=survey.id,
            person_id=self.state.person_id,
            finished=finished,
            data=dict(self.state.answers),
            meta=ResponseMeta(url=self._context.url),
        )
        await self._sync(payload)
        if not self._context.preview:
            await self._drafts.store(survey.id, {question.id: answer})

        if finished:
            await self._finish(answer)
            return

        self._move_to(next_question, await self._stored_value(next_question.id))

    async def _finish(self, last_answer: Any) -> None:
        state = self.state
        state.finished = True
        state.phase = PlayerPhase.FINISHED
        state.progress = 1.0
        state.current_question_id = END_QUESTION_ID
        state.draft_value = None
        await self._drafts.clear(self._survey.id)
        logger.info("Survey %s finished (response=%s)", self._survey.id, state.response_id)

        if self._survey.redirect_url and last_answer != DISMISSED:
            self._schedule_redirect(self._survey.redirect_url)

    async def _sync(self, payload: ResponsePayload) -> None:
        """Create or update the remote response.  Failures are logged only.

        Creating is awaited because later updates need the id.  Updates run
        in the background, each one after the previous, so the respondent
        never waits on the network once the response exists.
        """
        if not self._remote:
            return
        if self.state.response_id is not None:
            self._update_task = self._spawn(
                self._update_response(payload, self.state.response_id, self._update_task)
            )
            return
        try:
            record = await self._backend.create_response(payload, self._context.api_host)
        except BackendError as exc:
            logger.warning("Survey %s: could not sync response: %s", self._survey.id, exc)
            return
        self.state.response_id = record.id
        logger.info("Survey %s: created response %s", self._survey.id, record.id)
        await self._mark_display()

    async def _update_response(
        self, payload: ResponsePayload, response_id: str, previous: asyncio.Task | None
    ) -> None:
        # Keep updates in submit order; each payload carries all answers
        if previous is not None:
            await previous
        try:
            await self._backend.update_response(payload, response_id, self._context.api_host)
        except BackendError as exc:
            logger.warning("Survey %s: could not sync response: %s", self._survey.id, exc)

    async def _mark_display(self) -> None:
        # The display may still be in flight; its id is needed first
        if self._display_task is not None:
            await self._display_task
        if self.state.display_id is not None:
            self._spawn(self._mark_display_responded(self.state.display_id))

    async def _create_display(self) -> None:
        try:
            display = await self._backend.create_display(self._survey.id, self._context.api_host)
        except BackendError as exc:
            logger.warning("Survey %s: could not create display: %s", self._survey.id, exc)
            return
        self.state.display_id = display.id

    async def _mark_display_responded(self, display_id: str) -> None:
        try:
            await self._backend.mark_display_responded(display_id, self._context.api_host)
        except BackendError as exc:
            logger.warning("Survey %s: could not mark display %s responded: %s", self._survey.id, display_id, exc)

    async def _stored_value(self, question_id: str) -> Any:
        """Earlier answer for a question: the draft first, then this session."""
        stored = await self._drafts.get_one(self._survey.id, question_id)
        if stored is None:
            stored = self.state.answers.get(question_id)
        return stored

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _require_active(self) -> BaseQuestion:
        phase = self.state.phase
        if phase != PlayerPhase.ACTIVE:
            raise ValueError(f"Cannot answer: player is '{phase.value}', expected 'active'")
        return self._question(self.state.current_question_id)

    def _move_to(self, question: BaseQuestion, draft_value: Any) -> None:
        idx = self._survey.index_of(question.id)
        self.state.current_question_id = question.id
        self.state.progress = idx / len(self._survey.questions)
        self.state.draft_value = draft_value

    def _question(self, question_id: str) -> BaseQuestion:
        for q in self._survey.questions:
            if q.id == question_id:
                return q
        raise QuestionNotFoundError(self._survey.id, question_id)

    def _text(self, value: Any) -> str:
        return resolve(value, self._language, self._default_language)

    def _to_payload(self, q: BaseQuestion) -> QuestionPayload:
        """Flatten a question for the UI, with every text resolved."""
        options = None
        constraints = None

        if isinstance(q, ChoiceQuestion):
            options = [{"id": c.id, "label": self._text(c.label)} for c in q.choices]
            constraints = {
                "allow_multi": isinstance(q, MultipleChoiceMultiQuestion),
                "has_other": q.has_other,
            }
        elif isinstance(q, PictureSelectionQuestion):
            options = [{"id": c.id, "image_url": c.image_url} for c in q.choices]
            constraints = {"allow_multi": q.allow_multi}
        elif isinstance(q, NPSQuestion):
            constraints = {"min": NPS_MIN, "max": NPS_MAX}
        elif isinstance(q, RatingQuestion):
            constraints = {"min": 1, "max": q.range, "scale": q.scale}
        elif isinstance(q, CTAQuestion):
            constraints = {"button_url": q.button_url, "button_external": q.button_external}

        labels = {
            name: self._text(getattr(q, name))
            for name in q.localized_fields
            if name not in ("headline", "subheader") and getattr(q, name, None) is not None
        }

        return QuestionPayload(
            id=q.id,
            type=q.type,
            headline=self._text(q.headline),
            subheader=self._text(q.subheader) if q.subheader is not None else None,
            required=q.required,
            options=options,
            constraints=constraints,
            labels=labels or None,
        )
