"""Answer validation — per question type, against the question's constraints.

Two entry points:

  - :func:`validate_answer` checks a *raw string* (URL prefill, terminal
    input) before it is normalized
  - :func:`check_answer` checks an already *typed* answer handed over by a
    UI (``int`` for NPS, ``list[str]`` for multi choice...)

Both are pure: they never raise and never touch player state.  Any
internal error is reported as ``False``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from survey_runtime.constants import (
    CONSENT_VALUES,
    CTA_VALUES,
    DEFAULT_LANGUAGE,
    DISMISSED,
    NPS_MAX,
    NPS_MIN,
)
from survey_runtime.i18n import resolve
from survey_runtime.models.question import (
    BaseQuestion,
    ChoiceQuestion,
    ConsentQuestion,
    CTAQuestion,
    MultipleChoiceMultiQuestion,
    MultipleChoiceSingleQuestion,
    NPSQuestion,
    OpenTextQuestion,
    PictureSelectionQuestion,
    RatingQuestion,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers shared with the normalizer
# ---------------------------------------------------------------------------

def choice_labels(
    question: ChoiceQuestion,
    language: str | None = None,
    default_language: str = DEFAULT_LANGUAGE,
) -> list[str]:
    """Choice labels of *question* resolved to the active language."""
    return [resolve(c.label, language, default_language) for c in question.choices]


def parse_number(raw: str) -> int | float:
    """Parse a numeric raw answer.

    Literal ``&`` characters are replaced by ``;`` before parsing (prefill
    values sometimes carry URL-decoding leftovers).  The text is read as a
    JSON value, so ``"7"`` and ``'"7"'`` both yield ``7``.

    Raises:
        ValueError: if the text is not a number.
    """
    text = raw.replace("&", ";")
    parsed = json.loads(text)
    if isinstance(parsed, bool):
        raise ValueError(f"not a number: {raw!r}")
    if isinstance(parsed, str):
        parsed = float(parsed.strip())
    if not isinstance(parsed, (int, float)):
        raise ValueError(f"not a number: {raw!r}")
    if isinstance(parsed, float) and parsed.is_integer():
        return int(parsed)
    return parsed


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _in_scale(question: BaseQuestion, value: Any) -> bool:
    """Range check shared by raw and typed NPS / Rating answers."""
    if not _is_integral(value):
        return False
    if isinstance(question, NPSQuestion):
        return NPS_MIN <= value <= NPS_MAX
    if isinstance(question, RatingQuestion):
        return 1 <= value <= question.range
    return False


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


# ---------------------------------------------------------------------------
# Raw string validation
# ---------------------------------------------------------------------------

def validate_answer(
    question: BaseQuestion,
    raw: str | None,
    *,
    language: str | None = None,
    default_language: str = DEFAULT_LANGUAGE,
) -> bool:
    """Return True if the raw string *raw* is an acceptable answer.

    Rules:
      - required question with an empty/absent answer -> invalid
      - openText: anything
      - multipleChoiceSingle: must equal a choice label, unless the last
        choice is "other"
      - multipleChoiceMulti: comma-separated; every token must equal a
        choice label, unless the last choice is "other"
      - nps: integer 0..10; rating: integer 1..range
      - cta: "clicked" | "dismissed"; consent: "accepted" | "dismissed";
        "dismissed" is rejected for required questions
      - pictureSelection and unknown types: invalid
    """
    if question.required and _is_empty(raw):
        return False
    if raw is None:
        raw = ""
    if not isinstance(raw, str):
        return False

    try:
        if isinstance(question, OpenTextQuestion):
            return True

        if isinstance(question, MultipleChoiceSingleQuestion):
            if question.has_other:
                return True
            return raw in choice_labels(question, language, default_language)

        if isinstance(question, MultipleChoiceMultiQuestion):
            if question.has_other:
                return True
            labels = choice_labels(question, language, default_language)
            return all(token in labels for token in raw.split(","))

        if isinstance(question, (NPSQuestion, RatingQuestion)):
            return _in_scale(question, parse_number(raw))

        if isinstance(question, CTAQuestion):
            if question.required and raw == DISMISSED:
                return False
            return raw in CTA_VALUES

        if isinstance(question, ConsentQuestion):
            if question.required and raw == DISMISSED:
                return False
            return raw in CONSENT_VALUES

        # pictureSelection answers are choice id lists and cannot be
        # expressed as a prefill string
        return False
    except (TypeError, ValueError) as exc:
        logger.debug("validate_answer(%s) rejected %r: %s", question.id, raw, exc)
        return False


# ---------------------------------------------------------------------------
# Typed answer validation
# ---------------------------------------------------------------------------

def check_answer(
    question: BaseQuestion,
    value: Any,
    *,
    language: str | None = None,
    default_language: str = DEFAULT_LANGUAGE,
) -> bool:
    """Return True if the typed *value* has the right shape for *question*.

    Empty answers (``None``, ``""``, ``[]``) are accepted only when the
    question is optional.
    """
    if _is_empty(value):
        return not question.required

    try:
        if isinstance(question, OpenTextQuestion):
            return isinstance(value, str)

        if isinstance(question, MultipleChoiceSingleQuestion):
            if not isinstance(value, str):
                return False
            return question.has_other or value in choice_labels(question, language, default_language)

        if isinstance(question, MultipleChoiceMultiQuestion):
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                return False
            if question.has_other:
                return True
            labels = choice_labels(question, language, default_language)
            return all(v in labels for v in value)

        if isinstance(question, (NPSQuestion, RatingQuestion)):
            return _in_scale(question, value)

        if isinstance(question, CTAQuestion):
            if question.required and value == DISMISSED:
                return False
            return value in CTA_VALUES

        if isinstance(question, ConsentQuestion):
            if question.required and value == DISMISSED:
                return False
            return value in CONSENT_VALUES

        if isinstance(question, PictureSelectionQuestion):
            if not isinstance(value, list):
                return False
            if not question.allow_multi and len(value) > 1:
                return False
            ids = {c.id for c in question.choices}
            return all(isinstance(v, str) and v in ids for v in value)

        logger.warning("check_answer() called with unknown question type: %s", type(question).__name__)
        return False
    except (TypeError, ValueError) as exc:
        logger.debug("check_answer(%s) rejected %r: %s", question.id, value, exc)
        return False
