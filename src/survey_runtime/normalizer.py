"""Answer normalizer — raw string input -> the typed value stored in a response.

Only called on input that :func:`~survey_runtime.validator.validate_answer`
accepted.  The stored shape per type:

  - openText, multipleChoiceSingle, consent, cta: the string as given
  - nps, rating: a number (``&`` replaced by ``;`` before parsing)
  - multipleChoiceMulti: list of labels; with an "other" choice, every
    token that is not a known label is collapsed into ONE trailing entry,
    re-joined with commas (``"a,x,y"`` -> ``["a", "x,y"]``)
  - anything else: ``"dismissed"``
"""

from __future__ import annotations

from typing import Any

from survey_runtime.constants import DEFAULT_LANGUAGE, DISMISSED
from survey_runtime.models.question import (
    BaseQuestion,
    ConsentQuestion,
    CTAQuestion,
    MultipleChoiceMultiQuestion,
    MultipleChoiceSingleQuestion,
    NPSQuestion,
    OpenTextQuestion,
    RatingQuestion,
)
from survey_runtime.validator import choice_labels, parse_number


def normalize_answer(
    question: BaseQuestion,
    raw: str | None,
    *,
    language: str | None = None,
    default_language: str = DEFAULT_LANGUAGE,
) -> Any:
    """Convert a validated raw string into the typed answer for *question*."""
    raw = raw or ""

    if isinstance(
        question,
        (OpenTextQuestion, MultipleChoiceSingleQuestion, ConsentQuestion, CTAQuestion),
    ):
        return raw

    if isinstance(question, (NPSQuestion, RatingQuestion)):
        return parse_number(raw)

    if isinstance(question, MultipleChoiceMultiQuestion):
        tokens = raw.split(",")
        if not question.has_other:
            return tokens

        labels = choice_labels(question, language, default_language)
        others = [t for t in tokens if t not in labels]
        if not others:
            return tokens
        # Free-text entries may themselves contain commas; they all end up
        # in the single "other" slot.
        return [t for t in tokens if t in labels] + [",".join(others)]

    return DISMISSED
