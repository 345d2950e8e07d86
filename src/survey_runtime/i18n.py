"""Localized string resolver and translation helpers.

Every user-visible string of a survey document is a :data:`LocalizedText`
(either a legacy plain string or a language map).  This module is the only
place that looks inside one:

  - :func:`resolve` picks the string for the active language with a
    default-language fallback
  - :func:`is_complete` reports whether every required language is filled in
  - :func:`translate_question` / :func:`translate_survey` convert a legacy
    single-language document into language maps

Nothing here raises on malformed text; a missing value resolves to ``""``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from survey_runtime.constants import DEFAULT_LANGUAGE
from survey_runtime.models.i18n import LocalizedMap, PlainText, coerce_localized
from survey_runtime.models.question import BaseQuestion, ChoiceQuestion
from survey_runtime.models.survey import Survey, SurveyLanguage

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> PlainText | LocalizedMap | None:
    """Coerce raw document values (str / dict) into the tagged union."""
    if value is None or isinstance(value, (PlainText, LocalizedMap)):
        return value
    raw = coerce_localized(value)
    if isinstance(raw, dict):
        if raw.get("kind") == "plain":
            return PlainText(text=str(raw.get("text", "")))
        if raw.get("kind") == "localized":
            return LocalizedMap(translations=raw.get("translations") or {})
    logger.debug("Unrecognised localized value of type %s", type(value).__name__)
    return None


def resolve(
    value: Any,
    language: str | None = None,
    default_language: str = DEFAULT_LANGUAGE,
) -> str:
    """Return the string for *language*, falling back to *default_language*.

    Plain strings are returned unchanged whatever the language.  For a
    language map the active language wins when present and non-empty,
    then the default language, then ``""``.
    """
    text = _as_text(value)
    if text is None:
        return ""
    if isinstance(text, PlainText):
        return text.text

    translations = text.translations
    if language and translations.get(language):
        return translations[language]
    return translations.get(default_language) or ""


def is_complete(
    value: Any,
    languages: Iterable[str],
    default_language: str = DEFAULT_LANGUAGE,
) -> bool:
    """True iff every language in *languages* maps to a non-blank string.

    A plain string only counts as a translation for the default language.
    """
    text = _as_text(value)
    if text is None:
        return False
    if isinstance(text, PlainText):
        filled = {default_language: text.text}
    else:
        filled = text.translations
    return all((filled.get(lang) or "").strip() != "" for lang in languages)


def create_localized(
    value: Any,
    languages: Iterable[str],
    default_language: str = DEFAULT_LANGUAGE,
) -> LocalizedMap:
    """Build a language map covering exactly *languages* plus the default.

    A plain string becomes the default-language entry; an existing map is
    copied, missing languages are added as ``""`` and languages no longer
    offered are dropped.
    """
    languages = list(languages)
    text = _as_text(value)

    if isinstance(text, LocalizedMap):
        translations = dict(text.translations)
        for lang in languages:
            translations.setdefault(lang, "")
        translations = {
            k: v for k, v in translations.items()
            if k == default_language or k in languages
        }
        return LocalizedMap(translations=translations)

    plain = text.text if isinstance(text, PlainText) else ""
    translations = {default_language: plain}
    for lang in languages:
        if lang != default_language:
            translations[lang] = ""
    return LocalizedMap(translations=translations)


def contains_translations(value: Any) -> bool:
    """True if *value* is a language map carrying more than one language."""
    text = _as_text(value)
    return isinstance(text, LocalizedMap) and len(text.translations) > 1


def get_default_language(languages: list[SurveyLanguage]) -> SurveyLanguage:
    """Return the language flagged as default, or a synthetic default entry."""
    for lang in languages:
        if lang.default:
            return lang
    return SurveyLanguage(id=DEFAULT_LANGUAGE, default=True)


def extract_language_ids(languages: list[SurveyLanguage]) -> list[str]:
    return [lang.id for lang in languages]


def translate_question(
    question: BaseQuestion,
    languages: Iterable[str],
    default_language: str = DEFAULT_LANGUAGE,
) -> BaseQuestion:
    """Return a copy of *question* whose localized fields are language maps.

    Unset optional fields stay unset; choice labels are translated too.
    The input question is not modified.
    """
    languages = list(languages)
    update: dict[str, Any] = {}
    for name in question.localized_fields:
        current = getattr(question, name, None)
        if current is None and name != "headline":
            continue
        update[name] = create_localized(current, languages, default_language)

    if isinstance(question, ChoiceQuestion):
        update["choices"] = [
            c.model_copy(update={"label": create_localized(c.label, languages, default_language)})
            for c in question.choices
        ]
    return question.model_copy(update=update)


def translate_survey(
    survey: Survey,
    languages: list[SurveyLanguage],
    default_language: str = DEFAULT_LANGUAGE,
) -> Survey:
    """Return a copy of *survey* with every question (and the thank-you
    card) translated to *languages*."""
    ids = extract_language_ids(languages)
    update: dict[str, Any] = {
        "questions": [translate_question(q, ids, default_language) for q in survey.questions],
    }
    card = survey.thank_you_card
    if card is not None:
        card_update: dict[str, Any] = {
            "headline": create_localized(card.headline, ids, default_language),
        }
        if card.subheader is not None:
            card_update["subheader"] = create_localized(card.subheader, ids, default_language)
        update["thank_you_card"] = card.model_copy(update=card_update)
    return survey.model_copy(update=update)


def is_survey_available_in_language(survey: Survey, language: str) -> bool:
    """True if the first question's headline is translated into *language*."""
    headline = _as_text(survey.questions[0].headline)
    if isinstance(headline, PlainText):
        return language == survey.default_language and headline.text != ""
    if isinstance(headline, LocalizedMap):
        return bool(headline.translations.get(language))
    return False
