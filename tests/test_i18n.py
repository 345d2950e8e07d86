"""Localized string resolver and translation helper tests."""

from survey_runtime.i18n import (
    contains_translations,
    create_localized,
    extract_language_ids,
    get_default_language,
    is_complete,
    is_survey_available_in_language,
    resolve,
    translate_question,
    translate_survey,
)
from survey_runtime.models import LocalizedMap, PlainText, Survey, SurveyLanguage


def _survey(headline):
    return Survey.model_validate({
        "id": "s1",
        "languages": [{"id": "default", "default": True}, {"id": "de"}],
        "questions": [
            {"id": "q1", "type": "multipleChoiceSingle", "headline": headline,
             "subheader": "Pick one",
             "choices": [{"id": "a", "label": "Apple"}, {"id": "b", "label": "Banana"}]},
        ],
        "thankYouCard": {"headline": "Thanks"},
    })


# =====================================================================
# resolve
# =====================================================================


class TestResolve:
    """Language selection with default-language fallback."""

    def test_plain_string_ignores_language(self):
        assert resolve("Hello", "de") == "Hello", "Plain strings are language-independent"
        assert resolve(PlainText(text="Hello"), "fr", "en") == "Hello"

    def test_selected_language(self):
        value = LocalizedMap(translations={"default": "Hello", "de": "Hallo"})
        assert resolve(value, "de") == "Hallo"

    def test_falls_back_to_default(self):
        value = {"default": "Hello", "de": ""}
        assert resolve(value, "de") == "Hello", "Empty translation should fall back"
        assert resolve(value, "fr") == "Hello", "Missing translation should fall back"

    def test_custom_default_language(self):
        value = {"en": "Hello", "de": "Hallo"}
        assert resolve(value, "fr", "en") == "Hello"

    def test_nothing_available_returns_empty(self):
        assert resolve({"de": "Hallo"}, "fr") == "", "No match and no default -> ''"
        assert resolve(None, "de") == ""

    def test_no_language_uses_default(self):
        assert resolve({"default": "Hello", "de": "Hallo"}, None) == "Hello"

    def test_unexpected_value_never_raises(self):
        assert resolve(12345, "de") == ""


# =====================================================================
# is_complete
# =====================================================================


class TestIsComplete:
    def test_all_languages_filled(self):
        assert is_complete({"default": "Hi", "de": "Hallo"}, ["default", "de"]) is True

    def test_blank_translation(self):
        assert is_complete({"default": "Hi", "de": "  "}, ["default", "de"]) is False, (
            "Whitespace-only translations are incomplete"
        )

    def test_missing_translation(self):
        assert is_complete({"default": "Hi"}, ["default", "de"]) is False

    def test_plain_string_covers_default_only(self):
        assert is_complete("Hi", ["default"]) is True
        assert is_complete("Hi", ["default", "de"]) is False

    def test_none(self):
        assert is_complete(None, ["default"]) is False


# =====================================================================
# Translation helpers
# =====================================================================


class TestCreateLocalized:
    def test_from_plain_string(self):
        value = create_localized("Hello", ["default", "de", "fr"])
        assert value.translations == {"default": "Hello", "de": "", "fr": ""}

    def test_existing_map_pruned_and_extended(self):
        value = create_localized({"default": "Hi", "es": "Hola"}, ["de"])
        assert value.translations == {"default": "Hi", "de": ""}, (
            "Languages not offered are dropped, new ones added empty, default kept"
        )


class TestLanguageHelpers:
    def test_contains_translations(self):
        assert contains_translations({"default": "a", "de": "b"}) is True
        assert contains_translations({"default": "a"}) is False
        assert contains_translations("a") is False

    def test_get_default_language(self):
        langs = [SurveyLanguage(id="en"), SurveyLanguage(id="de", default=True)]
        assert get_default_language(langs).id == "de"

    def test_get_default_language_fallback(self):
        fallback = get_default_language([SurveyLanguage(id="en")])
        assert fallback.id == "default"
        assert fallback.default is True

    def test_extract_language_ids(self):
        langs = [SurveyLanguage(id="en"), SurveyLanguage(id="de")]
        assert extract_language_ids(langs) == ["en", "de"]


class TestTranslate:
    """Legacy single-language documents converted to language maps."""

    def test_translate_question(self):
        survey = _survey("Favourite fruit?")
        question = survey.questions[0]
        translated = translate_question(question, ["default", "de"])

        assert translated.headline.translations == {"default": "Favourite fruit?", "de": ""}
        assert translated.subheader.translations == {"default": "Pick one", "de": ""}
        assert translated.choices[0].label.translations == {"default": "Apple", "de": ""}
        assert translated.button_label is None, "Unset optional fields stay unset"
        assert isinstance(question.headline, PlainText), "The original must not change"

    def test_translate_survey(self):
        survey = _survey("Favourite fruit?")
        translated = translate_survey(survey, survey.languages)
        assert translated.questions[0].headline.translations["de"] == ""
        assert translated.thank_you_card.headline.translations == {"default": "Thanks", "de": ""}
        assert isinstance(survey.thank_you_card.headline, PlainText)

    def test_is_survey_available_in_language(self):
        localized = _survey({"default": "Fruit?", "de": "Obst?"})
        assert is_survey_available_in_language(localized, "de") is True
        assert is_survey_available_in_language(localized, "fr") is False

        plain = _survey("Fruit?")
        assert is_survey_available_in_language(plain, "default") is True
        assert is_survey_available_in_language(plain, "de") is False
