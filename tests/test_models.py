"""Survey document model tests — parsing, aliases and document checks.

Documents arrive with camelCase keys and a mix of plain and localized
strings; these tests pin down what the models accept and reject.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from survey_runtime.models import (
    LiteralRule,
    LocalizedMap,
    LocalizedText,
    NumericRule,
    PlainText,
    ResponseMeta,
    ResponsePayload,
    ScalarRule,
    SetRule,
    Survey,
    question_mapper,
)
from survey_runtime.models.question import MultipleChoiceSingleQuestion, RatingQuestion


def _survey(questions, **extra):
    return Survey.model_validate({"id": "s1", "questions": questions, **extra})


# =====================================================================
# Localized text
# =====================================================================


class TestLocalizedText:
    """Plain strings and language maps both coerce to the tagged union."""

    adapter = TypeAdapter(LocalizedText)

    def test_plain_string(self):
        """A bare string becomes PlainText."""
        value = self.adapter.validate_python("Hello")
        assert isinstance(value, PlainText), "Expected PlainText"
        assert value.text == "Hello"

    def test_language_map(self):
        """A dict becomes LocalizedMap keyed by language."""
        value = self.adapter.validate_python({"default": "Hello", "de": "Hallo"})
        assert isinstance(value, LocalizedMap), "Expected LocalizedMap"
        assert value.translations == {"default": "Hello", "de": "Hallo"}

    def test_sentinel_key_dropped(self):
        """The _i18n_ marker is not a language and is stripped."""
        value = self.adapter.validate_python({"_i18n_": True, "default": "Hi"})
        assert value.translations == {"default": "Hi"}, "Sentinel should be removed"

    def test_tagged_form_accepted(self):
        """Already-tagged dicts (model dumps) round back into the union."""
        value = self.adapter.validate_python({"kind": "plain", "text": "x"})
        assert isinstance(value, PlainText)

    def test_invalid_type_rejected(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python(42)


# =====================================================================
# Logic rules
# =====================================================================


class TestLogicRules:
    """The condition field picks the rule variant."""

    def _rules(self, logic):
        survey = _survey([{"id": "q1", "type": "openText", "headline": "h", "logic": logic}])
        return survey.questions[0].logic

    def test_variants_by_condition(self):
        rules = self._rules([
            {"condition": "equals", "value": "a", "destination": "q1"},
            {"condition": "lessThan", "value": 3},
            {"condition": "includesOne", "value": ["a", "b"]},
            {"condition": "skipped", "destination": "end"},
        ])
        assert isinstance(rules[0], ScalarRule), "equals -> ScalarRule"
        assert isinstance(rules[1], NumericRule), "lessThan -> NumericRule"
        assert isinstance(rules[2], SetRule), "includesOne -> SetRule"
        assert isinstance(rules[3], LiteralRule), "skipped -> LiteralRule"
        assert rules[1].destination is None, "Destination is optional"

    def test_scalar_value_kept_as_text(self):
        """Numbers written as equals/notEquals values are read as strings."""
        rules = self._rules([
            {"condition": "equals", "value": 5},
            {"condition": "equals", "value": 5.0},
            {"condition": "notEquals", "value": 2.5},
        ])
        assert [r.value for r in rules] == ["5", "5", "2.5"]

    def test_numeric_rule_without_value(self):
        """A numeric rule may omit its value (it then never matches)."""
        rules = self._rules([{"condition": "greaterThan", "destination": "q1"}])
        assert rules[0].value is None

    def test_set_rule_requires_list(self):
        with pytest.raises(ValidationError):
            self._rules([{"condition": "includesAll", "value": "a"}])

    def test_unknown_condition_rejected(self):
        with pytest.raises(ValidationError):
            self._rules([{"condition": "contains", "value": "a"}])


# =====================================================================
# Questions and surveys
# =====================================================================


class TestQuestions:
    """Question union dispatch and camelCase aliases."""

    def test_question_mapper_covers_all_types(self):
        assert set(question_mapper) == {
            "openText", "multipleChoiceSingle", "multipleChoiceMulti", "nps",
            "rating", "cta", "consent", "pictureSelection",
        }

    def test_camel_case_fields(self):
        survey = _survey([
            {"id": "q1", "type": "rating", "headline": "h", "range": 7,
             "lowerLabel": "bad", "upperLabel": "good", "buttonLabel": "Next"},
        ])
        q = survey.questions[0]
        assert isinstance(q, RatingQuestion)
        assert q.range == 7
        assert q.lower_label.text == "bad", "lowerLabel should map to lower_label"
        assert q.button_label.text == "Next"
        assert q.required is True, "required defaults to True"

    def test_rating_range_restricted(self):
        with pytest.raises(ValidationError):
            _survey([{"id": "q1", "type": "rating", "headline": "h", "range": 6}])

    def test_has_other_only_for_last_choice(self):
        survey = _survey([
            {"id": "q1", "type": "multipleChoiceSingle", "headline": "h",
             "choices": [{"id": "other", "label": "Other"}, {"id": "a", "label": "A"}]},
            {"id": "q2", "type": "multipleChoiceSingle", "headline": "h",
             "choices": [{"id": "a", "label": "A"}, {"id": "other", "label": "Other"}]},
        ])
        first, second = survey.questions
        assert isinstance(first, MultipleChoiceSingleQuestion)
        assert first.has_other is False, "'other' must be the last choice"
        assert second.has_other is True


class TestSurvey:
    """Document-level checks run at load time."""

    def test_empty_questions_rejected(self):
        with pytest.raises(ValidationError, match="at least one question"):
            _survey([])

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="duplicate question id"):
            _survey([
                {"id": "q1", "type": "openText", "headline": "a"},
                {"id": "q1", "type": "openText", "headline": "b"},
            ])

    def test_end_id_reserved(self):
        with pytest.raises(ValidationError, match="reserved"):
            _survey([{"id": "end", "type": "openText", "headline": "a"}])

    def test_default_language(self):
        survey = _survey(
            [{"id": "q1", "type": "openText", "headline": "a"}],
            languages=[{"id": "en"}, {"id": "fr", "default": True}],
        )
        assert survey.default_language == "fr"

    def test_default_language_fallback(self):
        survey = _survey([{"id": "q1", "type": "openText", "headline": "a"}])
        assert survey.default_language == "default"

    def test_dangling_destinations(self):
        survey = _survey([
            {"id": "q1", "type": "openText", "headline": "a",
             "logic": [{"condition": "submitted", "destination": "gone"},
                       {"condition": "skipped", "destination": "end"}]},
            {"id": "q2", "type": "openText", "headline": "b"},
        ])
        assert survey.dangling_destinations() == [("q1", "gone")]
        assert survey.index_of("q2") == 1
        assert survey.index_of("missing") == -1


class TestResponsePayload:
    def test_dumps_camel_case(self):
        payload = ResponsePayload(
            survey_id="s1", person_id=None, finished=True,
            data={"q1": "a"}, meta=ResponseMeta(url="https://x"),
        )
        dumped = payload.model_dump(by_alias=True)
        assert dumped == {
            "surveyId": "s1",
            "personId": None,
            "finished": True,
            "data": {"q1": "a"},
            "meta": {"url": "https://x"},
        }
