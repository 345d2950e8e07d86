"""BranchingEvaluator unit tests — every logic condition and rule ordering.

Condition reference (from evaluator._compare / _check_literal):
    equals, notEquals                       — scalar comparison
    lessThan, lessEqual, greaterThan,
    greaterEqual                            — numeric comparison
    includesAll, includesOne                — list membership
    accepted, clicked                       — literal answers
    submitted, skipped                      — answered / not answered
"""

import pytest

from survey_runtime.evaluator import BranchingEvaluator
from survey_runtime.models.question import OpenTextQuestion


# --- Helpers to reduce boilerplate ---


def _question(*rules):
    """Shorthand to build a question carrying the given logic rules."""
    return OpenTextQuestion.model_validate(
        {"id": "q1", "type": "openText", "headline": "h", "logic": list(rules)}
    )


def _rule(condition, value=None, destination="target"):
    rule = {"condition": condition, "destination": destination}
    if value is not None:
        rule["value"] = value
    return rule


@pytest.fixture
def evaluator():
    """Fresh BranchingEvaluator for each test."""
    return BranchingEvaluator()


def _matches(evaluator, condition, answer, value=None):
    rule = _question(_rule(condition, value)).logic[0]
    return evaluator.matches(rule, answer)


# =====================================================================
# Rule ordering
# =====================================================================


class TestNextDestination:
    """Declaration order, first match wins, destination-less rules fall through."""

    def test_first_match_wins(self, evaluator):
        q = _question(
            _rule("equals", "5", destination="Q9"),
            _rule("submitted", destination="Q3"),
        )
        assert evaluator.next_destination(q, "5") == "Q9", "First matching rule should win"
        assert evaluator.next_destination(q, "4") == "Q3", "Second rule catches other answers"

    def test_no_match_returns_none(self, evaluator):
        q = _question(_rule("equals", "yes", destination="Q2"))
        assert evaluator.next_destination(q, "no") is None

    def test_no_logic(self, evaluator):
        assert evaluator.next_destination(_question(), "anything") is None

    def test_rule_without_destination_falls_through(self, evaluator):
        q = _question(
            {"condition": "submitted"},
            _rule("equals", "a", destination="Q5"),
        )
        assert evaluator.next_destination(q, "a") == "Q5", (
            "A matching rule without destination must not stop evaluation"
        )

    def test_end_destination(self, evaluator):
        q = _question(_rule("skipped", destination="end"))
        assert evaluator.next_destination(q, "") == "end"


# =====================================================================
# Condition semantics
# =====================================================================


class TestEquals:
    def test_string(self, evaluator):
        assert _matches(evaluator, "equals", "yes", "yes") is True
        assert _matches(evaluator, "equals", "no", "yes") is False

    def test_number_against_string_value(self, evaluator):
        assert _matches(evaluator, "equals", 5, "5") is True, "String forms are compared"
        assert _matches(evaluator, "equals", 5.0, "5") is True, "5.0 renders as '5'"
        assert _matches(evaluator, "equals", "5", 5) is True

    def test_single_element_list(self, evaluator):
        assert _matches(evaluator, "equals", ["a"], "a") is True
        assert _matches(evaluator, "equals", ["a", "b"], "a") is False

    def test_none_answer(self, evaluator):
        assert _matches(evaluator, "equals", None, "None") is False


class TestNotEquals:
    def test_strict_inequality(self, evaluator):
        assert _matches(evaluator, "notEquals", "a", "b") is True
        assert _matches(evaluator, "notEquals", "a", "a") is False
        assert _matches(evaluator, "notEquals", 5, "5") is True, "No type coercion"

    def test_numeric_answer_matches_equals_and_not_equals(self, evaluator):
        """A typed number equals the text value but is not identical to it."""
        assert _matches(evaluator, "equals", 5, 5) is True
        assert _matches(evaluator, "notEquals", 5, 5) is True, "Rule value is text"
        assert _matches(evaluator, "notEquals", "5", 5) is False


class TestNumeric:
    def test_less_than(self, evaluator):
        assert _matches(evaluator, "lessThan", 3, 5) is True
        assert _matches(evaluator, "lessThan", 5, 5) is False

    def test_less_equal(self, evaluator):
        assert _matches(evaluator, "lessEqual", 5, 5) is True
        assert _matches(evaluator, "lessEqual", 6, 5) is False

    def test_greater_than(self, evaluator):
        assert _matches(evaluator, "greaterThan", 9, 8) is True
        assert _matches(evaluator, "greaterThan", 8, 8) is False

    def test_greater_equal(self, evaluator):
        assert _matches(evaluator, "greaterEqual", 8, 8) is True
        assert _matches(evaluator, "greaterEqual", 7, 8) is False

    def test_numeric_string_coerced(self, evaluator):
        assert _matches(evaluator, "greaterThan", "9", 8) is True

    def test_missing_value_never_matches(self, evaluator):
        q = _question({"condition": "lessThan", "destination": "x"})
        assert evaluator.matches(q.logic[0], 1) is False, "Rule without value must not match"

    def test_non_numeric_answer(self, evaluator):
        assert _matches(evaluator, "lessThan", "dismissed", 5) is False
        assert _matches(evaluator, "lessThan", ["1"], 5) is False
        assert _matches(evaluator, "lessThan", None, 5) is False


class TestSets:
    def test_includes_all(self, evaluator):
        assert _matches(evaluator, "includesAll", ["a", "b", "c"], ["a", "c"]) is True
        assert _matches(evaluator, "includesAll", ["a"], ["a", "c"]) is False

    def test_includes_one(self, evaluator):
        assert _matches(evaluator, "includesOne", ["a", "b"], ["c", "b"]) is True
        assert _matches(evaluator, "includesOne", ["a"], ["c"]) is False

    def test_answer_must_be_list(self, evaluator):
        assert _matches(evaluator, "includesOne", "a", ["a"]) is False
        assert _matches(evaluator, "includesAll", "a", ["a"]) is False


class TestLiterals:
    def test_accepted_and_clicked(self, evaluator):
        assert _matches(evaluator, "accepted", "accepted") is True
        assert _matches(evaluator, "accepted", "dismissed") is False
        assert _matches(evaluator, "clicked", "clicked") is True
        assert _matches(evaluator, "clicked", "accepted") is False

    def test_submitted(self, evaluator):
        assert _matches(evaluator, "submitted", "text") is True
        assert _matches(evaluator, "submitted", "") is False
        assert _matches(evaluator, "submitted", "dismissed") is False
        assert _matches(evaluator, "submitted", ["a"]) is True
        assert _matches(evaluator, "submitted", []) is False
        assert _matches(evaluator, "submitted", 0) is True, "Any number counts as submitted"
        assert _matches(evaluator, "submitted", None) is False

    def test_skipped(self, evaluator):
        assert _matches(evaluator, "skipped", []) is True
        assert _matches(evaluator, "skipped", "") is True
        assert _matches(evaluator, "skipped", None) is True
        assert _matches(evaluator, "skipped", "dismissed") is True
        assert _matches(evaluator, "skipped", "text") is False
        assert _matches(evaluator, "skipped", 0) is False
