"""BranchingEvaluator — resolves a question's logic rules against an answer.

After a question is answered the player asks :meth:`next_destination`
where to go.  Rules are evaluated in declaration order and the first rule
that both matches AND carries a destination wins.  A matching rule without
a destination does not stop evaluation; the next rule is tried.

Returns the destination question id (or ``"end"``), or ``None`` to fall
through to the next question in document order.
"""

from __future__ import annotations

import logging
from typing import Any

from survey_runtime.constants import DISMISSED
from survey_runtime.models.logic import LiteralRule, NumericRule, ScalarRule, SetRule
from survey_runtime.models.question import BaseQuestion

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """String form of an answer, as the survey platform renders it.

    Integral floats lose their ``.0`` and lists are comma-joined, so that
    ``5.0`` equals ``"5"`` and ``["a"]`` equals ``"a"``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(_text(v) for v in value)
    return str(value)


class BranchingEvaluator:
    """Evaluates conditional-logic rules attached to survey questions."""

    def next_destination(self, question: BaseQuestion, answer: Any) -> str | None:
        """Return the destination of the first matching rule, or None.

        Args:
            question: the question that was just answered
            answer: the typed answer (str, number or list[str])
        """
        for rule in question.logic:
            if not rule.destination:
                continue
            if self.matches(rule, answer):
                logger.debug(
                    "Question %s: rule %s matched, jumping to %s",
                    question.id, rule.condition, rule.destination,
                )
                return rule.destination
        return None

    def matches(self, rule, answer: Any) -> bool:
        """Return True if *answer* satisfies the condition of *rule*."""
        if isinstance(rule, ScalarRule):
            return self._compare(rule.condition, answer, rule.value)
        if isinstance(rule, NumericRule):
            if rule.value is None:
                return False
            return self._compare(rule.condition, answer, rule.value)
        if isinstance(rule, SetRule):
            return self._compare(rule.condition, answer, rule.value)
        if isinstance(rule, LiteralRule):
            return self._check_literal(rule.condition, answer)

        logger.warning("Unknown logic rule type: %s", type(rule).__name__)
        return False

    # ------------------------------------------------------------------
    # Condition evaluation
    # ------------------------------------------------------------------

    @staticmethod
    def _compare(op: str, answer: Any, value: Any) -> bool:
        """Apply a comparison condition to an answer and the rule's value.

        ``equals`` compares the answer's string form with the value, so the
        NPS answer ``5`` equals ``"5"``.  ``notEquals`` compares the answer
        itself, without conversion: ``5`` is also not equal to ``"5"``.  A
        typed numeric answer can therefore match both conditions.
        """
        if op == "equals":
            if answer is None:
                return False
            if isinstance(answer, list) and len(answer) == 1 and _text(answer[0]) == _text(value):
                return True
            return _text(answer) == _text(value)

        if op == "notEquals":
            return answer != value

        # --- Numeric comparisons ---
        if op in ("lessThan", "lessEqual", "greaterThan", "greaterEqual"):
            if isinstance(answer, (bool, list)):
                return False
            try:
                ans_num = float(answer)
            except (TypeError, ValueError):
                return False

            if op == "lessThan":
                return ans_num < value
            if op == "lessEqual":
                return ans_num <= value
            if op == "greaterThan":
                return ans_num > value
            return ans_num >= value

        # --- Set membership ---
        if op == "includesAll":
            return isinstance(answer, list) and all(v in answer for v in value)

        if op == "includesOne":
            return isinstance(answer, list) and any(v in answer for v in value)

        logger.warning("Unknown logic condition: %s", op)
        return False

    @staticmethod
    def _check_literal(op: str, answer: Any) -> bool:
        """Conditions that only inspect the answer itself."""
        if op in ("accepted", "clicked"):
            return answer == op

        if op == "submitted":
            if isinstance(answer, str):
                return answer != "" and answer != DISMISSED
            if isinstance(answer, list):
                return len(answer) > 0
            if isinstance(answer, (int, float)) and not isinstance(answer, bool):
                return True
            return False

        if op == "skipped":
            return answer is None or answer == "" or answer == [] or answer == DISMISSED

        logger.warning("Unknown logic condition: %s", op)
        return False
