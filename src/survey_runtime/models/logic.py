"""Logic rule models for survey branching.

A question may carry an ordered list of rules.  After the respondent
answers, the first rule whose condition matches the answer sends the
player to its ``destination`` (a question id or ``"end"``).

The shape of ``value`` depends on the condition, so each family of
conditions is its own model:

  - ScalarRule: equals / notEquals — a string (numbers are read as text)
  - NumericRule: lessThan / lessEqual / greaterThan / greaterEqual — a number
  - SetRule: includesAll / includesOne — a list of strings
  - LiteralRule: accepted / clicked / submitted / skipped — no value

The discriminated ``LogicRule`` union uses ``condition`` as its
discriminator so Pydantic can deserialise documents directly.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, Field


class BaseRule(BaseModel):
    """Fields shared by all rules."""

    # None means the rule never causes a jump
    destination: Optional[str] = None


def _scalar_text(value):
    """Documents may write a scalar value as a number; it is kept as text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


class ScalarRule(BaseRule):
    """Compare the answer with a single value, always held as a string."""

    condition: Literal["equals", "notEquals"]
    value: Annotated[str, BeforeValidator(_scalar_text)]


class NumericRule(BaseRule):
    """Numeric comparison; a rule without a value never matches."""

    condition: Literal["lessThan", "lessEqual", "greaterThan", "greaterEqual"]
    value: Optional[float] = None


class SetRule(BaseRule):
    """Membership test of a list answer against a list of values."""

    condition: Literal["includesAll", "includesOne"]
    value: List[str]


class LiteralRule(BaseRule):
    """Conditions that inspect the answer alone."""

    condition: Literal["accepted", "clicked", "submitted", "skipped"]


LogicRule = Annotated[
    Union[ScalarRule, NumericRule, SetRule, LiteralRule],
    Field(discriminator="condition"),
]
