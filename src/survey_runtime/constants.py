"""Runtime constants shared across the survey player.

These values mirror conventions of the survey platform's documents and
client API (the ``"end"`` destination, the ``"other"`` choice id, the
``"dismissed"`` answer literal, the draft storage key format).

A few constants can be overridden via environment variables so that
deployments can tune behaviour without code changes.
"""

import os

# Pseudo question id marking the end of the survey.  Logic rules may use it
# as a destination; the player also reaches it after the last question.
END_QUESTION_ID = "end"

# Answer literal recorded when a respondent dismisses a CTA/consent card.
DISMISSED = "dismissed"

# A choice question whose *last* choice carries this id accepts free text.
OTHER_CHOICE_ID = "other"

# Language key used by single-language surveys and as the fallback when a
# survey does not flag a default language.
# Overridable via SURVEY_DEFAULT_LANGUAGE env var.
DEFAULT_LANGUAGE = os.getenv("SURVEY_DEFAULT_LANGUAGE", "default")

# Delay before navigating to the survey's redirect URL, long enough for the
# completion message to render.
# Overridable via SURVEY_REDIRECT_DELAY_SECONDS env var.
REDIRECT_DELAY_SECONDS = float(os.getenv("SURVEY_REDIRECT_DELAY_SECONDS", "3"))

# Draft storage key; the format is shared with the browser widget.
DRAFT_KEY_TEMPLATE = "formbricks-{survey_id}-responses"

# NPS questions always use a fixed 0-10 scale.
NPS_MIN = 0
NPS_MAX = 10

# Allowed literal answers for call-to-action and consent questions.
CTA_VALUES: frozenset[str] = frozenset({"clicked", DISMISSED})
CONSENT_VALUES: frozenset[str] = frozenset({"accepted", DISMISSED})

# Query parameters with a fixed meaning; every other parameter is a
# candidate prefill keyed by question id.
RESERVED_QUERY_PARAMS: frozenset[str] = frozenset({"preview", "userId", "lang"})
