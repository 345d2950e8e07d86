"""Player configuration — reads settings from environment variables.

All settings have sensible defaults for local use.  Command-line flags
override them.
"""

import os
from dataclasses import dataclass

from survey_runtime.client import DEFAULT_TIMEOUT
from survey_runtime.constants import REDIRECT_DELAY_SECONDS


@dataclass(frozen=True)
class PlayerSettings:
    """Immutable CLI configuration read from environment at startup."""

    # Base URL of the survey platform's client API
    api_host: str = "http://localhost:3000"

    # Per-request timeout for backend calls (seconds)
    http_timeout: float = DEFAULT_TIMEOUT

    # Delay before the completion redirect fires (seconds)
    redirect_delay: float = REDIRECT_DELAY_SECONDS

    # Logging
    log_level: str = "WARNING"


def load_settings() -> PlayerSettings:
    """Build settings from ``SURVEY_*`` environment variables."""
    return PlayerSettings(
        api_host=os.getenv("SURVEY_API_HOST", "http://localhost:3000").rstrip("/"),
        http_timeout=float(os.getenv("SURVEY_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT))),
        redirect_delay=float(os.getenv("SURVEY_REDIRECT_DELAY_SECONDS", str(REDIRECT_DELAY_SECONDS))),
        log_level=os.getenv("SURVEY_LOG_LEVEL", "WARNING").upper(),
    )
