"""Survey document loading from YAML / JSON files.

Usage::

    survey = load_survey("surveys/feedback.yaml")
    surveys = load_surveys("surveys/")       # {survey_id: Survey}

JSON is a subset of YAML, so both formats go through ``yaml.safe_load``.
Invalid documents raise ``pydantic.ValidationError`` (a ``ValueError``).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from survey_runtime.models.survey import Survey

logger = logging.getLogger(__name__)

SURVEY_SUFFIXES = (".yaml", ".yml", ".json")


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML (or JSON) file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing survey file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_survey(data: Any) -> Survey:
    """Validate a parsed document and warn about logic pointing nowhere."""
    survey = Survey.model_validate(data)
    for qid, destination in survey.dangling_destinations():
        logger.warning(
            "Survey %s: question %s has logic jumping to unknown question %s",
            survey.id, qid, destination,
        )
    return survey


def load_survey(path: Path | str) -> Survey:
    survey = parse_survey(load_yaml(path))
    logger.info("Loaded survey %s (%d questions) from %s", survey.id, len(survey.questions), path)
    return survey


def load_surveys(directory: Path | str) -> dict[str, Survey]:
    """Load every survey file in *directory*, keyed by survey id.

    Raises:
        ValueError: if two files declare the same survey id.
    """
    base = Path(directory)
    surveys: dict[str, Survey] = {}
    for path in sorted(base.iterdir()):
        if path.suffix.lower() not in SURVEY_SUFFIXES:
            continue
        survey = load_survey(path)
        if survey.id in surveys:
            raise ValueError(f"Duplicate survey id {survey.id!r} in {path}")
        surveys[survey.id] = survey
    return surveys
