from pathlib import Path

import pytest

from survey_runtime.loader import load_survey, load_yaml

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def yml():
    return load_yaml


@pytest.fixture(scope="session")
def feedback_survey():
    """The multi-language feedback survey from tests/data."""
    return load_survey(DATA_DIR / "feedback.yaml")
