"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from lab_validator.config import ValidationSettings  # noqa: E402


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> ValidationSettings:
    """Default thresholds, unaffected by LAB_VALIDATOR_* in the shell or a local .env."""
    for name in list(ValidationSettings.model_fields):
        monkeypatch.delenv(f"LAB_VALIDATOR_{name}", raising=False)
    return ValidationSettings(_env_file=None)
