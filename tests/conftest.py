from __future__ import annotations

from pathlib import Path

import pytest
from support import RecordingSleep

from verdict.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        api_key="test-key",
        api_base="https://generation.test/v1beta",
        model="test-model",
        home=tmp_path / "home",
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
