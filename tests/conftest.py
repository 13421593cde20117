"""Shared test fixtures."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


class FakePlayer:
    """Records seeks the way the embedded player would receive them."""

    def __init__(self, duration: float = 60):
        self.duration = duration
        self.seeks: list[float] = []

    def get_duration(self) -> float:
        return self.duration

    def seek_to(self, seconds: float, allow_seek_ahead: bool) -> None:
        self.seeks.append(seconds)


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()
