"""Pytest fixtures for weightcal tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from weightcal import service
from weightcal.config import Settings, set_settings
from weightcal.config.settings import StabilityConfig
from weightcal.store import Record, RecordStore
from weightcal.sync import StabilityWaiter, SyncLayout


class FakeClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = datetime(2025, 1, 31, 7, 15, 2)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class FakeSleep:
    """Records requested sleeps instead of sleeping."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "local" / "WeightCalorie.txt"


@pytest.fixture
def store(store_path: Path) -> RecordStore:
    return RecordStore(store_path)


@pytest.fixture
def sample_records() -> list[Record]:
    return [
        Record("2025-01-01", "180.0", "2100"),
        Record("2025-01-02", "179.4", "1950"),
        Record("2025-01-03", "178.8", "2000"),
    ]


@pytest.fixture
def populated_store(store: RecordStore, sample_records: list[Record]) -> RecordStore:
    for record in sample_records:
        store.append(record)
    return store


@pytest.fixture
def sync_root(tmp_path: Path) -> Path:
    return tmp_path / "OneDrive" / "WeightCalorie"


@pytest.fixture
def layout(sync_root: Path) -> SyncLayout:
    return SyncLayout.from_root(sync_root)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def waiter(fake_sleep: FakeSleep) -> StabilityWaiter:
    return StabilityWaiter(attempts=3, interval=2.0, sample_delay=0.5, sleep=fake_sleep)


@pytest.fixture
def settings(store_path: Path, sync_root: Path):
    """Install settings pointing at temporary paths, with no real sleeping."""
    s = Settings()
    s.store.path = store_path
    s.sync.folder = sync_root
    s.sync.stability = StabilityConfig(attempts=2, interval_seconds=0.0, sample_delay_seconds=0.0)
    set_settings(s)
    service.reset()

    yield s

    set_settings(None)
    service.reset()
