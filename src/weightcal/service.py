"""Core functions called by the user interface.

Store mutations raise on I/O failure. Sync functions are best effort:
they log and report, and never raise.
"""

from __future__ import annotations

from typing import Optional, Sequence

from weightcal.store import Record, RecordStore
from weightcal.sync import SyncProtocol, SyncResult
from weightcal.tracking import Averages
from weightcal.tracking import compute_averages as _compute_averages
from weightcal.tracking import compute_trend as _compute_trend
from weightcal.tracking.trend import Point

# Global instances (lazy loaded)
_store: Optional[RecordStore] = None
_sync: Optional[SyncProtocol] = None


def get_store() -> RecordStore:
    """Get the global record store, built from settings on first use."""
    global _store
    if _store is None:
        from weightcal.config import get_settings

        _store = RecordStore(get_settings().store.path)
    return _store


def get_sync() -> SyncProtocol:
    """Get the global sync protocol, built from settings on first use."""
    global _sync
    if _sync is None:
        from weightcal.config import get_settings

        _sync = SyncProtocol.from_settings(get_settings())
    return _sync


def set_store(store: Optional[RecordStore]) -> None:
    """Set the global store instance. Useful for testing."""
    global _store
    _store = store


def set_sync(sync: Optional[SyncProtocol]) -> None:
    """Set the global sync protocol instance. Useful for testing."""
    global _sync
    _sync = sync


def reset() -> None:
    """Drop cached instances so the next call rebuilds them from settings."""
    set_store(None)
    set_sync(None)


def load_records() -> list[Record]:
    return get_store().load()


def append_record(record: Record) -> None:
    get_store().append(record)


def update_record(date: str, weight: str, calorie: str) -> bool:
    return get_store().update(date, weight, calorie)


def delete_record(date: str) -> int:
    return get_store().delete(date)


def export_snapshot() -> SyncResult:
    """Export the store to the sync folder. Call after every mutation."""
    return get_sync().export()


def import_latest_snapshot() -> bool:
    """Import the newest complete snapshot. Call once at startup.

    Returns:
        True if the local store was replaced
    """
    return get_sync().import_latest().ok


def compute_averages(weights: Sequence[float], calories: Sequence[float]) -> Averages:
    return _compute_averages(weights, calories)


def compute_trend(points: Sequence[Point]) -> list[float]:
    return _compute_trend(points)
