"""Local flat-file record store."""

from __future__ import annotations

from weightcal.store.models import Record
from weightcal.store.record_store import RecordStore

__all__ = ["Record", "RecordStore"]
