"""Synchronization of the record store through a shared cloud-drive folder.

Export publishes a snapshot with a tmp -> final -> ready -> pointer
sequence; import picks the newest complete snapshot, waits for the
external sync client to finish writing it, backs up the local store and
swaps the files in by rename. Both are best-effort and never raise.
"""

from __future__ import annotations

from weightcal.sync.exporter import SnapshotExporter
from weightcal.sync.importer import SnapshotImporter
from weightcal.sync.layout import SyncLayout
from weightcal.sync.protocol import SyncProtocol
from weightcal.sync.results import (
    ExportPhase,
    ImportPhase,
    SyncError,
    SyncErrorKind,
    SyncResult,
)
from weightcal.sync.stability import StabilityWaiter

__all__ = [
    "ExportPhase",
    "ImportPhase",
    "SnapshotExporter",
    "SnapshotImporter",
    "StabilityWaiter",
    "SyncError",
    "SyncErrorKind",
    "SyncLayout",
    "SyncProtocol",
    "SyncResult",
]
