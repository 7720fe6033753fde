"""Cloud-folder synchronization of the local record store."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from weightcal.config.settings import Settings
from weightcal.sync.exporter import SnapshotExporter
from weightcal.sync.importer import SnapshotImporter
from weightcal.sync.layout import SyncLayout
from weightcal.sync.results import SyncError, SyncErrorKind, SyncResult
from weightcal.sync.stability import StabilityWaiter

logger = logging.getLogger(__name__)


class SyncProtocol:
    """Pairs an exporter and an importer over the same store and folder.

    With no layout (sync folder not configured) both operations report
    DISABLED without touching the filesystem.
    """

    def __init__(
        self,
        store_path: Path,
        layout: Optional[SyncLayout],
        waiter: Optional[StabilityWaiter] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store_path = store_path
        self.layout = layout
        self.waiter = waiter or StabilityWaiter()
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "SyncProtocol":
        """Build a protocol from application settings.

        Keyword overrides (``waiter``, ``clock``) are passed through, mostly for tests.
        """
        layout = SyncLayout.from_root(settings.sync.folder) if settings.sync.enabled else None
        if "waiter" not in overrides:
            overrides["waiter"] = StabilityWaiter.from_config(settings.sync.stability)
        return cls(settings.store.path, layout, **overrides)

    @property
    def enabled(self) -> bool:
        return self.layout is not None

    def _disabled(self) -> SyncResult:
        logger.debug("Sync folder not configured, skipping")
        return SyncResult(
            ok=False,
            skipped=True,
            error=SyncError(SyncErrorKind.DISABLED, "sync folder not configured"),
        )

    def export(self) -> SyncResult:
        """Publish the local store as a new snapshot (best effort)."""
        if self.layout is None:
            return self._disabled()
        return SnapshotExporter(self.store_path, self.layout, clock=self.clock).run()

    def import_latest(self) -> SyncResult:
        """Replace the local store with the newest complete snapshot (best effort)."""
        if self.layout is None:
            return self._disabled()
        return SnapshotImporter(
            self.store_path, self.layout, waiter=self.waiter, clock=self.clock
        ).run()
