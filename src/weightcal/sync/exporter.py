"""Export the local store as a snapshot into the shared folder.

Phases:
    COPY_TO_TEMP        store -> Export/<stem>.tmp
    RENAME_TO_FINAL     <stem>.tmp -> <stem>.txt (single replacing rename)
    WRITE_READY_MARKER  <stem>.ready, content <stem>
    UPDATE_POINTER      LATEST, content <stem>.txt
    DONE

A reader that honours the ready marker never sees a half-written
snapshot: the .txt only appears through a rename, and the marker is
written after it.
"""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable

from weightcal.sync.layout import SyncLayout, write_text_atomic
from weightcal.sync.results import ExportPhase, SyncError, SyncErrorKind, SyncResult

logger = logging.getLogger(__name__)


class SnapshotExporter:
    """Runs one export per call to ``run``. Never raises."""

    def __init__(
        self,
        store_path: Path,
        layout: SyncLayout,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store_path = store_path
        self.layout = layout
        self.clock = clock

    def run(self) -> SyncResult:
        """Export the local store.

        Returns:
            SyncResult; skipped when there is no local store yet
        """
        if not self.store_path.exists():
            logger.debug("No local store at %s, nothing to export", self.store_path)
            return SyncResult.skip()

        stem = self.layout.snapshot_stem(self.clock())
        temp = self.layout.temp_path(stem)
        final = self.layout.snapshot_path(stem)

        # Same-second exports share a stem; the later one replaces the earlier.
        steps = [
            (ExportPhase.COPY_TO_TEMP, lambda: self._copy_to_temp(temp)),
            (ExportPhase.RENAME_TO_FINAL, lambda: self._rename_to_final(temp, final)),
            (ExportPhase.WRITE_READY_MARKER, lambda: self._write_ready_marker(stem)),
            (ExportPhase.UPDATE_POINTER, lambda: self._update_pointer(final)),
        ]

        phase = ExportPhase.COPY_TO_TEMP
        try:
            for phase, step in steps:
                step()
        except Exception as e:
            logger.debug("Export failed during %s", phase.value, exc_info=True)
            return SyncResult.failure(phase, SyncError(SyncErrorKind.IO_FAILURE, str(e)), final)
        finally:
            self._discard(temp)

        logger.info("Exported %s", final.name)
        return SyncResult.success(ExportPhase.DONE, final)

    def _copy_to_temp(self, temp: Path) -> None:
        self.layout.export_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(self.store_path, temp)

    def _rename_to_final(self, temp: Path, final: Path) -> None:
        os.replace(temp, final)

    def _write_ready_marker(self, stem: str) -> None:
        self.layout.ready_path(stem).write_text(stem, encoding="utf-8")

    def _update_pointer(self, final: Path) -> None:
        write_text_atomic(self.layout.pointer_path, final.name)

    def _discard(self, temp: Path) -> None:
        try:
            temp.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove %s", temp, exc_info=True)
