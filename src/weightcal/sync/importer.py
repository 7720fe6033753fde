"""Import the newest complete snapshot over the local store.

Phases:
    LOCATE       pointer's snapshot if its ready marker exists, else the
                 greatest ready marker with a matching snapshot
    WAIT_STABLE  snapshot size must hold still between two samples
    BACKUP       copy the current store to Backup/LocalBackup_<stamp>.txt
    STAGE_TEMP   copy the snapshot to <store>.tmp
    SWAP_OLD     rename the current store to <store>.old
    RENAME_IN    rename <store>.tmp to the store path
    DONE

Every destructive step is preceded by a durable copy, and the store
only ever changes through a rename, so a crash leaves either the old
store or the new one in place. If RENAME_IN fails after SWAP_OLD the
previous store stays recoverable from the .old sidecar.
"""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from weightcal.sync.layout import READY_SUFFIX, SyncLayout, sidecar_path, staged_path
from weightcal.sync.results import ImportPhase, SyncError, SyncErrorKind, SyncResult
from weightcal.sync.stability import StabilityWaiter

logger = logging.getLogger(__name__)


class SnapshotImporter:
    """Runs one import per call to ``run``. Never raises."""

    def __init__(
        self,
        store_path: Path,
        layout: SyncLayout,
        waiter: Optional[StabilityWaiter] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store_path = store_path
        self.layout = layout
        self.waiter = waiter or StabilityWaiter()
        self.clock = clock

    def locate(self) -> Optional[Path]:
        """Find the snapshot to import.

        Returns:
            Path of a snapshot whose ready marker exists, or None
        """
        name = self.layout.read_pointer()
        if name:
            candidate = self.layout.export_dir / name
            if candidate.exists() and candidate.with_suffix(READY_SUFFIX).exists():
                return candidate
            logger.debug("Pointer names %s but it is not complete, scanning markers", name)

        for marker in self.layout.ready_markers():
            candidate = self.layout.snapshot_path(marker.stem)
            if candidate.exists():
                return candidate
        return None

    def run(self) -> SyncResult:
        """Import the newest complete snapshot.

        Returns:
            SyncResult; ok only when the store was replaced
        """
        staged = staged_path(self.store_path)
        source: Optional[Path] = None
        phase = ImportPhase.LOCATE
        try:
            source = self.locate()
            if source is None:
                logger.debug("No complete snapshot in %s", self.layout.export_dir)
                return SyncResult.failure(
                    phase,
                    SyncError(SyncErrorKind.NOTHING_TO_IMPORT, "no complete snapshot found"),
                )

            phase = ImportPhase.WAIT_STABLE
            if not self.waiter.wait(source):
                logger.debug("%s did not settle, giving up", source.name)
                return SyncResult.failure(
                    phase,
                    SyncError(
                        SyncErrorKind.STABILITY_TIMEOUT,
                        f"{source.name} still changing after {self.waiter.attempts} attempts",
                    ),
                    source,
                )

            steps = [
                (ImportPhase.BACKUP, self._backup),
                (ImportPhase.STAGE_TEMP, lambda: self._stage(source, staged)),
                (ImportPhase.SWAP_OLD, self._swap_old),
                (ImportPhase.RENAME_IN, lambda: os.replace(staged, self.store_path)),
            ]
            for phase, step in steps:
                step()
        except Exception as e:
            logger.debug("Import failed during %s", phase.value, exc_info=True)
            return SyncResult.failure(
                phase, SyncError(SyncErrorKind.IO_FAILURE, str(e)), source
            )
        finally:
            self._discard(staged)

        logger.info("Imported %s into %s", source.name, self.store_path)
        return SyncResult.success(ImportPhase.DONE, source)

    def _backup(self) -> None:
        if not self.store_path.exists():
            return
        self.layout.backup_dir.mkdir(parents=True, exist_ok=True)
        target = self.layout.fresh_backup_path(self.clock())
        shutil.copyfile(self.store_path, target)
        logger.debug("Backed up %s to %s", self.store_path.name, target)

    def _stage(self, source: Path, staged: Path) -> None:
        staged.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, staged)

    def _swap_old(self) -> None:
        if self.store_path.exists():
            os.replace(self.store_path, sidecar_path(self.store_path))

    def _discard(self, staged: Path) -> None:
        try:
            staged.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove %s", staged, exc_info=True)
