"""File naming and folder layout of the shared sync tree.

    <sync folder>/
        Export/
            DB_2025-01-31_071502.txt     snapshot
            DB_2025-01-31_071502.ready   ready marker (content: the stem)
            LATEST                       pointer (content: snapshot file name)
        Backup/
            LocalBackup_2025-01-31_071502.txt
            LocalBackup_2025-01-31_071502_1.txt   second backup in the same second

Next to the local store:
    WeightCalorie.txt.tmp    staged import
    WeightCalorie.txt.old    sidecar of the previous store
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

STAMP_FORMAT = "%Y-%m-%d_%H%M%S"
SNAPSHOT_PREFIX = "DB_"
BACKUP_PREFIX = "LocalBackup_"
SNAPSHOT_SUFFIX = ".txt"
READY_SUFFIX = ".ready"
TEMP_SUFFIX = ".tmp"
SIDECAR_SUFFIX = ".old"
POINTER_NAME = "LATEST"
EXPORT_DIRNAME = "Export"
BACKUP_DIRNAME = "Backup"


def format_stamp(moment: datetime) -> str:
    """Format a timestamp as ``yyyy-MM-dd_HHmmss``."""
    return moment.strftime(STAMP_FORMAT)


@dataclass(frozen=True)
class SyncLayout:
    """Resolves every path the sync protocol reads or writes."""

    export_dir: Path
    backup_dir: Path

    @classmethod
    def from_root(cls, root: Path) -> "SyncLayout":
        return cls(export_dir=root / EXPORT_DIRNAME, backup_dir=root / BACKUP_DIRNAME)

    @property
    def pointer_path(self) -> Path:
        return self.export_dir / POINTER_NAME

    def snapshot_stem(self, moment: datetime) -> str:
        return f"{SNAPSHOT_PREFIX}{format_stamp(moment)}"

    def temp_path(self, stem: str) -> Path:
        return self.export_dir / f"{stem}{TEMP_SUFFIX}"

    def snapshot_path(self, stem: str) -> Path:
        return self.export_dir / f"{stem}{SNAPSHOT_SUFFIX}"

    def ready_path(self, stem: str) -> Path:
        return self.export_dir / f"{stem}{READY_SUFFIX}"

    def backup_path(self, moment: datetime, sequence: int = 0) -> Path:
        stem = f"{BACKUP_PREFIX}{format_stamp(moment)}"
        if sequence:
            stem = f"{stem}_{sequence}"
        return self.backup_dir / f"{stem}{SNAPSHOT_SUFFIX}"

    def fresh_backup_path(self, moment: datetime) -> Path:
        """Return a backup path for ``moment`` that no existing file uses.

        Backups taken within the same second get a counter suffix,
        e.g. LocalBackup_2025-01-31_071502_1.txt.
        """
        sequence = 0
        while True:
            path = self.backup_path(moment, sequence)
            if not path.exists():
                return path
            sequence += 1

    def read_pointer(self) -> Optional[str]:
        """Return the snapshot file name held by LATEST, or None."""
        try:
            name = self.pointer_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return name or None

    def ready_markers(self) -> list[Path]:
        """Return ready markers, newest (greatest name) first."""
        if not self.export_dir.is_dir():
            return []
        return sorted(self.export_dir.glob(f"*{READY_SUFFIX}"), key=lambda p: p.name, reverse=True)


def staged_path(store_path: Path) -> Path:
    """Temp file adjacent to the live store that an import is staged into."""
    return store_path.with_name(store_path.name + TEMP_SUFFIX)


def sidecar_path(store_path: Path) -> Path:
    """Where the previous store is renamed aside during an import."""
    return store_path.with_name(store_path.name + SIDECAR_SUFFIX)


def write_text_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` via a sibling temp file and a replacing rename."""
    tmp = path.with_name(path.name + TEMP_SUFFIX)
    try:
        with tmp.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
