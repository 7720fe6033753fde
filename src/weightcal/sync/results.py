"""Result and error types for best-effort sync operations.

Store mutations raise. Sync operations never do: they hand back a
SyncResult that the caller may log and otherwise ignore.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ExportPhase(str, Enum):
    """Phases of an export, in order."""

    COPY_TO_TEMP = "copy_to_temp"
    RENAME_TO_FINAL = "rename_to_final"
    WRITE_READY_MARKER = "write_ready_marker"
    UPDATE_POINTER = "update_pointer"
    DONE = "done"


class ImportPhase(str, Enum):
    """Phases of an import, in order."""

    LOCATE = "locate"
    WAIT_STABLE = "wait_stable"
    BACKUP = "backup"
    STAGE_TEMP = "stage_temp"
    SWAP_OLD = "swap_old"
    RENAME_IN = "rename_in"
    DONE = "done"


class SyncErrorKind(str, Enum):
    """Why a sync operation did nothing."""

    DISABLED = "disabled"
    NOTHING_TO_IMPORT = "nothing_to_import"
    IO_FAILURE = "io_failure"
    STABILITY_TIMEOUT = "stability_timeout"


@dataclass(frozen=True)
class SyncError:
    """What went wrong in a failed or skipped sync operation."""

    kind: SyncErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass
class SyncResult:
    """Outcome of one export or import call.

    Attributes:
        ok: True only when the operation reached DONE
        phase: Last phase entered (the failing one when ok is False)
        error: What went wrong, None on success or skip
        path: Snapshot written or imported, when known
        skipped: True when there was nothing to do (e.g. no local store to export)
    """

    ok: bool
    phase: Optional[Enum] = None
    error: Optional[SyncError] = None
    path: Optional[Path] = None
    skipped: bool = False

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, phase: Enum, path: Optional[Path] = None) -> "SyncResult":
        return cls(ok=True, phase=phase, path=path)

    @classmethod
    def skip(cls, phase: Optional[Enum] = None) -> "SyncResult":
        return cls(ok=False, phase=phase, skipped=True)

    @classmethod
    def failure(
        cls, phase: Optional[Enum], error: SyncError, path: Optional[Path] = None
    ) -> "SyncResult":
        return cls(ok=False, phase=phase, error=error, path=path)

    def to_dict(self) -> dict:
        """Return a JSON-serializable view."""
        return {
            "ok": self.ok,
            "phase": self.phase.value if self.phase is not None else None,
            "skipped": self.skipped,
            "error": (
                {"kind": self.error.kind.value, "message": self.error.message}
                if self.error
                else None
            ),
            "path": str(self.path) if self.path else None,
        }
