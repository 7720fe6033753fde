"""Flat-file record store.

One record per line, ``date,weight,calorie``, UTF-8, no header. Every
mutation reads the whole file, changes it in memory and writes it back;
record volume is a personal daily log, so this stays small.
"""

from __future__ import annotations

import logging
from pathlib import Path

from weightcal.store.models import Record, date_field

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class RecordStore:
    """Owns the local store file and every mutation to it.

    Mutations raise ``OSError`` on I/O failure so the caller knows the
    edit did not persist.
    """

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Path to the store file (need not exist yet)
        """
        self.path = path

    def _ensure_directory(self) -> None:
        """Create parent directories if they don't exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding=ENCODING, newline="") as f:
            return [line.rstrip("\r\n") for line in f]

    def _write_lines(self, lines: list[str]) -> None:
        self._ensure_directory()
        with self.path.open("w", encoding=ENCODING, newline="") as f:
            for line in lines:
                f.write(line + "\n")

    def load(self) -> list[Record]:
        """Load every well-formed record in file order.

        Lines without exactly three fields are dropped silently.

        Returns:
            List of records, empty if the file does not exist
        """
        records = []
        for line in self._read_lines():
            record = Record.from_line(line)
            if record is not None:
                records.append(record)
        return records

    def append(self, record: Record) -> None:
        """Append one record at the end of the file."""
        self._ensure_directory()
        with self.path.open("a", encoding=ENCODING, newline="") as f:
            f.write(record.to_line() + "\n")
        logger.debug("Appended record for %s", record.date)

    def update(self, date: str, weight: str, calorie: str) -> bool:
        """Rewrite the first line whose date field equals ``date``.

        The file is not touched when nothing matches.

        Returns:
            True if a line was rewritten
        """
        lines = self._read_lines()
        for i, line in enumerate(lines):
            if date_field(line) == date:
                lines[i] = Record(date, weight, calorie).to_line()
                self._write_lines(lines)
                logger.debug("Updated record for %s", date)
                return True
        return False

    def delete(self, date: str) -> int:
        """Remove every line whose date field equals ``date``.

        Returns:
            Number of lines removed
        """
        lines = self._read_lines()
        kept = [line for line in lines if date_field(line) != date]
        removed = len(lines) - len(kept)
        if removed:
            self._write_lines(kept)
            logger.debug("Deleted %d record(s) for %s", removed, date)
        return removed
