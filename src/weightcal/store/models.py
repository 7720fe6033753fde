"""Data model for weight/calorie records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Field delimiter of the on-disk line format. Values are never escaped.
DELIMITER = ","


@dataclass(frozen=True)
class Record:
    """A single day's weight and calorie entry.

    Fields are kept as the text the user entered; parsing into numbers
    happens where they are consumed (averages, trend).
    """

    date: str
    weight: str
    calorie: str

    def to_line(self) -> str:
        """Serialize as ``date,weight,calorie`` without a line terminator."""
        return DELIMITER.join((self.date, self.weight, self.calorie))

    @classmethod
    def from_line(cls, line: str) -> Optional["Record"]:
        """Parse one stored line.

        Returns:
            Record, or None when the line does not have exactly three fields
        """
        parts = line.rstrip("\r\n").split(DELIMITER)
        if len(parts) != 3:
            return None
        return cls(date=parts[0], weight=parts[1], calorie=parts[2])


def date_field(line: str) -> str:
    """Return the date field of a stored line."""
    return line.split(DELIMITER, 1)[0]
