"""Wait for a file written by an external sync client to stop growing.

A cloud-drive client may still be downloading a snapshot when we look at
it. The only signal available is the file size: sample it twice with a
short delay, and call the file stable once both samples agree and are
non-zero. Repeat within a bounded budget.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from weightcal.config.settings import StabilityConfig

logger = logging.getLogger(__name__)


def file_size(path: Path) -> Optional[int]:
    """Return the size of ``path`` in bytes, or None if it does not exist."""
    try:
        return path.stat().st_size
    except FileNotFoundError:
        return None


@dataclass
class StabilityWaiter:
    """Bounded polling loop over a file's size.

    Attributes:
        attempts: Maximum number of sample pairs
        interval: Seconds to sleep between attempts
        sample_delay: Seconds between the two samples of one attempt
        sleep: Sleep function, injectable for tests
        size_of: Size probe, injectable for tests
    """

    attempts: int = 30
    interval: float = 2.0
    sample_delay: float = 0.5
    sleep: Callable[[float], None] = field(default=time.sleep)
    size_of: Callable[[Path], Optional[int]] = field(default=file_size)

    @classmethod
    def from_config(cls, config: StabilityConfig, **overrides) -> "StabilityWaiter":
        return cls(
            attempts=config.attempts,
            interval=config.interval_seconds,
            sample_delay=config.sample_delay_seconds,
            **overrides,
        )

    def wait(self, path: Path) -> bool:
        """Block until ``path`` is stable or the budget runs out.

        Returns:
            True once two consecutive non-zero samples are equal, False on timeout
        """
        for attempt in range(1, self.attempts + 1):
            first = self.size_of(path)
            self.sleep(self.sample_delay)
            second = self.size_of(path)

            if first and first == second:
                logger.debug("%s stable at %d bytes (attempt %d)", path.name, first, attempt)
                return True

            logger.debug(
                "%s not stable yet (attempt %d/%d: %s -> %s)",
                path.name, attempt, self.attempts, first, second,
            )
            if attempt < self.attempts:
                self.sleep(self.interval)

        return False
