"""Least-squares trend line for the weight chart.

The chart plots one point per day on a category axis, so the regression
runs over the point index 0..n-1 rather than over calendar days:

    slope     = (nΣxy − ΣxΣy) / (nΣx² − (Σx)²)
    intercept = (Σy − slope·Σx) / n

Irregular logging therefore stretches or compresses the trend along the
time axis. That matches what the chart shows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

import numpy as np

from weightcal.store.models import Record
from weightcal.tracking.parsing import parse_date, parse_number

CHART_DATE_FORMAT = "%m/%d/%Y"

Point = tuple[date, float]


def extract_points(records: Iterable[Record]) -> list[Point]:
    """Turn records into chart points.

    Records whose date or weight does not parse are skipped. Points are
    sorted by date and same-day duplicates collapse to the last entry
    (file order), so a later correction wins.

    Args:
        records: Records in file order

    Returns:
        List of (date, weight) tuples, strictly increasing by date
    """
    parsed = []
    for record in records:
        d = parse_date(record.date)
        weight = parse_number(record.weight)
        if d is None or weight is None:
            continue
        parsed.append((d, weight))

    # sorted() is stable, so equal dates keep file order and the dict keeps the last
    by_date: dict[date, float] = {}
    for d, weight in sorted(parsed, key=lambda p: p[0]):
        by_date[d] = weight
    return list(by_date.items())


def compute_trend(points: Sequence[Point]) -> list[float]:
    """Calculate the linear trend value at each point.

    Args:
        points: (date, weight) tuples in chart order, already de-duplicated

    Returns:
        One trend value per point, same order

    Example:
        >>> from datetime import date
        >>> compute_trend([(date(2025, 1, 1), 70.0), (date(2025, 1, 2), 72.0),
        ...                (date(2025, 1, 3), 74.0)])
        [70.0, 72.0, 74.0]
    """
    n = len(points)
    if n == 0:
        return []
    if n == 1:
        return [points[0][1]]  # flat line, avoids dividing by zero

    y = np.array([weight for _, weight in points], dtype=float)
    x = np.arange(n, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_x2 = (x * x).sum()

    denom = n * sum_x2 - sum_x * sum_x
    if denom == 0:
        return y.tolist()

    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n

    return (slope * x + intercept).tolist()


@dataclass
class ChartSeries:
    """Data for the weight chart: labels, weights and an optional trend."""

    labels: list[str] = field(default_factory=list)
    weights: list[float] = field(default_factory=list)
    trend: Optional[list[float]] = None

    def __len__(self) -> int:
        return len(self.weights)


def build_chart_series(records: Iterable[Record]) -> ChartSeries:
    """Assemble the chart series from raw records.

    The trend is attached only with at least two points and when every
    trend value is finite.
    """
    points = extract_points(records)
    series = ChartSeries(
        labels=[d.strftime(CHART_DATE_FORMAT) for d, _ in points],
        weights=[weight for _, weight in points],
    )

    if len(points) >= 2:
        trend = compute_trend(points)
        if len(trend) == len(points) and all(math.isfinite(v) for v in trend):
            series.trend = trend

    return series
