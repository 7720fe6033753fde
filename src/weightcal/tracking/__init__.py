"""Weight trend and summary statistics.

Key components:
- Least-squares trend over the chart's index axis
- Average weight loss per interval and average calorie intake
- Lenient date/number parsing of stored text fields
"""

from __future__ import annotations

from weightcal.tracking.averages import Averages, compute_averages, series_from_records
from weightcal.tracking.trend import (
    ChartSeries,
    build_chart_series,
    compute_trend,
    extract_points,
)

__all__ = [
    "Averages",
    "ChartSeries",
    "build_chart_series",
    "compute_averages",
    "compute_trend",
    "extract_points",
    "series_from_records",
]
