"""Summary statistics over the record list."""

from __future__ import annotations

from typing import Iterable, NamedTuple, Optional, Sequence

from weightcal.store.models import Record
from weightcal.tracking.parsing import parse_number

NOT_AVAILABLE = "N/A"


class Averages(NamedTuple):
    """Average weight loss per entry interval and average calorie intake."""

    weight_loss: Optional[float]
    calories: Optional[float]


def average_weight_loss(weights: Sequence[float]) -> Optional[float]:
    """Mean of consecutive differences ``w[i-1] - w[i]``.

    Positive means losing. The sum telescopes, so this equals
    ``(w[0] - w[-1]) / (n - 1)``.

    Returns:
        The average, or None with fewer than two weights
    """
    if len(weights) < 2:
        return None
    total = 0.0
    for i in range(1, len(weights)):
        total += weights[i - 1] - weights[i]
    return total / (len(weights) - 1)


def average_calories(calories: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if not calories:
        return None
    return sum(calories) / len(calories)


def compute_averages(weights: Sequence[float], calories: Sequence[float]) -> Averages:
    """Compute both averages.

    Example:
        >>> compute_averages([80, 78, 76], [])
        Averages(weight_loss=2.0, calories=None)
    """
    return Averages(average_weight_loss(weights), average_calories(calories))


def series_from_records(records: Iterable[Record]) -> tuple[list[float], list[float]]:
    """Extract weight and calorie series in file order, skipping unparseable values."""
    weights: list[float] = []
    calories: list[float] = []
    for record in records:
        weight = parse_number(record.weight)
        if weight is not None:
            weights.append(weight)
        calorie = parse_number(record.calorie)
        if calorie is not None:
            calories.append(calorie)
    return weights, calories


def format_weight_loss(value: Optional[float], unit: str = "lbs") -> str:
    return NOT_AVAILABLE if value is None else f"{value:.2f} {unit}"


def format_calories(value: Optional[float]) -> str:
    return NOT_AVAILABLE if value is None else f"{value:.2f} cal"
