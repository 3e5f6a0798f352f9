from __future__ import annotations

import random
from datetime import date, timedelta

from .errors import InsufficientData
from .models import Series

CONTEXT_DAYS = 6


def start_window_bounds(
    today: date,
    *,
    lookback_days: int = 100,
    min_age_days: int = 7,
) -> tuple[str, str]:
    lower = today - timedelta(days=lookback_days)
    upper = today - timedelta(days=min_age_days)
    return lower.isoformat(), upper.isoformat()


def candidate_start_indices(
    series: Series,
    *,
    today: date,
    lookback_days: int = 100,
    min_age_days: int = 7,
    context_days: int = CONTEXT_DAYS,
) -> list[int]:
    lower, upper = start_window_bounds(
        today,
        lookback_days=lookback_days,
        min_age_days=min_age_days,
    )
    # ISO dates order lexicographically.
    return [
        idx
        for idx, point in enumerate(series)
        if lower <= point.date <= upper and idx >= context_days and idx + 1 < len(series)
    ]


def pick_start_index(
    series: Series,
    *,
    today: date,
    rng: random.Random | None = None,
    lookback_days: int = 100,
    min_age_days: int = 7,
    context_days: int = CONTEXT_DAYS,
) -> int:
    candidates = candidate_start_indices(
        series,
        today=today,
        lookback_days=lookback_days,
        min_age_days=min_age_days,
        context_days=context_days,
    )
    if not candidates:
        raise InsufficientData(
            f"Not enough data in the last {lookback_days} days for this ticker."
        )
    return (rng or random).choice(candidates)
