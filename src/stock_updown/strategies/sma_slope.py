from __future__ import annotations

from statistics import fmean

from ..models import Series, Suggestion
from .base import Predictor


class SmaSlopePredictor(Predictor):
    name = "sma_slope"

    def __init__(self, period: int = 5) -> None:
        if period < 1:
            raise ValueError("period must be > 0")
        self.period = period

    def sma(self, series: Series, index: int) -> float | None:
        if index < self.period - 1 or index >= len(series):
            return None
        window = series[index - self.period + 1 : index + 1]
        return fmean(point.close for point in window)

    def suggest(self, series: Series, index: int) -> Suggestion:
        if index <= 0:
            return "unavailable"
        current = self.sma(series, index)
        previous = self.sma(series, index - 1)
        if current is None or previous is None:
            return "unavailable"
        # A flat average counts as down.
        return "up" if current > previous else "down"
