from __future__ import annotations

from collections.abc import Sequence


class ChartSeries:
    """Label/value series backing the price chart shown to the player."""

    def __init__(self) -> None:
        self._labels: list[str] = []
        self._values: list[float] = []

    def init_chart(self, labels: Sequence[str], values: Sequence[float]) -> None:
        if len(labels) != len(values):
            raise ValueError("labels and values must have the same length")
        self._labels = list(labels)
        self._values = list(values)

    def append_point(self, date: str, value: float) -> None:
        self._labels.append(date)
        self._values.append(value)

    def clear(self) -> None:
        self._labels = []
        self._values = []

    def snapshot(self) -> dict:
        return {"labels": list(self._labels), "values": list(self._values)}
