from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import Series, Suggestion


class Predictor(ABC):
    name: str

    @abstractmethod
    def suggest(self, series: Series, index: int) -> Suggestion:
        """Call the transition from ``series[index]`` to the next trading day."""
        raise NotImplementedError
