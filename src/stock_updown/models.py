from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

Direction = Literal["up", "down"]
Suggestion = Literal["up", "down", "unavailable"]


@dataclass(frozen=True)
class PricePoint:
    date: str
    close: float


Series = tuple[PricePoint, ...]


class RoundPhase(str, Enum):
    NOT_STARTED = "not_started"
    IN_ROUND = "in_round"
    ENDED = "ended"


@dataclass(frozen=True)
class RoundState:
    ticker: str | None = None
    series: Series = ()
    start_index: int | None = None
    current_index: int | None = None
    score: int = 0
    model_suggestion: Suggestion | None = None
    model_score: int = 0
    in_round: bool = False
    ended: bool = False

    @property
    def phase(self) -> RoundPhase:
        if self.ended:
            return RoundPhase.ENDED
        if self.in_round:
            return RoundPhase.IN_ROUND
        return RoundPhase.NOT_STARTED

    @property
    def current_point(self) -> PricePoint | None:
        if self.current_index is None:
            return None
        return self.series[self.current_index]


@dataclass(frozen=True)
class GuessResult:
    date: str
    close: float
    correct: bool
    moved_up: bool
    moved_down: bool
    percent_change: float
    model_suggestion: Suggestion | None = None
    model_correct: bool | None = None


@dataclass(frozen=True)
class ChartWindow:
    labels: tuple[str, ...]
    values: tuple[float, ...]
