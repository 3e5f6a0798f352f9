from __future__ import annotations

import logging
import random
import threading
import time
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Deque

from . import engine
from .chart import ChartSeries
from .errors import DataExhausted, GameError
from .models import Direction, GuessResult, RoundState, Series
from .strategies import Predictor

logger = logging.getLogger(__name__)

START_PROMPT = "Make a prediction for the next trading day."


class SessionBusy(RuntimeError):
    pass


@dataclass
class SessionEvent:
    ts: float
    level: str
    message: str
    data: dict = field(default_factory=dict)


def format_percent(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def describe_result(result: GuessResult) -> str:
    verdict = "Correct!" if result.correct else "Wrong."
    return f"{verdict} {result.date} close: {result.close:.2f} ({format_percent(result.percent_change)})."


def result_tone(result: GuessResult) -> str | None:
    if result.moved_up:
        return "win"
    if result.moved_down:
        return "lose"
    return None


class GameSession:
    """The single active game, plus the loading gate around its start.

    Every start bumps ``token``; a fetch result is only applied when it still
    carries the current token, so a slow fetch can never overwrite a game
    started after it.
    """

    def __init__(
        self,
        predictor: Predictor | None = None,
        *,
        lookback_days: int = 100,
        min_age_days: int = 7,
        last_ticker: str | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._predictor = predictor
        self._lookback_days = lookback_days
        self._min_age_days = min_age_days
        self._state = engine.reset()
        self._chart = ChartSeries()
        self._token = 0
        self._loading = False
        self._message: str | None = None
        self._error: GameError | None = None
        self._last_result: GuessResult | None = None
        self._last_ticker = last_ticker
        self._events: Deque[SessionEvent] = deque(maxlen=200)

    @property
    def state(self) -> RoundState:
        with self._lock:
            return self._state

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    def _add_event(self, level: str, message: str, data: dict | None = None) -> None:
        self._events.append(SessionEvent(ts=time.time(), level=level, message=message, data=data or {}))

    def _clear(self) -> None:
        self._state = engine.reset()
        self._chart.clear()
        self._message = None
        self._error = None
        self._last_result = None

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._token

    def begin_start(self, ticker: str) -> int:
        with self._lock:
            self._clear()
            self._token += 1
            self._loading = True
            self._last_ticker = ticker
            self._add_event("info", "game_start_requested", {"ticker": ticker, "token": self._token})
            return self._token

    def complete_start(
        self,
        token: int,
        ticker: str,
        series: Series,
        *,
        today: date,
        rng: random.Random | None = None,
    ) -> bool:
        """Apply a fetched series. Returns ``False`` when ``token`` is stale.

        ``InsufficientData`` is recorded and re-raised with the session left
        reset.
        """
        with self._lock:
            if token != self._token:
                logger.info("Ignoring stale series ticker=%s token=%s current=%s", ticker, token, self._token)
                return False

            self._loading = False
            try:
                state, window = engine.start_game(
                    ticker,
                    series,
                    today=today,
                    rng=rng,
                    predictor=self._predictor,
                    lookback_days=self._lookback_days,
                    min_age_days=self._min_age_days,
                )
            except GameError as exc:
                self._clear()
                self._error = exc
                self._add_event("warning", "game_start_failed", exc.to_dict())
                raise

            self._state = state
            self._chart.init_chart(window.labels, window.values)
            self._message = START_PROMPT
            self._add_event(
                "info",
                "game_started",
                {"ticker": ticker, "start_date": series[state.start_index].date},
            )
            return True

    def fail_start(self, token: int, error: GameError) -> bool:
        with self._lock:
            if token != self._token:
                logger.info("Ignoring stale failure code=%s token=%s current=%s", error.code, token, self._token)
                return False
            self._loading = False
            self._clear()
            self._error = error
            self._add_event("warning", "game_start_failed", error.to_dict())
            return True

    def guess(self, direction: Direction) -> GuessResult | None:
        with self._lock:
            if self._loading:
                raise SessionBusy("a game is loading")
            if not self._state.in_round or self._state.ended:
                return None

            self._state, result = engine.resolve_guess(self._state, direction, self._predictor)
            if result is None:
                exhausted = DataExhausted()
                self._message = exhausted.message
                self._last_result = None
                self._add_event("info", "game_data_exhausted", {"score": self._state.score})
                return None

            self._chart.append_point(result.date, result.close)
            self._message = describe_result(result)
            self._last_result = result
            return result

    def end(self) -> RoundState:
        with self._lock:
            if self._loading:
                raise SessionBusy("a game is loading")
            already_ended = self._state.ended
            self._state = engine.end_game(self._state)
            if not already_ended:
                self._message = f"Game over. Final score: {self._state.score}."
                self._add_event("info", "game_ended", {"score": self._state.score})
            return self._state

    def restart(self) -> None:
        with self._lock:
            self._clear()
            self._token += 1
            self._loading = False
            self._add_event("info", "game_reset", {"token": self._token})

    def snapshot(self) -> dict:
        with self._lock:
            state = self._state
            current = state.current_point
            start = state.series[state.start_index] if state.start_index is not None else None
            last_result = None
            if self._last_result is not None:
                last_result = {**asdict(self._last_result), "tone": result_tone(self._last_result)}
            return {
                "ticker": state.ticker,
                "phase": state.phase.value,
                "in_round": state.in_round,
                "ended": state.ended,
                "loading": self._loading,
                "start_date": start.date if start else None,
                "current_date": current.date if current else None,
                "current_close": current.close if current else None,
                "score": state.score,
                "model_enabled": self._predictor is not None,
                "model_suggestion": state.model_suggestion,
                "model_score": state.model_score,
                "chart": self._chart.snapshot(),
                "message": self._message,
                "error": self._error.to_dict() if self._error else None,
                "last_result": last_result,
                "last_ticker": self._last_ticker,
                "events": [
                    {
                        "ts": e.ts,
                        "level": e.level,
                        "message": e.message,
                        "data": e.data,
                    }
                    for e in list(self._events)
                ],
            }
