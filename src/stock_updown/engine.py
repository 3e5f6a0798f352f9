from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import date

from .models import ChartWindow, Direction, GuessResult, RoundState, Series, Suggestion
from .strategies import Predictor
from .window import CONTEXT_DAYS, pick_start_index

logger = logging.getLogger(__name__)


def reset() -> RoundState:
    return RoundState()


def percent_change(today_close: float, next_close: float) -> float:
    if today_close == 0:
        return 0.0
    return (next_close - today_close) / today_close * 100.0


def is_correct(direction: Direction | Suggestion, *, moved_up: bool, moved_down: bool) -> bool:
    # An unchanged close is wrong for either call.
    return (direction == "up" and moved_up) or (direction == "down" and moved_down)


def chart_window(series: Series, index: int, context_days: int = CONTEXT_DAYS) -> ChartWindow:
    points = series[index - context_days : index + 1]
    return ChartWindow(
        labels=tuple(point.date for point in points),
        values=tuple(point.close for point in points),
    )


def start_game(
    ticker: str,
    series: Series,
    *,
    today: date,
    rng: random.Random | None = None,
    predictor: Predictor | None = None,
    lookback_days: int = 100,
    min_age_days: int = 7,
) -> tuple[RoundState, ChartWindow]:
    """Create a fresh round for ``ticker``.

    Raises ``InsufficientData`` when no start index fits the window; nothing
    is created in that case.
    """
    series = tuple(series)
    start_index = pick_start_index(
        series,
        today=today,
        rng=rng,
        lookback_days=lookback_days,
        min_age_days=min_age_days,
    )
    state = RoundState(
        ticker=ticker,
        series=series,
        start_index=start_index,
        current_index=start_index,
        score=0,
        model_suggestion=predictor.suggest(series, start_index) if predictor else None,
        model_score=0,
        in_round=True,
        ended=False,
    )
    logger.info(
        "Round started ticker=%s start_date=%s model_suggestion=%s",
        ticker,
        series[start_index].date,
        state.model_suggestion,
    )
    return state, chart_window(series, start_index)


def resolve_guess(
    state: RoundState,
    direction: Direction,
    predictor: Predictor | None = None,
) -> tuple[RoundState, GuessResult | None]:
    """Resolve one guess against the next trading day.

    Returns the unchanged state when no round is running. When the series has
    no next point the round ends and no result is returned.
    """
    if not state.in_round or state.ended or state.current_index is None:
        return state, None

    idx = state.current_index
    if idx + 1 >= len(state.series):
        logger.info("Round data exhausted ticker=%s score=%s", state.ticker, state.score)
        return end_game(state), None

    today_close = state.series[idx].close
    nxt = state.series[idx + 1]
    moved_up = nxt.close > today_close
    moved_down = nxt.close < today_close
    correct = is_correct(direction, moved_up=moved_up, moved_down=moved_down)

    model_suggestion = state.model_suggestion
    model_correct: bool | None = None
    model_score = state.model_score
    if predictor is not None and model_suggestion in ("up", "down"):
        model_correct = is_correct(model_suggestion, moved_up=moved_up, moved_down=moved_down)
        if model_correct:
            model_score += 1

    result = GuessResult(
        date=nxt.date,
        close=nxt.close,
        correct=correct,
        moved_up=moved_up,
        moved_down=moved_down,
        percent_change=percent_change(today_close, nxt.close),
        model_suggestion=model_suggestion,
        model_correct=model_correct,
    )
    next_state = replace(
        state,
        current_index=idx + 1,
        score=state.score + 1 if correct else state.score,
        model_score=model_score,
        model_suggestion=predictor.suggest(state.series, idx + 1) if predictor else None,
    )
    return next_state, result


def end_game(state: RoundState) -> RoundState:
    if state.ended:
        return state
    return replace(state, ended=True)
