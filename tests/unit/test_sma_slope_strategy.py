import pytest

from src.stock_updown.models import PricePoint
from src.stock_updown.strategies import SmaSlopePredictor


def _series(closes: list[float]) -> tuple[PricePoint, ...]:
    return tuple(PricePoint(date=f"2026-01-{idx + 1:02d}", close=close) for idx, close in enumerate(closes))


def test_sma_requires_full_period() -> None:
    predictor = SmaSlopePredictor(period=5)
    series = _series([1, 2, 3, 4, 5])

    assert predictor.sma(series, 3) is None
    assert predictor.sma(series, 4) == 3.0


def test_suggest_unavailable_without_history() -> None:
    predictor = SmaSlopePredictor(period=5)
    series = _series([1, 2, 3, 4, 5, 6])

    assert predictor.suggest(series, 0) == "unavailable"
    assert predictor.suggest(series, 4) == "unavailable"
    assert predictor.suggest(series, 5) == "up"


def test_suggest_down_on_falling_average() -> None:
    predictor = SmaSlopePredictor(period=5)
    series = _series([10, 9, 8, 7, 6, 5])

    assert predictor.suggest(series, 5) == "down"


def test_suggest_tie_defaults_to_down() -> None:
    predictor = SmaSlopePredictor(period=5)
    series = _series([1, 2, 3, 4, 5, 1])

    assert predictor.sma(series, 5) == predictor.sma(series, 4)
    assert predictor.suggest(series, 5) == "down"


def test_period_must_be_positive() -> None:
    with pytest.raises(ValueError, match="period must be > 0"):
        SmaSlopePredictor(period=0)
