import sqlite3
from dataclasses import replace

from src.stock_updown.cache import SeriesCache
from src.stock_updown.config import Config
from src.stock_updown.game import build_game_service
from src.stock_updown.models import PricePoint

SERIES = (PricePoint(date="2026-02-09", close=8.75),)


def _config(cache_path: str) -> Config:
    return Config(
        alpha_vantage_api_key="demo-key",
        alpha_vantage_base_url="https://www.alphavantage.co/query",
        alpha_vantage_outputsize="full",
        http_timeout_seconds=5.0,
        series_cache_enabled=True,
        series_cache_path=cache_path,
        series_cache_ttl_hours=12.0,
        baseline_model_enabled=True,
        baseline_sma_period=5,
        start_window_lookback_days=100,
        start_window_min_age_days=7,
        game_api_port=8080,
    )


def test_build_game_service_purges_expired_entries(tmp_path) -> None:
    cache_path = str(tmp_path / "cache.sqlite3")
    cache = SeriesCache(db_path=cache_path)
    cache.put("OLD", SERIES, now_ts=0.0)
    cache.put("NEW", SERIES)

    build_game_service(_config(cache_path))

    with sqlite3.connect(cache_path) as conn:
        tickers = [row[0] for row in conn.execute("SELECT ticker FROM series_cache")]
    assert tickers == ["NEW"]


def test_build_game_service_restores_last_ticker(tmp_path) -> None:
    cache_path = str(tmp_path / "cache.sqlite3")
    SeriesCache(db_path=cache_path).remember_ticker("msft")

    service = build_game_service(_config(cache_path))

    assert service.snapshot()["last_ticker"] == "MSFT"


def test_build_game_service_without_cache_has_no_last_ticker(tmp_path) -> None:
    config = replace(_config(str(tmp_path / "cache.sqlite3")), series_cache_enabled=False)

    service = build_game_service(config)

    assert service.snapshot()["last_ticker"] is None
