from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    alpha_vantage_api_key: str
    alpha_vantage_base_url: str
    alpha_vantage_outputsize: str
    http_timeout_seconds: float
    series_cache_enabled: bool
    series_cache_path: str
    series_cache_ttl_hours: float
    baseline_model_enabled: bool
    baseline_sma_period: int
    start_window_lookback_days: int
    start_window_min_age_days: int
    game_api_port: int

    @property
    def series_cache_ttl_seconds(self) -> float:
        return self.series_cache_ttl_hours * 3600.0



def _bool_from_env(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}



def load_config() -> Config:
    load_dotenv()

    api_key = os.getenv("ALPHA_VANTAGE_API_KEY", "").strip()
    if not api_key:
        raise ValueError("ALPHA_VANTAGE_API_KEY is required")

    outputsize = os.getenv("ALPHA_VANTAGE_OUTPUTSIZE", "full").strip().lower()
    if outputsize not in {"full", "compact"}:
        raise ValueError(f"unsupported ALPHA_VANTAGE_OUTPUTSIZE: {outputsize}")

    baseline_sma_period = int(os.getenv("BASELINE_SMA_PERIOD", "5"))
    if baseline_sma_period < 1:
        raise ValueError("BASELINE_SMA_PERIOD must be > 0")

    lookback_days = int(os.getenv("START_WINDOW_LOOKBACK_DAYS", "100"))
    min_age_days = int(os.getenv("START_WINDOW_MIN_AGE_DAYS", "7"))
    if min_age_days > lookback_days:
        raise ValueError("START_WINDOW_MIN_AGE_DAYS must not exceed START_WINDOW_LOOKBACK_DAYS")

    return Config(
        alpha_vantage_api_key=api_key,
        alpha_vantage_base_url=os.getenv(
            "ALPHA_VANTAGE_BASE_URL",
            "https://www.alphavantage.co/query",
        ).strip(),
        alpha_vantage_outputsize=outputsize,
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
        series_cache_enabled=_bool_from_env(os.getenv("SERIES_CACHE_ENABLED"), True),
        series_cache_path=os.getenv(
            "SERIES_CACHE_PATH",
            "logs/series_cache.sqlite3",
        ).strip(),
        series_cache_ttl_hours=float(os.getenv("SERIES_CACHE_TTL_HOURS", "12")),
        baseline_model_enabled=_bool_from_env(os.getenv("BASELINE_MODEL_ENABLED"), True),
        baseline_sma_period=baseline_sma_period,
        start_window_lookback_days=lookback_days,
        start_window_min_age_days=min_age_days,
        game_api_port=int(os.getenv("GAME_API_PORT", "8080")),
    )
