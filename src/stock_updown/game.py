from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import date

from .cache import SeriesCache
from .config import Config
from .errors import GameError
from .market_data import AlphaVantageClient
from .models import Direction, GuessResult, RoundState, Series
from .session import GameSession
from .strategies import SmaSlopePredictor

logger = logging.getLogger(__name__)


def normalize_ticker(raw: str | None) -> str:
    ticker = (raw or "").strip().upper()
    if not ticker:
        raise ValueError("Please enter a stock ticker symbol.")
    return ticker


class GameService:
    def __init__(
        self,
        *,
        session: GameSession,
        client: AlphaVantageClient,
        cache: SeriesCache | None = None,
        clock: Callable[[], date] = date.today,
        rng: random.Random | None = None,
    ) -> None:
        self._session = session
        self._client = client
        self._cache = cache
        self._clock = clock
        self._rng = rng or random.Random()

    @property
    def session(self) -> GameSession:
        return self._session

    async def _load_series(self, ticker: str) -> Series:
        if self._cache is not None:
            cached = self._cache.get(ticker)
            if cached is not None:
                logger.info("Series cache hit ticker=%s points=%s", ticker, len(cached))
                return cached
            logger.info("Series cache miss ticker=%s", ticker)

        series = await self._client.fetch_series(ticker)
        if self._cache is not None:
            self._cache.put(ticker, series)
        return series

    async def start(self, raw_ticker: str | None) -> dict:
        ticker = normalize_ticker(raw_ticker)
        token = self._session.begin_start(ticker)
        if self._cache is not None:
            self._cache.remember_ticker(ticker)
        try:
            series = await self._load_series(ticker)
        except GameError as exc:
            logger.warning("Game start failed ticker=%s code=%s message=%s", ticker, exc.code, exc.message)
            if self._session.fail_start(token, exc):
                raise
            return self._session.snapshot()
        except Exception:
            self._session.fail_start(token, GameError())
            raise

        self._session.complete_start(token, ticker, series, today=self._clock(), rng=self._rng)
        return self._session.snapshot()

    def guess(self, direction: Direction) -> GuessResult | None:
        return self._session.guess(direction)

    def end(self) -> RoundState:
        return self._session.end()

    def restart(self) -> None:
        self._session.restart()

    def snapshot(self) -> dict:
        return self._session.snapshot()


def build_game_service(config: Config) -> GameService:
    predictor = SmaSlopePredictor(period=config.baseline_sma_period) if config.baseline_model_enabled else None
    cache = (
        SeriesCache(config.series_cache_path, ttl_seconds=config.series_cache_ttl_seconds)
        if config.series_cache_enabled
        else None
    )
    last_ticker = None
    if cache is not None:
        removed = cache.purge_expired()
        if removed:
            logger.info("Purged expired series cache entries count=%s", removed)
        last_ticker = cache.last_ticker()
    session = GameSession(
        predictor,
        lookback_days=config.start_window_lookback_days,
        min_age_days=config.start_window_min_age_days,
        last_ticker=last_ticker,
    )
    return GameService(session=session, client=AlphaVantageClient(config), cache=cache)
