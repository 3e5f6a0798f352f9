from __future__ import annotations

import logging
import math

import httpx

from .config import Config
from .errors import (
    InformationalRejection,
    InvalidTicker,
    MalformedResponse,
    NetworkError,
    RateLimited,
)
from .models import PricePoint, Series

logger = logging.getLogger(__name__)

DAILY_SERIES_FUNCTION = "TIME_SERIES_DAILY_ADJUSTED"
DAILY_SERIES_KEY = "Time Series (Daily)"
CLOSE_FIELD = "4. close"


def _as_close(value: object) -> float | None:
    try:
        close = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(close):
        return None
    return close


def parse_daily_series(body: object) -> Series:
    """Turn an Alpha Vantage daily series body into an ascending ``Series``.

    The body is classified before parsing: rate-limit notes, informational
    rejections and error messages each raise their own ``GameError``.
    """
    if not isinstance(body, dict):
        logger.warning("Alpha Vantage unexpected response: %r", body)
        raise MalformedResponse()

    note = body.get("Note")
    if note:
        raise RateLimited.from_note(str(note))

    information = body.get("Information")
    if information:
        raise InformationalRejection.from_information(str(information))

    if body.get("Error Message"):
        raise InvalidTicker()

    raw_series = body.get(DAILY_SERIES_KEY)
    if not isinstance(raw_series, dict):
        logger.warning("Alpha Vantage unexpected response: %s", body)
        raise MalformedResponse()

    by_date: dict[str, PricePoint] = {}
    for day, ohlc in raw_series.items():
        if not isinstance(ohlc, dict):
            continue
        close = _as_close(ohlc.get(CLOSE_FIELD))
        if close is None:
            continue
        by_date[str(day)] = PricePoint(date=str(day), close=close)

    return tuple(by_date[day] for day in sorted(by_date))


class AlphaVantageClient:
    def __init__(self, config: Config, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._transport = transport

    def _params(self, ticker: str) -> dict[str, str]:
        return {
            "function": DAILY_SERIES_FUNCTION,
            "symbol": ticker,
            "apikey": self._config.alpha_vantage_api_key,
            "outputsize": self._config.alpha_vantage_outputsize,
        }

    async def fetch_series(self, ticker: str) -> Series:
        async with httpx.AsyncClient(
            timeout=self._config.http_timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(
                    self._config.alpha_vantage_base_url,
                    params=self._params(ticker),
                )
            except httpx.HTTPError as exc:
                logger.warning("Alpha Vantage request failed ticker=%s error=%s", ticker, exc)
                raise NetworkError(f"Network error: {exc.__class__.__name__}") from exc

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise NetworkError(f"Network error: {response.status_code}") from exc

            try:
                body = response.json()
            except ValueError as exc:
                logger.warning("Alpha Vantage returned non-JSON body ticker=%s", ticker)
                raise MalformedResponse() from exc

        series = parse_daily_series(body)
        logger.info("Fetched series ticker=%s points=%s", ticker, len(series))
        return series
