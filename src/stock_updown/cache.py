from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path

from .models import PricePoint, Series

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 12 * 60 * 60


class SeriesCache:
    def __init__(
        self,
        db_path: str = "logs/series_cache.sqlite3",
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ttl_seconds = ttl_seconds
        self._bootstrap()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _bootstrap(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS series_cache (
                    ticker TEXT PRIMARY KEY,
                    series_json TEXT NOT NULL,
                    fetched_ts REAL NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS preferences (
                    name TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    @staticmethod
    def _key(ticker: str) -> str:
        return ticker.strip().upper()

    def get(self, ticker: str, now_ts: float | None = None) -> Series | None:
        now_ts = now_ts if now_ts is not None else time.time()
        with self._connect() as conn:
            row = conn.execute(
                "SELECT series_json, fetched_ts FROM series_cache WHERE ticker = ?",
                (self._key(ticker),),
            ).fetchone()
        if row is None:
            return None
        if now_ts - float(row["fetched_ts"]) >= self._ttl_seconds:
            logger.info("Series cache stale ticker=%s", self._key(ticker))
            return None

        try:
            raw = json.loads(row["series_json"])
            return tuple(PricePoint(date=str(item[0]), close=float(item[1])) for item in raw)
        except (ValueError, TypeError, IndexError):
            logger.warning("Series cache entry unreadable ticker=%s; ignoring", self._key(ticker))
            return None

    def put(self, ticker: str, series: Series, now_ts: float | None = None) -> None:
        now_ts = now_ts if now_ts is not None else time.time()
        payload = json.dumps([[point.date, point.close] for point in series])
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO series_cache (ticker, series_json, fetched_ts)
                VALUES (?, ?, ?)
                ON CONFLICT(ticker) DO UPDATE SET
                    series_json=excluded.series_json,
                    fetched_ts=excluded.fetched_ts
                """,
                (self._key(ticker), payload, now_ts),
            )

    def purge_expired(self, now_ts: float | None = None) -> int:
        now_ts = now_ts if now_ts is not None else time.time()
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM series_cache WHERE fetched_ts <= ?",
                (now_ts - self._ttl_seconds,),
            )
            return int(cursor.rowcount)

    def remember_ticker(self, ticker: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO preferences (name, value) VALUES ('last_ticker', ?)
                ON CONFLICT(name) DO UPDATE SET value=excluded.value
                """,
                (self._key(ticker),),
            )

    def last_ticker(self) -> str | None:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM preferences WHERE name = 'last_ticker'").fetchone()
        return row["value"] if row is not None else None
