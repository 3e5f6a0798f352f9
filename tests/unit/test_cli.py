import random
from datetime import date, timedelta

import pytest

from src.stock_updown.cli import parse_command, play
from src.stock_updown.game import GameService
from src.stock_updown.models import PricePoint
from src.stock_updown.session import GameSession
from src.stock_updown.strategies import SmaSlopePredictor

SERIES = tuple(
    PricePoint(date=(date(2026, 1, 1) + timedelta(days=idx)).isoformat(), close=close)
    for idx, close in enumerate([10, 11, 9, 9, 9, 9, 9, 12])
)


class FakeMarketData:
    async def fetch_series(self, ticker: str):
        return SERIES


def _service(last_ticker: str | None = None) -> GameService:
    return GameService(
        session=GameSession(SmaSlopePredictor(), last_ticker=last_ticker),
        client=FakeMarketData(),
        cache=None,
        clock=lambda: date(2026, 2, 18),
        rng=random.Random(0),
    )


def _script_input(monkeypatch: pytest.MonkeyPatch, answers: list[str]) -> list[str]:
    prompts: list[str] = []
    remaining = list(answers)

    def fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


def test_parse_command_maps_keyboard_equivalents() -> None:
    assert parse_command("u") == "up"
    assert parse_command("\x1b[A") == "up"
    assert parse_command("D") == "down"
    assert parse_command("\x1b[B") == "down"
    assert parse_command("e") == "end"
    assert parse_command("R") == "restart"
    assert parse_command(" q ") == "quit"


def test_parse_command_rejects_unknown_input() -> None:
    assert parse_command("") is None
    assert parse_command("sideways") is None


def test_play_runs_guess_end_and_restart(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    service = _service()
    prompts = _script_input(monkeypatch, ["aapl", "u", "e", "r", "", "d", "q"])

    assert play(service) == 0

    out = capsys.readouterr().out
    assert "Correct! 2026-01-08 close: 12.00 (+33.33%)." in out
    assert "Game over. Final score: 1." in out
    assert "Wrong. 2026-01-08 close: 12.00 (+33.33%)." in out
    assert prompts[0] == "Ticker: "
    assert "Ticker [AAPL]: " in prompts
    snapshot = service.snapshot()
    assert snapshot["ticker"] == "AAPL"
    assert snapshot["score"] == 0
    assert snapshot["current_date"] == "2026-01-08"


def test_play_prefills_remembered_ticker(monkeypatch: pytest.MonkeyPatch) -> None:
    service = _service(last_ticker="MSFT")
    prompts = _script_input(monkeypatch, ["", "q"])

    assert play(service) == 0

    assert prompts[0] == "Ticker [MSFT]: "
    assert service.snapshot()["ticker"] == "MSFT"


def test_play_exits_cleanly_on_eof_at_ticker_prompt(monkeypatch: pytest.MonkeyPatch) -> None:
    service = _service()
    _script_input(monkeypatch, [])

    assert play(service) == 0
    assert service.snapshot()["phase"] == "not_started"


def test_play_exits_cleanly_on_eof_at_restart_prompt(monkeypatch: pytest.MonkeyPatch) -> None:
    service = _service()
    prompts = _script_input(monkeypatch, ["AAPL", "r"])

    assert play(service) == 0
    assert prompts[-1] == "Ticker [AAPL]: "
