from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace

from .config import load_config
from .errors import GameError
from .game import GameService, build_game_service

UP_KEYS = {"u", "up", "\x1b[a"}
DOWN_KEYS = {"d", "down", "\x1b[b"}
END_KEYS = {"e", "end"}
RESTART_KEYS = {"r", "restart"}
QUIT_KEYS = {"q", "quit", "exit"}

HELP_TEXT = "[u]p / [d]own (or arrow keys + Enter), [e]nd, [r]estart, [q]uit"


def parse_command(raw: str) -> str | None:
    key = raw.strip().lower()
    if key in UP_KEYS:
        return "up"
    if key in DOWN_KEYS:
        return "down"
    if key in END_KEYS:
        return "end"
    if key in RESTART_KEYS:
        return "restart"
    if key in QUIT_KEYS:
        return "quit"
    return None


def _render(snapshot: dict) -> str:
    parts = [
        f"ticker={snapshot['ticker'] or '-'}",
        f"date={snapshot['current_date'] or '-'}",
        f"score={snapshot['score']}",
    ]
    if snapshot["model_enabled"]:
        parts.append(f"model={snapshot['model_suggestion'] or '-'} model_score={snapshot['model_score']}")
    lines = ["  ".join(parts)]
    if snapshot["message"]:
        lines.append(snapshot["message"])
    return "\n".join(lines)


def _start(service: GameService, ticker: str) -> bool:
    try:
        snapshot = asyncio.run(service.start(ticker))
    except ValueError as exc:
        print(exc)
        return False
    except GameError as exc:
        print(exc.message)
        if exc.hint:
            print(exc.hint)
        return False

    chart = snapshot["chart"]
    for label, value in zip(chart["labels"], chart["values"]):
        print(f"  {label}  {value:.2f}")
    print(_render(snapshot))
    return True


def _prompt_ticker(default: str | None) -> str | None:
    suffix = f" [{default}]" if default else ""
    try:
        raw = input(f"Ticker{suffix}: ").strip()
    except EOFError:
        return None
    return raw or (default or "")


def play(service: GameService, ticker: str | None = None) -> int:
    ticker = ticker or _prompt_ticker(service.snapshot()["last_ticker"])
    if ticker is None:
        return 0
    started = _start(service, ticker)
    print(HELP_TEXT)
    while True:
        try:
            raw = input("> ")
        except EOFError:
            return 0

        command = parse_command(raw)
        if command is None:
            print(HELP_TEXT)
            continue
        if command == "quit":
            return 0
        if command == "restart" or not started:
            service.restart()
            ticker = _prompt_ticker(service.snapshot()["last_ticker"])
            if ticker is None:
                return 0
            started = _start(service, ticker)
            continue
        if command == "end":
            service.end()
            print(_render(service.snapshot()))
            continue

        if service.snapshot()["ended"]:
            print("The game has ended. Press r to restart.")
            continue
        result = service.guess(command)
        snapshot = service.snapshot()
        if result is not None and snapshot["model_enabled"] and result.model_correct is not None:
            verdict = "right" if result.model_correct else "wrong"
            print(f"Model called {result.model_suggestion} and was {verdict}.")
        print(_render(snapshot))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Guess whether a stock closes higher or lower tomorrow.")
    parser.add_argument("ticker", nargs="?", help="Ticker symbol, e.g. AAPL")
    parser.add_argument("--no-model", action="store_true", help="Disable the moving-average baseline")
    parser.add_argument("--no-cache", action="store_true", help="Always fetch from Alpha Vantage")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    config = load_config()
    overrides = {}
    if args.no_model:
        overrides["baseline_model_enabled"] = False
    if args.no_cache:
        overrides["series_cache_enabled"] = False
    if overrides:
        config = replace(config, **overrides)

    return play(build_game_service(config), args.ticker)


if __name__ == "__main__":
    raise SystemExit(main())
