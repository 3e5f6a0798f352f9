from __future__ import annotations

import threading

from .config import Config, load_config
from .game import GameService, build_game_service

_game_service: GameService | None = None
_lock = threading.Lock()


def get_or_create_game_service(config: Config | None = None) -> GameService:
    global _game_service

    if _game_service is not None:
        return _game_service

    with _lock:
        if _game_service is None:
            _game_service = build_game_service(config or load_config())
    return _game_service


def set_game_service(service: GameService | None) -> None:
    global _game_service

    with _lock:
        _game_service = service
