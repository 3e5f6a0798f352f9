from __future__ import annotations

import logging

import uvicorn

from .api import app
from .config import load_config
from .runtime import get_or_create_game_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)


def serve() -> None:
    config = load_config()
    get_or_create_game_service(config)

    server = uvicorn.Server(
        uvicorn.Config(
            app=app,
            host="0.0.0.0",
            port=config.game_api_port,
            log_level="info",
        )
    )
    server.run()


if __name__ == "__main__":
    serve()
