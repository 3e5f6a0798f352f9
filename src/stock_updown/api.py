from __future__ import annotations

from typing import Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .errors import GameError, InsufficientData, InvalidTicker, RateLimited
from .runtime import get_or_create_game_service
from .session import SessionBusy

app = FastAPI(title="Stock Up/Down API", version="0.1.0")


class StartRequest(BaseModel):
    ticker: str


class GuessRequest(BaseModel):
    direction: Literal["up", "down"]


def _status_for(exc: GameError) -> int:
    if isinstance(exc, RateLimited):
        return 429
    if isinstance(exc, InvalidTicker):
        return 404
    if isinstance(exc, InsufficientData):
        return 422
    return 502


@app.get("/healthz")
async def healthz() -> dict:
    return {"ok": True}


@app.get("/game")
async def game_status() -> dict:
    return get_or_create_game_service().snapshot()


@app.post("/game/start")
async def start_game(payload: StartRequest) -> dict:
    service = get_or_create_game_service()
    try:
        return await service.start(payload.ticker)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except GameError as exc:
        raise HTTPException(status_code=_status_for(exc), detail=exc.to_dict()) from exc


@app.post("/game/guess")
async def guess(payload: GuessRequest) -> dict:
    service = get_or_create_game_service()
    try:
        result = service.guess(payload.direction)
    except SessionBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    snapshot = service.snapshot()
    return {"resolved": result is not None, "game": snapshot}


@app.post("/game/end")
async def end_game() -> dict:
    service = get_or_create_game_service()
    try:
        service.end()
    except SessionBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return service.snapshot()


@app.post("/game/restart")
async def restart_game() -> dict:
    service = get_or_create_game_service()
    service.restart()
    return service.snapshot()
