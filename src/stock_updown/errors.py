from __future__ import annotations

from typing import ClassVar

RATE_LIMIT_NOTE_MARKER = "Thank you for using Alpha Vantage"


class GameError(Exception):
    """Base for every failure a player can be told about.

    Subclasses form a closed set; each carries a stable ``code`` for API
    clients, a user-facing ``message`` and an optional ``hint``.
    """

    code: ClassVar[str] = "game_error"
    default_message: ClassVar[str] = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None, *, hint: str | None = None) -> None:
        self.message = message or self.default_message
        self.hint = hint
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "hint": self.hint}


class RateLimited(GameError):
    code = "rate_limited"
    default_message = "API limit reached. Please wait a minute and try again."

    @classmethod
    def from_note(cls, note: str) -> RateLimited:
        message = cls.default_message if RATE_LIMIT_NOTE_MARKER in note else note
        return cls(message, hint="Alpha Vantage limits 5 requests/minute on free tier.")


class InvalidTicker(GameError):
    code = "invalid_ticker"
    default_message = "Ticker not found. Please try another."


class InformationalRejection(GameError):
    code = "information"

    @classmethod
    def from_information(cls, information: str) -> InformationalRejection:
        hint = None
        if "api key" in information.lower():
            hint = "Check your API key value and daily limits."
        return cls(information, hint=hint)


class MalformedResponse(GameError):
    code = "malformed_response"
    default_message = "Unexpected API response. Please try again in a moment."


class NetworkError(GameError):
    code = "network_error"
    default_message = "Network error. Please try again."


class InsufficientData(GameError):
    code = "insufficient_data"
    default_message = "Not enough data in the last 100 days for this ticker."


class DataExhausted(GameError):
    code = "data_exhausted"
    default_message = "No more data available. The game has ended."
