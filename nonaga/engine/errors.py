from __future__ import annotations

from nonaga.engine.models import Action


class GameEngineError(Exception):
    """Base class for engine errors."""
    pass


class InvalidActionError(GameEngineError):
    """Action is not valid in current state."""

    def __init__(self, message: str, action: Action | None = None):
        self.message = message
        self.action = action
        super().__init__(message)


class GameNotActiveError(GameEngineError):
    """Action submitted to a game that has already ended."""
    pass


class InvalidSetupError(GameEngineError):
    """Starting layout or serialized state breaks a board invariant."""

    def __init__(self, message: str, problems: list[str] | None = None):
        self.message = message
        self.problems = problems or [message]
        super().__init__(message)
