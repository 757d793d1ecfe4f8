from __future__ import annotations

from collections.abc import Iterable


class GameSessionError(Exception):
    pass


class InsufficientQuestionsError(GameSessionError):
    def __init__(self, missing_levels: Iterable[int] = ()) -> None:
        self.missing_levels = tuple(sorted(missing_levels))
        levels = ", ".join(str(level) for level in self.missing_levels)
        super().__init__(f"question pool has no candidates for levels: {levels}")


class NothingToCashOutError(GameSessionError):
    pass


class SessionFinishedError(GameSessionError):
    pass


class GameNotFoundError(GameSessionError):
    pass


class UserNotFoundError(GameSessionError):
    pass
