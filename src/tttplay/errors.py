"""Error taxonomy for the game core.

Move rejections are expected conditions: the board model attaches them to a
rejected MoveResult instead of raising them at the caller. Search misuse is a
programming error and is raised.
"""
from __future__ import annotations

from typing import Any


class GameError(Exception):
    pass


class MoveRejected(GameError):
    """A move that was refused; the game state is unchanged."""

    def __init__(self, index: Any, message: str) -> None:
        super().__init__(message)
        self.index = index


class InvalidIndex(MoveRejected):
    def __init__(self, index: Any) -> None:
        super().__init__(index, f"Invalid cell index {index!r}. Must be 0-8.")


class CellOccupied(MoveRejected):
    def __init__(self, index: int, mark: int) -> None:
        super().__init__(index, f"Cell {index} is already occupied by player {mark}.")
        self.mark = mark


class GameAlreadyTerminal(MoveRejected):
    def __init__(self, index: Any) -> None:
        super().__init__(index, "Game is already over.")


class EngineBusy(MoveRejected):
    def __init__(self, index: Any) -> None:
        super().__init__(index, "Input is locked while the computer is to move.")


class SearchInvariantViolation(GameError, AssertionError):
    """The search engine was invoked on a board it must never see."""
