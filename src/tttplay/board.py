"""
Board model: game state, move application, outcome detection and the score tally.

State transitions are pure: every operation returns a new GameState. The
ScoreTally is the only long-lived mutable object; it is owned by the session
and passed in explicitly.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple

from .errors import CellOccupied, GameAlreadyTerminal, InvalidIndex, MoveRejected
from .game_basics import (
    BOARD_SIZE,
    EMPTY,
    PLAYERS,
    X,
    get_winner,
    is_full,
    other_player,
)

IN_PROGRESS = "in_progress"
WON = "won"
DRAW = "draw"

# round ids are unique per process; ScoreTally.record keys on them
_round_ids = itertools.count(1)


def _next_round_id() -> int:
    return next(_round_ids)


@dataclass(frozen=True)
class Outcome:
    status: str = IN_PROGRESS
    winner: int = EMPTY

    @property
    def is_terminal(self) -> bool:
        return self.status != IN_PROGRESS

    def describe(self) -> str:
        if self.status == WON:
            return f"Player {'X' if self.winner == X else 'O'} wins!"
        if self.status == DRAW:
            return "It's a draw!"
        return "In progress"


@dataclass(frozen=True)
class GameState:
    board: Tuple[int, ...] = (EMPTY,) * BOARD_SIZE
    turn: int = X
    outcome: Outcome = field(default_factory=Outcome)
    round_no: int = 0
    round_id: int = field(default_factory=_next_round_id, compare=False)


@dataclass
class ScoreTally:
    wins_x: int = 0
    wins_o: int = 0
    draws: int = 0
    last_recorded_round: Optional[int] = None

    def record(self, outcome: Outcome, round_id: int) -> bool:
        """Count a finished round once. Returns False when nothing was counted.

        ``round_id`` is the finished state's ``GameState.round_id``.
        """
        if not outcome.is_terminal:
            return False
        if self.last_recorded_round == round_id:
            return False
        if outcome.status == DRAW:
            self.draws += 1
        elif outcome.winner == X:
            self.wins_x += 1
        else:
            self.wins_o += 1
        self.last_recorded_round = round_id
        return True

    def reset(self) -> None:
        self.wins_x = 0
        self.wins_o = 0
        self.draws = 0
        self.last_recorded_round = None

    @property
    def games(self) -> int:
        return self.wins_x + self.wins_o + self.draws

    def as_dict(self) -> dict:
        return {"X": self.wins_x, "O": self.wins_o, "Draw": self.draws}


@dataclass(frozen=True)
class MoveResult:
    state: GameState
    accepted: bool
    rejection: Optional[MoveRejected] = None

    @property
    def outcome(self) -> Outcome:
        return self.state.outcome


def detect_outcome(board: Sequence[int]) -> Outcome:
    w = get_winner(board)
    if w != EMPTY:
        return Outcome(WON, w)
    if is_full(board):
        return Outcome(DRAW)
    return Outcome()


def new_game(starting_player: int = X) -> GameState:
    if starting_player not in PLAYERS:
        raise ValueError(f"Unknown starting player: {starting_player!r}")
    return GameState(turn=starting_player)


def validate_move(state: GameState, index) -> None:
    # bool is an int subclass; True would silently mean cell 1
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < BOARD_SIZE:
        raise InvalidIndex(index)
    if state.outcome.is_terminal:
        raise GameAlreadyTerminal(index)
    if state.board[index] != EMPTY:
        raise CellOccupied(index, state.board[index])


def apply_move(state: GameState, index, tally: Optional[ScoreTally] = None) -> MoveResult:
    """Place the side-to-move's mark at ``index``.

    Rejected moves return the original state untouched with the reason attached.
    When the move ends the round, the outcome is recorded in ``tally`` once.
    """
    try:
        validate_move(state, index)
    except MoveRejected as exc:
        logging.debug("Move rejected: %s", exc)
        return MoveResult(state=state, accepted=False, rejection=exc)

    cells = list(state.board)
    cells[index] = state.turn
    outcome = detect_outcome(cells)
    turn = state.turn if outcome.is_terminal else other_player(state.turn)
    new_state = replace(state, board=tuple(cells), turn=turn, outcome=outcome)
    if outcome.is_terminal:
        logging.debug("Round %d finished: %s", state.round_no, outcome.describe())
        if tally is not None:
            tally.record(outcome, state.round_id)
    return MoveResult(state=new_state, accepted=True)


def reset_round(state: GameState, starting_player: int) -> GameState:
    if starting_player not in PLAYERS:
        raise ValueError(f"Unknown starting player: {starting_player!r}")
    return GameState(turn=starting_player, round_no=state.round_no + 1)


def reset_scores(tally: ScoreTally, state: GameState, starting_player: int) -> Tuple[ScoreTally, GameState]:
    tally.reset()
    return tally, reset_round(state, starting_player)
