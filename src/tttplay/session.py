"""
Session controller: the seam between the board model, the search engine and a view.

A Session is created once per play session. It owns the current GameState,
the ScoreTally (cleared only by reset_scores) and the engine-busy flag a view
uses to disable input while the computer's move is pending.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .board import (
    GameState,
    MoveResult,
    ScoreTally,
    apply_move,
    new_game,
    reset_round as _reset_round,
    reset_scores as _reset_scores,
)
from .config import COMPUTER, SessionConfig, parse_opponent
from .errors import EngineBusy, SearchInvariantViolation
from .game_basics import other_player, winning_line
from .search import choose_move


class Session:
    def __init__(self, config: Optional[SessionConfig] = None) -> None:
        self.config = config or SessionConfig()
        self.mode = self.config.opponent
        self.tally = ScoreTally()
        self.round_starter = self.config.first_player
        self.state: GameState = new_game(self.round_starter)
        self.engine_busy = False
        self._pending_round: Optional[int] = None

    @property
    def computer_mark(self) -> int:
        return self.config.computer_mark

    @property
    def computer_to_move(self) -> bool:
        return (
            self.mode == COMPUTER
            and not self.state.outcome.is_terminal
            and self.state.turn == self.computer_mark
        )

    def select_cell(self, index) -> MoveResult:
        """Inbound view event: the human picked a cell."""
        if self.engine_busy or self.computer_to_move:
            logging.debug("Cell %r ignored: computer to move", index)
            return MoveResult(state=self.state, accepted=False, rejection=EngineBusy(index))
        return self._apply(index)

    def begin_computer_move(self) -> None:
        """Lock input ahead of the computer's move."""
        if not self.computer_to_move:
            raise SearchInvariantViolation("It is not the computer's turn")
        self.engine_busy = True
        self._pending_round = self.state.round_no

    def complete_computer_move(self) -> Optional[MoveResult]:
        """Search, apply and unlock. Returns None if the round was reset meanwhile."""
        if not self.engine_busy:
            # unlocked by a reset while the view was waiting
            return None
        try:
            if self._pending_round != self.state.round_no or not self.computer_to_move:
                logging.debug("Dropping stale computer move for round %s", self._pending_round)
                return None
            index = choose_move(self.state.board, self.computer_mark)
            return self._apply(index)
        finally:
            self._unlock()

    def play_computer_move(self) -> Optional[MoveResult]:
        self.begin_computer_move()
        return self.complete_computer_move()

    def set_opponent_mode(self, mode: str) -> None:
        self.mode = parse_opponent(mode)
        logging.info("Opponent mode set to %s", self.mode)
        self.reset_round()

    def reset_round(self) -> None:
        self.state = _reset_round(self.state, self._next_starter())
        self._unlock()

    def reset_scores(self) -> None:
        _, self.state = _reset_scores(self.tally, self.state, self._next_starter())
        self._unlock()

    def snapshot(self) -> Dict[str, Any]:
        outcome = self.state.outcome
        line = winning_line(self.state.board)
        return {
            "board": list(self.state.board),
            "turn": self.state.turn,
            "status": outcome.status,
            "winner": outcome.winner,
            "winning_line": list(line) if line else None,
            "scores": self.tally.as_dict(),
            "mode": self.mode,
            "computer_mark": self.computer_mark,
            "engine_busy": self.engine_busy,
            "round": self.state.round_no,
        }

    def _apply(self, index) -> MoveResult:
        result = apply_move(self.state, index, self.tally)
        self.state = result.state
        if result.accepted and result.outcome.is_terminal:
            logging.info("%s Score X=%d O=%d Draw=%d", result.outcome.describe(),
                         self.tally.wins_x, self.tally.wins_o, self.tally.draws)
        return result

    def _next_starter(self) -> int:
        # computer mode rotates the opening move between rounds
        if self.mode == COMPUTER:
            self.round_starter = other_player(self.round_starter)
        return self.round_starter

    def _unlock(self) -> None:
        self.engine_busy = False
        self._pending_round = None
