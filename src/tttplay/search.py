"""
Exhaustive minimax move selection for the computer player.

Scores are from the computer's point of view: +1 it has a line, -1 the
opponent has one, 0 otherwise. The whole remaining game tree is searched with
no pruning and no cache, so the chosen move is always game-theoretically
optimal. Ties at the root keep the lowest empty index.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .errors import SearchInvariantViolation
from .game_basics import BOARD_SIZE, EMPTY, PLAYERS, get_winner, is_full, other_player


@dataclass
class SearchResult:
    move: int
    score: int
    nodes: int
    scores: Dict[int, int] = field(default_factory=dict)


def evaluate(board: Sequence[int], ai_player: int) -> int:
    w = get_winner(board)
    if w == EMPTY:
        return 0
    return 1 if w == ai_player else -1


def _minimax(cells: List[int], maximizing: bool, ai_player: int, opponent: int) -> Tuple[int, int]:
    score = evaluate(cells, ai_player)
    if score != 0 or EMPTY not in cells:
        return score, 1

    mark = ai_player if maximizing else opponent
    best = -2 if maximizing else 2
    nodes = 1
    for i in range(BOARD_SIZE):
        if cells[i] != EMPTY:
            continue
        cells[i] = mark
        try:
            child, child_nodes = _minimax(cells, not maximizing, ai_player, opponent)
        finally:
            cells[i] = EMPTY
        nodes += child_nodes
        if maximizing:
            best = max(best, child)
        else:
            best = min(best, child)
    return best, nodes


def minimax(board: Sequence[int], maximizing: bool, ai_player: int) -> int:
    """Value of ``board`` for ``ai_player`` with the given side to place next."""
    cells = list(board)
    score, _ = _minimax(cells, maximizing, ai_player, other_player(ai_player))
    return score


def _check_preconditions(board: Sequence[int], ai_player: int) -> None:
    if ai_player not in PLAYERS:
        raise SearchInvariantViolation(f"Unknown AI player: {ai_player!r}")
    if len(board) != BOARD_SIZE:
        raise SearchInvariantViolation(f"Board must have {BOARD_SIZE} cells, got {len(board)}")
    if is_full(board):
        raise SearchInvariantViolation("Search invoked on a full board")
    if get_winner(board) != EMPTY:
        raise SearchInvariantViolation("Search invoked on a finished board")


def search(board: Sequence[int], ai_player: int) -> SearchResult:
    _check_preconditions(board, ai_player)
    opponent = other_player(ai_player)
    cells = list(board)

    best_move = -1
    best_score = -2
    nodes = 0
    scores: Dict[int, int] = {}
    for i in range(BOARD_SIZE):
        if cells[i] != EMPTY:
            continue
        cells[i] = ai_player
        try:
            score, sub_nodes = _minimax(cells, False, ai_player, opponent)
        finally:
            cells[i] = EMPTY
        nodes += sub_nodes
        scores[i] = score
        if score > best_score:
            best_score = score
            best_move = i

    logging.debug(
        "Search for player %d evaluated %d positions. Best move: %d (score: %d)",
        ai_player, nodes, best_move, best_score,
    )
    return SearchResult(move=best_move, score=best_score, nodes=nodes, scores=scores)


def choose_move(board: Sequence[int], ai_player: int) -> int:
    return search(board, ai_player).move
