"""
One-ply tactics: immediate wins and blocks.
Used by the tactical arena opponent; far weaker than the full search.
"""
from typing import List, Sequence

from .game_basics import EMPTY, get_winner, other_player


def immediate_winning_moves(board: Sequence[int], player: int) -> List[int]:
    wins: List[int] = []
    for i, v in enumerate(board):
        if v != EMPTY:
            continue
        b = list(board)
        b[i] = player
        if get_winner(b) == player:
            wins.append(i)
    return wins


def blocking_moves(board: Sequence[int], player: int) -> List[int]:
    """Cells where ``player`` must play to stop the opponent completing a line."""
    return immediate_winning_moves(board, other_player(player))
