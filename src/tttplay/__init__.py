"""tttplay package.

Board model, exhaustive minimax engine, session controller, a reference
solver for cross-checking, and a small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import GameState, Outcome, ScoreTally, apply_move, detect_outcome, reset_round, reset_scores
from .search import choose_move, search
from .session import Session
from .solver import solve_state

__all__ = [
    "GameState",
    "Outcome",
    "ScoreTally",
    "apply_move",
    "detect_outcome",
    "reset_round",
    "reset_scores",
    "choose_move",
    "search",
    "Session",
    "solve_state",
]
