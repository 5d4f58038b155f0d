"""
Self-play arena: pit move policies against each other through the board model.

Policies:
- engine: exhaustive minimax search (always optimal).
- reference: the memoized reference solver, random among value-preserving moves.
- random: uniform over legal moves.
- epsilon: random with probability epsilon, engine otherwise.
- tactical: win if possible, else block, else random.

Rounds alternate the opening mark, so each side opens half of the games.
Randomness comes from one seeded numpy Generator per run.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from .board import GameState, Outcome, ScoreTally, apply_move, new_game, reset_round
from .game_basics import O, X, legal_moves, other_player, serialize_board
from .search import choose_move
from .solver import value_preserving_moves
from .tactics import blocking_moves, immediate_winning_moves
from .tracking import log_metrics, log_params, maybe_mlflow_run

Policy = Callable[[List[int], int, np.random.Generator], int]


@lru_cache(maxsize=None)
def _engine_move(board_t: tuple, player: int) -> int:
    # the engine is deterministic, so repeated positions are looked up
    return choose_move(board_t, player)


def engine_policy(board: List[int], player: int, rng: np.random.Generator) -> int:
    return _engine_move(tuple(board), player)


def reference_policy(board: List[int], player: int, rng: np.random.Generator) -> int:
    # the solver infers the side to move from counts (X opens); swap labels when O opened
    if player != (X if board.count(X) == board.count(O) else O):
        board = [0 if v == 0 else other_player(v) for v in board]
    return int(rng.choice(value_preserving_moves(tuple(board))))


def random_policy(board: List[int], player: int, rng: np.random.Generator) -> int:
    return int(rng.choice(legal_moves(board)))


def tactical_policy(board: List[int], player: int, rng: np.random.Generator) -> int:
    wins = immediate_winning_moves(board, player)
    if wins:
        return wins[0]
    blocks = blocking_moves(board, player)
    if blocks:
        return blocks[0]
    return random_policy(board, player, rng)


def make_epsilon_policy(epsilon: float) -> Policy:
    if not 0.0 <= epsilon <= 1.0:
        raise ValueError(f"Epsilon out of range [0,1]: {epsilon}")

    def epsilon_policy(board: List[int], player: int, rng: np.random.Generator) -> int:
        if rng.random() < epsilon:
            return random_policy(board, player, rng)
        return engine_policy(board, player, rng)

    return epsilon_policy


POLICY_NAMES = ("engine", "reference", "random", "epsilon", "tactical")


def get_policy(name: str, epsilon: float = 0.1) -> Policy:
    if name == "engine":
        return engine_policy
    if name == "reference":
        return reference_policy
    if name == "random":
        return random_policy
    if name == "epsilon":
        return make_epsilon_policy(epsilon)
    if name == "tactical":
        return tactical_policy
    raise ValueError(f"Unknown policy: {name!r}. Choose from {', '.join(POLICY_NAMES)}")


def play_game(
    x_policy: Policy,
    o_policy: Policy,
    rng: np.random.Generator,
    tally: Optional[ScoreTally] = None,
    state: Optional[GameState] = None,
) -> GameState:
    """Play one round to the end and return the final state."""
    state = state or new_game(X)
    policies = {X: x_policy, O: o_policy}
    while not state.outcome.is_terminal:
        idx = policies[state.turn](list(state.board), state.turn, rng)
        result = apply_move(state, idx, tally)
        if not result.accepted:
            raise RuntimeError(f"Policy for player {state.turn} chose an illegal move: {result.rejection}")
        state = result.state
    return state


@dataclass
class ArenaArgs:
    x_policy: str = "engine"
    o_policy: str = "random"
    games: int = 100
    epsilon: float = 0.1
    seed: Optional[int] = None
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


@dataclass
class ArenaResult:
    args: ArenaArgs
    tally: ScoreTally
    outcomes: List[Outcome] = field(default_factory=list)
    final_boards: List[str] = field(default_factory=list)
    elapsed_s: float = 0.0

    def summary(self) -> Dict[str, object]:
        return {
            "x_policy": self.args.x_policy,
            "o_policy": self.args.o_policy,
            "games": self.tally.games,
            "x_wins": self.tally.wins_x,
            "o_wins": self.tally.wins_o,
            "draws": self.tally.draws,
            "elapsed_s": round(self.elapsed_s, 4),
        }


def run_arena(args: ArenaArgs) -> ArenaResult:
    if args.games < 1:
        raise ValueError(f"games must be >= 1, got {args.games}")
    x_policy = get_policy(args.x_policy, args.epsilon)
    o_policy = get_policy(args.o_policy, args.epsilon)
    rng = np.random.default_rng(args.seed)
    result = ArenaResult(args=args, tally=ScoreTally())

    with maybe_mlflow_run(args.tracking == "mlflow", run_name="arena", log_dir=args.log_dir):
        log_params({
            "x_policy": args.x_policy,
            "o_policy": args.o_policy,
            "games": args.games,
            "epsilon": args.epsilon,
            "seed": args.seed,
        })
        t0 = time.perf_counter()
        starter = X
        state = new_game(starter)
        for g in range(args.games):
            if g:
                starter = other_player(starter)
                state = reset_round(state, starter)
            final = play_game(x_policy, o_policy, rng, result.tally, state)
            result.outcomes.append(final.outcome)
            result.final_boards.append(serialize_board(final.board))
            logging.debug("game=%d opener=%d board=%s %s", g, starter,
                          serialize_board(final.board), final.outcome.describe())
            state = final
        result.elapsed_s = time.perf_counter() - t0
        log_metrics({
            "x_wins": float(result.tally.wins_x),
            "o_wins": float(result.tally.wins_o),
            "draws": float(result.tally.draws),
            "elapsed_s": result.elapsed_s,
        })

    logging.info("arena %s", result.summary())
    return result
