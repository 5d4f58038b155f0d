"""
Reference solver (negamax with memoization), from the side-to-move perspective.

Independent of the search engine: positions are tuples, the side to move is
inferred from piece counts (X opens), and results are cached. Used to
cross-check the engine and by the CLI.

Tie-break policy for ``optimal_moves``:
- Prefer win over draw over loss.
- Among wins and draws, prefer fewer plies to termination.
- Among losses, prefer more plies (delay the loss).
"""
from collections import deque
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from .game_basics import current_player, get_winner, is_draw, legal_moves, serialize_board


def _child(board_t: tuple, idx: int, player: int) -> tuple:
    lst = list(board_t)
    lst[idx] = player
    return tuple(lst)


def _rank(q: int, dtt: int) -> Tuple[int, int]:
    # larger is better
    return (q, -dtt if q >= 0 else dtt)


def _terminal(value: int) -> Dict:
    return {
        'value': value,
        'plies_to_end': 0,
        'optimal_moves': tuple(),
        'q_values': tuple([None] * 9),
        'dtt_action': tuple([None] * 9),
    }


@lru_cache(maxsize=None)
def solve_state(board_t: tuple) -> Dict:
    if get_winner(board_t) != 0:
        # the side to move has just been beaten
        return _terminal(-1)
    if is_draw(board_t):
        return _terminal(0)

    p = current_player(board_t)
    q_vals: List[Optional[int]] = [None] * 9
    dtt_action: List[Optional[int]] = [None] * 9
    for mv in legal_moves(board_t):
        child = solve_state(_child(board_t, mv, p))
        q_vals[mv] = -child['value']
        dtt_action[mv] = 1 + child['plies_to_end']

    ranked = {mv: _rank(q_vals[mv], dtt_action[mv]) for mv in legal_moves(board_t)}
    best = max(ranked.values())
    best_moves = tuple(sorted(mv for mv, r in ranked.items() if r == best))
    return {
        'value': best[0],
        'plies_to_end': dtt_action[best_moves[0]],
        'optimal_moves': best_moves,
        'q_values': tuple(q_vals),
        'dtt_action': tuple(dtt_action),
    }


def value_preserving_moves(board_t: tuple) -> Tuple[int, ...]:
    """Moves that keep the game-theoretic value, ignoring distance to the end."""
    s = solve_state(board_t)
    return tuple(i for i, q in enumerate(s['q_values']) if q is not None and q == s['value'])


def solve_all_reachable() -> Dict[str, Dict]:
    """Enumerate and solve all states reachable from the empty board."""
    start = tuple([0] * 9)
    q = deque([start])
    seen = {start}
    order = []
    while q:
        s = q.popleft()
        order.append(s)
        if get_winner(s) != 0 or is_draw(s):
            continue
        p = current_player(s)
        for mv in legal_moves(s):
            child = _child(s, mv, p)
            if child not in seen:
                seen.add(child)
                q.append(child)
    return {serialize_board(s): solve_state(s) for s in order}
