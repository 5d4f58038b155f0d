"""Exhaustive check: the engine never loses, whoever opens, against any line of play."""
from typing import Dict, Tuple

import pytest

from tttplay.board import WON, GameState, apply_move, new_game
from tttplay.game_basics import O, X, legal_moves
from tttplay.search import choose_move


@pytest.fixture(scope="module")
def engine_cache() -> Dict[Tuple[tuple, int], int]:
    return {}


def _engine(cache, board, player):
    key = (tuple(board), player)
    if key not in cache:
        cache[key] = choose_move(board, player)
    return cache[key]


def _explore(state: GameState, engine_mark: int, cache, stats: Dict[str, int]) -> None:
    if state.outcome.is_terminal:
        if state.outcome.status == WON:
            assert state.outcome.winner == engine_mark, state.board
            stats["engine_wins"] += 1
        else:
            stats["draws"] += 1
        return
    if state.turn == engine_mark:
        res = apply_move(state, _engine(cache, state.board, engine_mark))
        assert res.accepted
        _explore(res.state, engine_mark, cache, stats)
        return
    for mv in legal_moves(state.board):
        _explore(apply_move(state, mv).state, engine_mark, cache, stats)


@pytest.mark.parametrize("engine_mark,opener", [(O, X), (X, X), (O, O), (X, O)])
def test_engine_never_loses_against_any_opponent_line(engine_mark, opener, engine_cache):
    stats = {"engine_wins": 0, "draws": 0}
    _explore(new_game(opener), engine_mark, engine_cache, stats)
    assert stats["draws"] > 0
    # weak replies get punished
    assert stats["engine_wins"] > 0


def test_engine_self_play_is_a_draw(engine_cache):
    state = new_game(X)
    while not state.outcome.is_terminal:
        state = apply_move(state, _engine(engine_cache, state.board, state.turn)).state
    assert state.outcome.status == "draw"
