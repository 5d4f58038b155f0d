import numpy as np
import pytest

from tttplay.arena import (
    ArenaArgs,
    get_policy,
    make_epsilon_policy,
    play_game,
    reference_policy,
    run_arena,
    tactical_policy,
)
from tttplay.board import ScoreTally, new_game
from tttplay.game_basics import O


def test_engine_never_loses_to_random():
    res = run_arena(ArenaArgs(x_policy="engine", o_policy="random", games=20, seed=7))
    assert res.tally.games == 20
    assert res.tally.wins_o == 0
    assert len(res.outcomes) == 20


def test_engine_vs_reference_always_draws():
    res = run_arena(ArenaArgs(x_policy="reference", o_policy="engine", games=6, seed=1))
    assert res.tally.draws == 6


def test_same_seed_same_games():
    a = run_arena(ArenaArgs(x_policy="random", o_policy="tactical", games=30, seed=123))
    b = run_arena(ArenaArgs(x_policy="random", o_policy="tactical", games=30, seed=123))
    assert a.final_boards == b.final_boards
    assert a.summary()["x_wins"] == b.summary()["x_wins"]


def test_rounds_alternate_opening_mark():
    res = run_arena(ArenaArgs(x_policy="random", o_policy="random", games=4, seed=0))
    boards = res.final_boards
    # X opened games 0 and 2, so X holds at least as many cells; O opened 1 and 3
    for i, key in enumerate(boards):
        x, o = key.count("1"), key.count("2")
        if i % 2 == 0:
            assert x in (o, o + 1)
        else:
            assert o in (x, x + 1)


def test_play_game_records_once():
    tally = ScoreTally()
    rng = np.random.default_rng(0)
    final = play_game(get_policy("random"), get_policy("random"), rng, tally)
    assert final.outcome.is_terminal
    assert tally.games == 1


def test_play_game_shares_tally_across_fresh_games():
    tally = ScoreTally()
    rng = np.random.default_rng(0)
    for _ in range(3):
        play_game(get_policy("random"), get_policy("random"), rng, tally)
    assert tally.games == 3


def test_play_game_raises_on_illegal_policy():
    def bad(board, player, rng):
        return 0

    with pytest.raises(RuntimeError):
        play_game(bad, bad, np.random.default_rng(0))


def test_tactical_policy_wins_then_blocks():
    rng = np.random.default_rng(0)
    assert tactical_policy([1, 1, 0, 2, 2, 0, 0, 0, 0], O, rng) == 5
    assert tactical_policy([1, 1, 0, 0, 2, 0, 0, 0, 0], O, rng) == 2


def test_reference_policy_handles_o_opening():
    rng = np.random.default_rng(0)
    # O opened at 4, X replied at 0, O to move
    mv = reference_policy([1, 0, 0, 0, 2, 0, 0, 0, 0], O, rng)
    assert mv in (1, 2, 3, 5, 6, 7, 8)
    state = new_game(O)
    final = play_game(get_policy("reference"), get_policy("engine"), rng, state=state)
    assert final.outcome.status == "draw"


def test_bad_arguments():
    with pytest.raises(ValueError):
        get_policy("oracle")
    with pytest.raises(ValueError):
        make_epsilon_policy(1.5)
    with pytest.raises(ValueError):
        run_arena(ArenaArgs(games=0))


def test_epsilon_zero_is_engine():
    rng = np.random.default_rng(0)
    pol = make_epsilon_policy(0.0)
    assert pol([1, 1, 0, 0, 2, 0, 0, 0, 0], O, rng) == 2
