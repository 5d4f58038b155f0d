import io
import subprocess
import sys
from pathlib import Path

import pytest

from tttplay.cli import main, run_play
from tttplay.config import HUMAN, SessionConfig


def _run_cli(args: list, cwd: Path, stdin: str = "") -> subprocess.CompletedProcess:
    exe = [sys.executable, "-m", "tttplay.cli"]
    return subprocess.run(exe + args, cwd=cwd, input=stdin, capture_output=True, text=True)


def test_cli_move_blocking_scenario(tmp_path: Path):
    r = _run_cli(["move", "--board", "110220000", "--player", "o"], cwd=tmp_path)
    assert r.returncode == 0
    s = r.stdout + r.stderr
    assert "move=2" in s


def test_cli_solve(tmp_path: Path):
    r = _run_cli(["solve", "--board", "100020000"], cwd=tmp_path)
    assert r.returncode == 0
    s = r.stdout + r.stderr
    assert "value=0" in s and "plies=" in s and "optimal=" in s


@pytest.mark.parametrize("bad", ["abc", "012345678", "0123456789", "12345678x", "222000000"])
def test_cli_error_invalid_boards(tmp_path: Path, bad: str):
    r = _run_cli(["move", "--board", bad], cwd=tmp_path)
    assert r.returncode == 2
    r = _run_cli(["solve", "--board", bad], cwd=tmp_path)
    assert r.returncode == 2


@pytest.mark.parametrize(
    "board,player",
    [
        ("000020000", "x"),
        ("000020000", None),
        ("100020020", None),
        ("120020100", "o"),
    ],
)
def test_cli_move_on_o_opened_board(tmp_path: Path, board: str, player):
    args = ["move", "--board", board] + ([] if player is None else ["--player", player])
    r = _run_cli(args, cwd=tmp_path)
    assert r.returncode == 0, r.stderr
    assert "move=" in r.stdout + r.stderr


@pytest.mark.parametrize(
    "args",
    [
        ["--board", "000000000"],
        ["--board", "000020000", "--player", "o"],
        ["--board", "220010000", "--player", "o"],
    ],
)
def test_cli_move_rejects_ambiguous_or_wrong_side(tmp_path: Path, args: list):
    r = _run_cli(["move"] + args, cwd=tmp_path)
    assert r.returncode == 2


def test_cli_move_on_finished_board(tmp_path: Path):
    r = _run_cli(["move", "--board", "111220000"], cwd=tmp_path)
    assert r.returncode == 2


def test_cli_arena(tmp_path: Path):
    r = _run_cli(["arena", "--x", "tactical", "--o", "random", "--games", "10", "--seed", "3"], cwd=tmp_path)
    assert r.returncode == 0
    assert "x_wins=" in r.stdout + r.stderr


def test_cli_play_human_mode_scripted(tmp_path: Path):
    r = _run_cli(["play", "--opponent", "human"], cwd=tmp_path, stdin="0\n3\n1\n4\n2\nq\n")
    assert r.returncode == 0
    assert "Player X wins!" in r.stdout
    assert "Score  X: 1  O: 0  Draw: 0" in r.stdout


def test_cli_help_smoke(tmp_path: Path):
    for args in (["--help"], ["play", "--help"], ["move", "--help"], ["solve", "--help"], ["arena", "--help"]):
        r = _run_cli(args, cwd=tmp_path)
        assert r.returncode == 0
        assert r.stdout or r.stderr


def test_main_rejects_bad_env(monkeypatch):
    monkeypatch.setenv("TTTPLAY_COMPUTER_DELAY", "later")
    assert main(["play"]) == 2


def test_run_play_in_process():
    out = io.StringIO()
    inp = io.StringIO("4\n4\n9\nhello\nr\nq\n")
    config = SessionConfig(opponent=HUMAN, computer_delay_s=0)
    assert run_play(config, inp, out) == 0
    text = out.getvalue()
    assert "Cell 4 is already occupied" in text
    assert "Invalid cell index 9" in text
    assert "Cells 0-8 to move" in text


def test_run_play_computer_replies():
    out = io.StringIO()
    inp = io.StringIO("4\nq\n")
    config = SessionConfig(computer_delay_s=0)
    run_play(config, inp, out)
    text = out.getvalue()
    assert "Computer is thinking..." in text
    # the computer answered the centre with a corner
    assert " O | 1 | 2" in text
