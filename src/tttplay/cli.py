from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, TextIO

from .arena import POLICY_NAMES, ArenaArgs, run_arena
from .board import detect_outcome
from .config import COMPUTER, HUMAN, SessionConfig, parse_delay, parse_opponent
from .game_basics import (
    MARK_SYMBOLS,
    format_board,
    is_valid_position,
    is_valid_state,
    parse_board,
    parse_player,
    side_to_move,
)
from .search import search
from .session import Session
from .solver import solve_state

PLAY_HELP = "Cells 0-8 to move, r=reset round, s=reset scores, m=toggle opponent, q=quit"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tttplay", description="Tic-tac-toe with a perfect computer opponent")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")

    p_play = sub.add_parser("play", help="Play an interactive game in the terminal")
    p_play.add_argument(
        "--opponent",
        choices=[HUMAN, COMPUTER],
        default=None,
        help="Opponent mode (default: TTTPLAY_OPPONENT or computer)",
    )
    p_play.add_argument("--human-mark", default=None, help="Your mark: x or o (default: x)")
    p_play.add_argument(
        "--delay", default=None, help="Seconds the computer 'thinks' before moving (default: 0.4)"
    )

    p_move = sub.add_parser("move", help="Ask the engine for its move on a board (9 digits, 0=empty,1=X,2=O)")
    p_move.add_argument("--board", required=True, help="Board string, e.g., 110220000")
    p_move.add_argument(
        "--player", default=None, help="Engine plays this mark (required when both marks have the same count)"
    )

    p_sol = sub.add_parser("solve", help="Solve a board with the reference solver from side-to-move")
    p_sol.add_argument("--board", required=True, help="Board string, e.g., 100020000")

    p_arena = sub.add_parser("arena", help="Pit two policies against each other")
    p_arena.add_argument("--x", dest="x_policy", choices=POLICY_NAMES, default="engine", help="Policy playing X")
    p_arena.add_argument("--o", dest="o_policy", choices=POLICY_NAMES, default="random", help="Policy playing O")
    p_arena.add_argument("--games", type=int, default=100, help="Number of rounds (default: 100)")
    p_arena.add_argument("--epsilon", type=float, default=0.1, help="Exploration rate for the epsilon policy")
    p_arena.add_argument("--seed", type=int, default=None, help="Seed for reproducibility")
    p_arena.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_arena.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs (for mlflow local backend)",
    )

    return p


def _render(session: Session, out: TextIO) -> None:
    snap = session.snapshot()
    scores = snap["scores"]
    print(format_board(snap["board"]), file=out)
    print(f"Score  X: {scores['X']}  O: {scores['O']}  Draw: {scores['Draw']}", file=out)
    if session.state.outcome.is_terminal:
        line = snap["winning_line"]
        suffix = f" (line {line})" if line else ""
        print(session.state.outcome.describe() + suffix, file=out)
    else:
        print(f"Current player: {MARK_SYMBOLS[snap['turn']]}", file=out)


def _run_computer_turns(session: Session, out: TextIO) -> None:
    while session.computer_to_move:
        session.begin_computer_move()
        print("Computer is thinking...", file=out)
        time.sleep(session.config.computer_delay_s)
        result = session.complete_computer_move()
        if result is not None and result.accepted:
            print(file=out)
            _render(session, out)


def run_play(config: SessionConfig, inp: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:
    session = Session(config)
    print(PLAY_HELP, file=out)
    _render(session, out)
    _run_computer_turns(session, out)
    while True:
        print("> ", end="", file=out, flush=True)
        line = inp.readline()
        if not line:
            break
        cmd = line.strip().lower()
        if not cmd:
            continue
        if cmd == "q":
            break
        if cmd == "r":
            session.reset_round()
        elif cmd == "s":
            session.reset_scores()
        elif cmd == "m":
            session.set_opponent_mode(HUMAN if session.mode == COMPUTER else COMPUTER)
            print(f"Opponent: {session.mode}", file=out)
        elif cmd.isdigit():
            result = session.select_cell(int(cmd))
            if not result.accepted:
                print(str(result.rejection), file=out)
                continue
        else:
            print(PLAY_HELP, file=out)
            continue
        _render(session, out)
        _run_computer_turns(session, out)
    return 0


def _load_board(raw: str, either_opener: bool = False) -> Optional[list]:
    try:
        b = parse_board(raw)
    except ValueError as exc:
        logging.error("%s", exc)
        return None
    valid = is_valid_position(b) if either_opener else is_valid_state(b)
    if not valid:
        logging.error("Board is not a valid reachable state.")
        return None
    return b


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("tttplay"))
        except Exception:
            print("unknown")
        return 0

    if ns.cmd == "play":
        try:
            config = SessionConfig.from_env()
            if ns.opponent is not None:
                config.opponent = parse_opponent(ns.opponent)
            if ns.human_mark is not None:
                config.human_mark = parse_player(ns.human_mark)
            if ns.delay is not None:
                config.computer_delay_s = parse_delay(ns.delay)
        except ValueError as exc:
            logging.error("%s", exc)
            return 2
        return run_play(config)

    if ns.cmd == "move":
        b = _load_board(ns.board, either_opener=True)
        if b is None:
            return 2
        to_move = side_to_move(b)
        if ns.player is None:
            if to_move is None:
                logging.error("Equal mark counts; pass --player to pick the side to move.")
                return 2
            player = to_move
        else:
            try:
                player = parse_player(ns.player)
            except ValueError as exc:
                logging.error("%s", exc)
                return 2
            if to_move is not None and player != to_move:
                logging.error("It is %s's turn on this board, not %s's.",
                              MARK_SYMBOLS[to_move], MARK_SYMBOLS[player])
                return 2
        if detect_outcome(b).is_terminal:
            logging.error("Board is already finished; no move to choose.")
            return 2
        res = search(b, player)
        logging.info("player=%d move=%d score=%d nodes=%d", player, res.move, res.score, res.nodes)
        return 0

    if ns.cmd == "solve":
        b = _load_board(ns.board)
        if b is None:
            return 2
        res = solve_state(tuple(b))
        logging.info(
            "value=%s plies=%s optimal=%s",
            res['value'],
            res['plies_to_end'],
            list(res['optimal_moves']),
        )
        return 0

    if ns.cmd == "arena":
        try:
            result = run_arena(ArenaArgs(
                x_policy=ns.x_policy,
                o_policy=ns.o_policy,
                games=ns.games,
                epsilon=ns.epsilon,
                seed=ns.seed,
                tracking=ns.tracking,
                log_dir=ns.log_dir,
            ))
        except ValueError as exc:
            logging.error("%s", exc)
            return 2
        s = result.summary()
        logging.info("x_wins=%d o_wins=%d draws=%d", s["x_wins"], s["o_wins"], s["draws"])
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
