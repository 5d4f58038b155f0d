"""Session configuration.

Environment-first: every field can be overridden through a TTTPLAY_* variable,
and the CLI overrides the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .game_basics import X, other_player, parse_player

HUMAN = "human"
COMPUTER = "computer"
OPPONENT_MODES = (HUMAN, COMPUTER)


def parse_opponent(raw: str) -> str:
    mode = str(raw).strip().lower()
    if mode not in OPPONENT_MODES:
        raise ValueError(f"Unknown opponent mode: {raw!r}. Use human or computer.")
    return mode


def parse_delay(raw: str) -> float:
    try:
        delay = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Computer delay must be a number of seconds, got {raw!r}") from None
    if delay < 0:
        raise ValueError(f"Computer delay must be >= 0, got {delay}")
    return delay


@dataclass
class SessionConfig:
    opponent: str = COMPUTER
    human_mark: int = X
    first_player: int = X
    # thinking delay applied by the view between locking input and moving
    computer_delay_s: float = 0.4

    def __post_init__(self) -> None:
        self.opponent = parse_opponent(self.opponent)
        # validates both marks
        other_player(self.human_mark)
        other_player(self.first_player)
        if self.computer_delay_s < 0:
            raise ValueError(f"Computer delay must be >= 0, got {self.computer_delay_s}")

    @property
    def computer_mark(self) -> int:
        return other_player(self.human_mark)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SessionConfig":
        env = os.environ if env is None else env
        kwargs = {}
        if env.get("TTTPLAY_OPPONENT"):
            kwargs["opponent"] = parse_opponent(env["TTTPLAY_OPPONENT"])
        if env.get("TTTPLAY_HUMAN_MARK"):
            kwargs["human_mark"] = parse_player(env["TTTPLAY_HUMAN_MARK"])
        if env.get("TTTPLAY_FIRST_PLAYER"):
            kwargs["first_player"] = parse_player(env["TTTPLAY_FIRST_PLAYER"])
        if env.get("TTTPLAY_COMPUTER_DELAY"):
            kwargs["computer_delay_s"] = parse_delay(env["TTTPLAY_COMPUTER_DELAY"])
        return cls(**kwargs)
