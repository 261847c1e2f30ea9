"""Per-turn countdown used by the web app to surface hints and skip stale turns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable
import time


@dataclass
class TurnTimer:
    """Monotonic countdown for a single turn.

    Nothing runs in the background: callers poll ``hint_due()`` and
    ``expired()`` whenever they touch the game.
    """

    turn_seconds: float = 30.0
    hint_after_seconds: float = 15.0
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    started_at: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.turn_seconds <= 0:
            raise ValueError("turn_seconds must be positive")
        if not 0 <= self.hint_after_seconds <= self.turn_seconds:
            raise ValueError("hint_after_seconds must be within the turn length")
        self.restart()

    def restart(self) -> None:
        self.started_at = self.clock()

    def advance(self, turns: int) -> None:
        """Move the start forward by ``turns`` whole turns, keeping the remainder."""
        self.started_at += turns * self.turn_seconds

    def turns_elapsed(self) -> int:
        return int(self.elapsed() // self.turn_seconds)

    def elapsed(self) -> float:
        return max(0.0, self.clock() - self.started_at)

    def remaining(self) -> float:
        return max(0.0, self.turn_seconds - self.elapsed())

    def hint_due(self) -> bool:
        return self.elapsed() >= self.hint_after_seconds

    def expired(self) -> bool:
        return self.elapsed() >= self.turn_seconds
