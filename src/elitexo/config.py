"""Environment-driven settings for the EliteXO server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar
import os

T = TypeVar("T")

PREFIX = "ELITEXO_"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # Share of "medium" AI moves that come from the optimal search
    medium_optimal_rate: float = 0.6
    turn_seconds: float = 30.0
    hint_after_seconds: float = 15.0
    ai_delay_seconds: float = 0.6


def _read(
    env: Mapping[str, str], name: str, parse: Callable[[str], T], default: T
) -> T:
    raw = env.get(PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid value for {PREFIX + name}: {raw!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``env`` (defaults to ``os.environ``)."""
    env = os.environ if env is None else env
    defaults = Settings()
    settings = Settings(
        host=_read(env, "HOST", str, defaults.host),
        port=_read(env, "PORT", int, defaults.port),
        log_level=_read(env, "LOG_LEVEL", str.upper, defaults.log_level),
        medium_optimal_rate=_read(
            env, "MEDIUM_OPTIMAL_RATE", float, defaults.medium_optimal_rate
        ),
        turn_seconds=_read(env, "TURN_SECONDS", float, defaults.turn_seconds),
        hint_after_seconds=_read(
            env, "HINT_AFTER_SECONDS", float, defaults.hint_after_seconds
        ),
        ai_delay_seconds=_read(
            env, "AI_DELAY_SECONDS", float, defaults.ai_delay_seconds
        ),
    )

    if not 0.0 <= settings.medium_optimal_rate <= 1.0:
        raise ValueError(f"{PREFIX}MEDIUM_OPTIMAL_RATE must be within [0, 1]")
    if settings.turn_seconds <= 0:
        raise ValueError(f"{PREFIX}TURN_SECONDS must be positive")
    if not 0 <= settings.hint_after_seconds <= settings.turn_seconds:
        raise ValueError(
            f"{PREFIX}HINT_AFTER_SECONDS must be between 0 and {PREFIX}TURN_SECONDS"
        )
    if settings.ai_delay_seconds < 0:
        raise ValueError(f"{PREFIX}AI_DELAY_SECONDS must not be negative")
    return settings
