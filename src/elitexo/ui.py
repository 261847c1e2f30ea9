"""FastAPI-powered JSON API for playing EliteXO against a friend or the AI."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

import threading

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import MinimaxAI, Policy, hint
from .config import load_settings
from .game import TicTacToeGame
from .timer import TurnTimer

logger = logging.getLogger(__name__)

SETTINGS = load_settings()

Mode = Literal["pvp", "ai"]
Difficulty = Literal["easy", "medium", "hard"]

DIFFICULTY_POLICIES: Dict[str, Policy] = {
    "easy": Policy.RANDOM,
    "medium": Policy.BLENDED,
    "hard": Policy.OPTIMAL,
}
AI_PLAYER = "O"
AI_THINK_DELAY: float = SETTINGS.ai_delay_seconds
TURN_SECONDS: float = SETTINGS.turn_seconds
HINT_AFTER_SECONDS: float = SETTINGS.hint_after_seconds
MEDIUM_OPTIMAL_RATE: float = SETTINGS.medium_optimal_rate


@dataclass
class GameSession:
    """Container for an active game, its optional AI opponent and turn timer."""

    game: TicTacToeGame
    ai: Optional[MinimaxAI]
    timer: TurnTimer
    mode: str = "pvp"
    difficulty: Optional[str] = None
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="EliteXO",
    description="Tic-tac-toe with a minimax opponent, turn timer and hints",
)


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: Mode = Field(default="ai", description="Play a friend or the AI")
    difficulty: Difficulty = Field(
        default="hard", description="AI strength; ignored in pvp mode"
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(mode: str, difficulty: str) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    ai: Optional[MinimaxAI] = None
    if mode == "ai":
        ai = MinimaxAI(
            player=AI_PLAYER,
            policy=DIFFICULTY_POLICIES[difficulty],
            optimal_rate=MEDIUM_OPTIMAL_RATE,
        )
    session = GameSession(
        game=TicTacToeGame(),
        ai=ai,
        timer=TurnTimer(
            turn_seconds=TURN_SECONDS, hint_after_seconds=HINT_AFTER_SECONDS
        ),
        mode=mode,
        difficulty=difficulty if ai else None,
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s mode=%s difficulty=%s", session_id, mode, difficulty)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _is_ai_turn(session: GameSession) -> bool:
    return bool(
        session.ai
        and session.game.active
        and session.game.current_player == session.ai.player
    )


def _expire_turns(game_id: str, session: GameSession) -> Tuple[int, bool]:
    """Skip every turn whose timer ran out since the last request.

    Returns ``(skips, ai_due)``. Skipping stops early once the AI is to move.
    Caller must hold ``session.lock``.
    """
    game = session.game
    if not game.active or session.ai_pending:
        return 0, False

    missed = session.timer.turns_elapsed()
    skips = 0
    while skips < missed:
        skipped = game.current_player
        game.skip_turn()
        skips += 1
        logger.warning(
            "Game %s: turn of %s timed out and was skipped", game_id, skipped
        )
        if _is_ai_turn(session):
            break
    if not skips:
        return 0, False

    # Keep the countdown phase-aligned with the turns that actually ran out
    session.timer.advance(skips)
    if _is_ai_turn(session):
        session.ai_pending = True
        return skips, True
    return skips, False


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        try:
            if not session.ai or not _is_ai_turn(session):
                return
            game = session.game
            cell_index = session.ai.choose(game)
            game.play_move(cell_index)
            session.timer.restart()
            session.move_log.append(
                {"player": session.ai.player, "cellIndex": cell_index}
            )
            logger.info(
                "Game %s: AI %s played %d", game_id, session.ai.player, cell_index
            )
        finally:
            session.ai_pending = False


def _touch_session(
    game_id: str,
    session: GameSession,
    background_tasks: Optional[BackgroundTasks] = None,
) -> int:
    """Apply timed-out turns; return how many were skipped by this request."""
    with session.lock:
        skips, schedule_ai = _expire_turns(game_id, session)
    if schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)
    return skips


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        hint_due = game.active and session.timer.hint_due()

        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode,
            "difficulty": session.difficulty,
            "currentPlayer": game.current_player,
            "board": [c if c in ("X", "O") else "" for c in game.board],
            "winner": game.winner,
            "drawn": game.drawn,
            "active": game.active,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "timeLeft": round(session.timer.remaining(), 1) if game.active else 0.0,
            "hintDue": hint_due,
        }
        if hint_due:
            state["hint"] = hint(game.snapshot(), game.current_player)
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if not game.active:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if _is_ai_turn(session):
            raise HTTPException(status_code=400, detail="It is the AI's turn")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        session.timer.restart()

        session.move_log.append({"player": player, "cellIndex": cell_index})
        logger.info("Game %s: %s played %d", game_id, player, cell_index)

        should_schedule_ai = _is_ai_turn(session)
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    _touch_session(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    if _touch_session(game_id, session, background_tasks):
        # The move belongs to a turn that already ran out; any queued AI move must still run.
        return JSONResponse(
            status_code=400,
            content={"detail": "Turn timed out"},
            background=background_tasks,
        )
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}/hint")
def get_hint(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    _touch_session(game_id, session, background_tasks)
    with session.lock:
        game = session.game
        if not game.active:
            raise HTTPException(status_code=400, detail="Game already finished")
        return {
            "player": game.current_player,
            "cellIndex": hint(game.snapshot(), game.current_player),
        }
