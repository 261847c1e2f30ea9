"""Move selection for EliteXO: random, blended and exhaustive minimax policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple
import logging
import random

from .game import (
    Board,
    Player,
    TerminalBoardError,
    TicTacToeGame,
    empty_cells,
    has_won,
    other,
    validate_board,
    validate_player,
)

logger = logging.getLogger(__name__)

# Scores are always from the maximizer's ("O") point of view.
MAXIMIZER: Player = "O"
MINIMIZER: Player = "X"
WIN_SCORE, DRAW_SCORE, LOSS_SCORE = 10, 0, -10

DEFAULT_OPTIMAL_RATE = 0.6


class Policy(str, Enum):
    RANDOM = "random"
    BLENDED = "blended"
    OPTIMAL = "optimal"


@dataclass(frozen=True)
class SearchOutcome:
    index: Optional[int]  # None on terminal boards
    score: int


# Transposition table: (cells, side to move) -> (score, plies to terminal, index).
# Entries hold exact full-depth results, so they never change the chosen move.
_SEARCH_CACHE: Dict[
    Tuple[Tuple[str, ...], Player], Tuple[int, int, Optional[int]]
] = {}


# ---- public API ----


def minimax(board: Board, player: Player) -> SearchOutcome:
    """Full-depth minimax for ``player`` to move on ``board``.

    Children are tried in ascending index order. Among equally scored
    children the search prefers the quicker forced win, then the lowest
    index; draws and losses always fall back to the lowest index.
    """
    validate_player(player)
    cells = validate_board(board)
    score, plies, index = _search(cells, player)
    logger.debug(
        "minimax player=%s index=%s score=%s plies=%s", player, index, score, plies
    )
    return SearchOutcome(index=index, score=score)


def select_move(
    board: Board,
    player: Player,
    policy: Policy = Policy.OPTIMAL,
    *,
    rng: Optional[random.Random] = None,
    optimal_rate: float = DEFAULT_OPTIMAL_RATE,
) -> int:
    """Pick an empty cell on ``board`` for ``player`` under ``policy``.

    Raises TerminalBoardError when the board already has a winner or no
    empty cells; callers must check for game over first.
    """
    validate_player(player)
    cells = _require_open(board)
    if not 0.0 <= optimal_rate <= 1.0:
        raise ValueError(f"optimal_rate must be within [0, 1], got {optimal_rate}")
    source = rng if rng is not None else random

    policy = Policy(policy)
    if policy is Policy.BLENDED:
        policy = Policy.OPTIMAL if source.random() < optimal_rate else Policy.RANDOM

    if policy is Policy.RANDOM:
        return source.choice(empty_cells(cells))

    outcome = minimax(cells, player)
    assert outcome.index is not None
    return outcome.index


def hint(board: Board, player: Player) -> int:
    """Advisory optimal move for ``player``; ``board`` is never modified."""
    return select_move(board, player, Policy.OPTIMAL)


def clear_cache() -> None:
    _SEARCH_CACHE.clear()


def cache_size() -> int:
    return len(_SEARCH_CACHE)


@dataclass
class MinimaxAI:
    """Synthetic opponent bound to one side and one policy.

    The app keeps one per session:
      - MinimaxAI(player="O", policy=Policy.BLENDED)
      - choose(game) -> cell_index
    """

    player: Player
    policy: Policy = Policy.OPTIMAL
    optimal_rate: float = DEFAULT_OPTIMAL_RATE
    _rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, game: TicTacToeGame) -> int:
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")
        return select_move(
            game.snapshot(),
            self.player,
            self.policy,
            rng=self._rng,
            optimal_rate=self.optimal_rate,
        )


# ---- core search ----


def _require_open(board: Board) -> Tuple[str, ...]:
    cells = validate_board(board)
    if has_won(cells, "X") or has_won(cells, "O"):
        raise TerminalBoardError("Board already has a winner")
    if not empty_cells(cells):
        raise TerminalBoardError("No empty cells left")
    return cells


def _search(
    cells: Tuple[str, ...], player: Player
) -> Tuple[int, int, Optional[int]]:
    key = (cells, player)
    hit = _SEARCH_CACHE.get(key)
    if hit is not None:
        return hit

    # Terminal checks, in this order
    if has_won(cells, MINIMIZER):
        result: Tuple[int, int, Optional[int]] = (LOSS_SCORE, 0, None)
    elif has_won(cells, MAXIMIZER):
        result = (WIN_SCORE, 0, None)
    else:
        moves = empty_cells(cells)
        if not moves:
            result = (DRAW_SCORE, 0, None)
        else:
            maximizing = player == MAXIMIZER
            best: Optional[Tuple[int, int, Optional[int]]] = None
            for index in moves:
                # Each branch gets its own tuple; siblings never share state
                child = cells[:index] + (player,) + cells[index + 1 :]
                score, plies, _ = _search(child, other(player))
                candidate = (score, plies + 1, index)
                if best is None or _improves(candidate, best, maximizing):
                    best = candidate
            assert best is not None
            result = best

    _SEARCH_CACHE[key] = result
    return result


def _improves(
    candidate: Tuple[int, int, Optional[int]],
    best: Tuple[int, int, Optional[int]],
    maximizing: bool,
) -> bool:
    # Strict comparisons only: on a full tie the earlier (lower) index stays.
    score, plies, _ = candidate
    best_score, best_plies, _ = best
    if score != best_score:
        return score > best_score if maximizing else score < best_score
    if score == DRAW_SCORE:
        return False
    # Equal wins: the quicker forced line. Equal losses keep the earlier index.
    winning = score > 0 if maximizing else score < 0
    return winning and plies < best_plies
