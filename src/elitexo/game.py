"""Core rules and game state for EliteXO (classic 3x3 Tic-Tac-Toe)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import logging

Player = str  # "X" or "O"
Board = Sequence[str]

EMPTY = " "
PLAYERS: Tuple[Player, Player] = ("X", "O")

WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

logger = logging.getLogger(__name__)


class TerminalBoardError(ValueError):
    """Raised when a move is requested for a board that is already decided."""


# ---------- Rules ----------


def other(player: Player) -> Player:
    return "O" if player == "X" else "X"


def has_won(board: Board, player: Player) -> bool:
    """True iff one of the eight win patterns is fully held by ``player``."""
    return any(
        board[a] == player and board[b] == player and board[c] == player
        for a, b, c in WIN_PATTERNS
    )


def is_full(board: Board) -> bool:
    return all(c != EMPTY for c in board)


def empty_cells(board: Board) -> List[int]:
    """Indices of empty cells in ascending order."""
    return [i for i, c in enumerate(board) if c == EMPTY]


def winner(board: Board) -> Optional[Player]:
    for player in PLAYERS:
        if has_won(board, player):
            return player
    return None


def validate_board(board: Board) -> Tuple[str, ...]:
    """Return an immutable copy of ``board`` after checking its shape and marks."""
    cells = tuple(board)
    if len(cells) != 9:
        raise ValueError(f"Board must have 9 cells, got {len(cells)}")
    for c in cells:
        if c not in ("X", "O", EMPTY):
            raise ValueError(f"Invalid cell value {c!r}")
    return cells


def validate_player(player: Player) -> Player:
    if player not in PLAYERS:
        raise ValueError(f"Invalid player {player!r}")
    return player


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    """Mutable game state owned by the application layer.

    The rules functions above never see this object; they receive
    ``snapshot()`` copies instead.
    """

    board: List[str] = field(default_factory=lambda: [EMPTY] * 9)
    current_player: Player = "X"
    winner: Optional[Player] = None
    drawn: bool = False

    @property
    def active(self) -> bool:
        return self.winner is None and not self.drawn

    def available_moves(self) -> List[int]:
        if not self.active:
            return []
        return empty_cells(self.board)

    def play_move(self, index: int) -> None:
        """Place the current player's mark, then resolve win/draw or pass the turn."""
        if not self.active:
            raise ValueError("Game already finished")
        if not 0 <= index < 9:
            raise ValueError(f"Cell index {index} out of range")
        if self.board[index] != EMPTY:
            raise ValueError("Cell already occupied")

        player = self.current_player
        self.board[index] = player

        if has_won(self.board, player):
            self.winner = player
            logger.info("Player %s wins", player)
            return
        if is_full(self.board):
            self.drawn = True
            logger.info("Game drawn")
            return
        self.current_player = other(player)

    def skip_turn(self) -> None:
        if not self.active:
            raise ValueError("Game already finished")
        self.current_player = other(self.current_player)

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self.board)

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(
            board=self.board.copy(),
            current_player=self.current_player,
            winner=self.winner,
            drawn=self.drawn,
        )
