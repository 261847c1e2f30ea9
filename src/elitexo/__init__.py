"""EliteXO package exposing the rules engine and move selection.

The web API lives in :mod:`elitexo.ui` and reads its settings when imported,
so it is not pulled in here.
"""

from .ai import MinimaxAI, Policy, SearchOutcome, hint, minimax, select_move
from .game import TicTacToeGame, empty_cells, has_won, is_full

__all__ = [
    "MinimaxAI",
    "Policy",
    "SearchOutcome",
    "TicTacToeGame",
    "empty_cells",
    "has_won",
    "hint",
    "is_full",
    "minimax",
    "select_move",
]
