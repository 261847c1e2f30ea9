"""Unit tests for EliteXO rules and game state."""

import pytest

from elitexo.game import (
    WIN_PATTERNS,
    TicTacToeGame,
    empty_cells,
    has_won,
    is_full,
    validate_board,
    winner,
)

_ = " "
DRAWN_BOARD = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]


@pytest.mark.parametrize("pattern", WIN_PATTERNS)
def test_each_pattern_wins(pattern):
    board = [_] * 9
    for i in pattern:
        board[i] = "O"
    assert has_won(board, "O")
    assert not has_won(board, "X")
    assert winner(board) == "O"


def test_two_in_a_row_is_not_a_win():
    board = ["X", "X", _, "O", "O", _, _, _, _]
    assert not has_won(board, "X")
    assert not has_won(board, "O")
    assert winner(board) is None


def test_empty_cells_ascending():
    board = [_, "X", _, "O", _, _, "X", _, "O"]
    assert empty_cells(board) == [0, 2, 4, 5, 7]
    assert empty_cells([_] * 9) == list(range(9))


def test_full_board_without_winner_is_a_draw():
    assert is_full(DRAWN_BOARD)
    assert empty_cells(DRAWN_BOARD) == []
    assert not has_won(DRAWN_BOARD, "X")
    assert not has_won(DRAWN_BOARD, "O")


def test_is_full_matches_empty_cells():
    boards = [[_] * 9, DRAWN_BOARD, ["X", "O", "X", "X", "O", "O", "O", "X", _]]
    for board in boards:
        assert is_full(board) == (empty_cells(board) == [])


def test_validate_board_rejects_bad_input():
    with pytest.raises(ValueError):
        validate_board([_] * 8)
    with pytest.raises(ValueError):
        validate_board([_] * 8 + ["Z"])
    assert validate_board([_] * 9) == (_,) * 9


def test_play_move_alternates_players():
    game = TicTacToeGame()
    game.play_move(4)
    assert game.board[4] == "X"
    assert game.current_player == "O"
    assert game.available_moves() == [0, 1, 2, 3, 5, 6, 7, 8]


def test_occupied_cell_rejected():
    game = TicTacToeGame()
    game.play_move(0)
    with pytest.raises(ValueError):
        game.play_move(0)
    with pytest.raises(ValueError):
        game.play_move(9)


def test_win_ends_game():
    game = TicTacToeGame()
    for index in (0, 3, 1, 4, 2):
        game.play_move(index)
    assert game.winner == "X"
    assert not game.active
    assert game.available_moves() == []
    with pytest.raises(ValueError):
        game.play_move(5)
    with pytest.raises(ValueError):
        game.skip_turn()


def test_draw_ends_game():
    game = TicTacToeGame()
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        game.play_move(index)
    assert game.board == DRAWN_BOARD
    assert game.drawn
    assert game.winner is None


def test_skip_turn_and_clone_are_independent():
    game = TicTacToeGame()
    game.skip_turn()
    assert game.current_player == "O"

    copy = game.clone()
    copy.play_move(0)
    assert game.board[0] == _
    assert game.current_player == "O"
    assert game.snapshot() == (_,) * 9
