"""Pytest suite for the chess board representation."""

from __future__ import annotations

import chess
import numpy as np
import pytest

from mctschess_src.game.board import (
    EMPTY_CODE,
    KING,
    PAWN,
    QUEEN,
    ROOK,
    ChessBoard,
    apply_sim_move,
    array_to_board,
    board_to_array,
    cell_of,
    king_capture_winner,
)

# ────────────────────────────── Shared test data ────────────────────────────── #

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
ROOK_VS_KING = "4k3/8/8/8/8/8/8/4R2K w - - 0 1"

# Row 0 is rank 8
START_ARRAY = np.array(
    [
        [-4, -2, -3, -5, -6, -3, -2, -4],
        [-1] * 8,
        [0] * 8,
        [0] * 8,
        [0] * 8,
        [0] * 8,
        [1] * 8,
        [4, 2, 3, 5, 6, 3, 2, 4],
    ],
    dtype=np.int8,
)

TWO_WHITE_KINGS = np.zeros((8, 8), dtype=np.int8)
TWO_WHITE_KINGS[7, 0] = KING
TWO_WHITE_KINGS[7, 7] = KING

PAWN_ON_BACK_RANK = np.zeros((8, 8), dtype=np.int8)
PAWN_ON_BACK_RANK[0, 3] = PAWN


@pytest.fixture
def start_board() -> ChessBoard:
    """Return the standard starting position."""
    return ChessBoard()


def test_starting_position(start_board: ChessBoard) -> None:
    assert start_board.white_to_move
    assert start_board.piece_at(chess.E1) == KING
    assert start_board.piece_at(chess.D8) == -QUEEN
    assert start_board.piece_at(chess.E4) == EMPTY_CODE
    assert np.array_equal(start_board.get_lightweight_clone(), START_ARRAY)


def test_cells_put_the_eighth_rank_first() -> None:
    assert cell_of(chess.A8) == (0, 0)
    assert cell_of(chess.H1) == (7, 7)
    assert cell_of(chess.E4) == (4, 4)


def test_array_round_trip_keeps_placement() -> None:
    board = chess.Board("4k3/8/8/3q4/8/8/4P3/4K3 b - - 0 1")
    arr = board_to_array(board)
    rebuilt = array_to_board(arr, chess.BLACK)
    assert rebuilt.board_fen() == board.board_fen()
    assert rebuilt.turn == chess.BLACK
    assert rebuilt.castling_rights == chess.BB_EMPTY


def test_make_move_flips_side(start_board: ChessBoard) -> None:
    start_board.make_move(chess.Move.from_uci("e2e4"))
    assert not start_board.white_to_move
    assert start_board.piece_at(chess.E4) == PAWN
    assert start_board.piece_at(chess.E2) == EMPTY_CODE


def test_make_move_rejects_wrong_side(start_board: ChessBoard) -> None:
    with pytest.raises(ValueError):
        start_board.make_move(chess.Move.from_uci("e7e5"))
    with pytest.raises(ValueError):
        start_board.make_move(chess.Move.from_uci("e4e5"))


def test_apply_move_leaves_original_untouched(start_board: ChessBoard) -> None:
    successor = start_board.apply_move(chess.Move.from_uci("g1f3"))
    assert start_board == ChessBoard()
    assert successor != start_board
    assert successor.piece_at(chess.F3) != EMPTY_CODE


def test_clone_is_independent(start_board: ChessBoard) -> None:
    clone = start_board.clone()
    clone.make_move(chess.Move.from_uci("d2d4"))
    assert start_board.piece_at(chess.D2) == PAWN


def test_lightweight_clone_is_a_copy(start_board: ChessBoard) -> None:
    arr = start_board.get_lightweight_clone()
    arr[:] = 0
    assert start_board.winner() is None
    assert start_board.get_lightweight_clone()[7, 4] == KING


def test_from_fen_matches_start() -> None:
    assert ChessBoard.from_fen(START_FEN) == ChessBoard()
    assert not ChessBoard.from_fen("4k3/8/8/8/8/8/8/4K3 b - - 0 1").white_to_move


@pytest.mark.parametrize("fen", ["", "8/8/8 w", "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x"])
def test_from_fen_rejects_garbage(fen: str) -> None:
    with pytest.raises(ValueError):
        ChessBoard.from_fen(fen)


@pytest.mark.parametrize(
    "arr, is_valid",
    [
        (START_ARRAY, True),
        (TWO_WHITE_KINGS, False),
        (PAWN_ON_BACK_RANK, False),
        (START_ARRAY.astype(np.int64), False),
        (np.zeros((8, 7), dtype=np.int8), False),
    ],
)
def test_is_valid_board(arr: np.ndarray, is_valid: bool) -> None:
    assert ChessBoard.is_valid_board(arr) is is_valid


def test_from_board(start_board: ChessBoard) -> None:
    assert ChessBoard.from_board(START_ARRAY) == start_board
    assert not ChessBoard.from_board(START_ARRAY, white_to_move=False).white_to_move
    with pytest.raises(ValueError):
        ChessBoard.from_board(TWO_WHITE_KINGS)


def test_king_capture_detection() -> None:
    board = ChessBoard.from_fen(ROOK_VS_KING)
    capture = chess.Move.from_uci("e1e8")
    assert board.is_king_capture(capture)
    assert not board.is_king_capture(chess.Move.from_uci("e1e7"))

    assert board.winner() is None
    assert king_capture_winner(board.get_lightweight_clone()) is None
    after = board.apply_move(capture)
    assert after.winner() is True
    assert king_capture_winner(after.get_lightweight_clone()) is True


def test_black_wins_when_white_king_missing() -> None:
    board = ChessBoard.from_fen("4k3/8/8/8/8/8/8/8 w - - 0 1")
    assert board.winner() is False
    assert king_capture_winner(board.get_lightweight_clone()) is False


def test_sim_move_promotes_to_queen_by_default() -> None:
    arr = np.zeros((8, 8), dtype=np.int8)
    arr[1, 0] = PAWN
    apply_sim_move(arr, chess.Move.from_uci("a7a8"))
    assert arr[0, 0] == QUEEN
    assert arr[1, 0] == EMPTY_CODE

    arr[6, 1] = -PAWN
    apply_sim_move(arr, chess.Move.from_uci("b2b1r"))
    assert arr[7, 1] == -ROOK


def test_board_str(start_board: ChessBoard) -> None:
    lines = start_board.board_str().splitlines()
    assert lines[0] == "8 r n b q k b n r"
    assert lines[7] == "1 R N B Q K B N R"
    assert lines[8] == "  a b c d e f g h"
    assert lines[-1] == "white to move"
