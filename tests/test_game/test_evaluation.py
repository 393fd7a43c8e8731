"""Pytest suite for the rollout board evaluation."""

from __future__ import annotations

import pytest

from mctschess_src.game.board import ChessBoard
from mctschess_src.game.evaluation import Evaluation

WHITE_UP_A_QUEEN = "3qk3/8/8/8/8/8/8/3QK2Q w - - 0 1"
BLACK_UP_A_ROOK = "r3k2r/8/8/8/8/8/8/4K2R w - - 0 1"


@pytest.fixture
def evaluation() -> Evaluation:
    return Evaluation()


def test_starting_position_is_level(evaluation: Evaluation) -> None:
    arr = ChessBoard().get_lightweight_clone()
    assert evaluation.material_balance(arr, True) == 0
    assert evaluation.evaluate_sim_board(arr, True) == 0.5
    assert evaluation.evaluate_sim_board(arr, False) == 0.5


def test_material_advantage(evaluation: Evaluation) -> None:
    arr = ChessBoard.from_fen(WHITE_UP_A_QUEEN).get_lightweight_clone()
    assert evaluation.material_balance(arr, True) == 900
    assert evaluation.material_balance(arr, False) == -900

    white_score = evaluation.evaluate_sim_board(arr, True)
    black_score = evaluation.evaluate_sim_board(arr, False)
    assert 0.5 < white_score < 1.0
    assert 0.0 < black_score < 0.5
    assert white_score + black_score == pytest.approx(1.0)


def test_black_advantage(evaluation: Evaluation) -> None:
    arr = ChessBoard.from_fen(BLACK_UP_A_ROOK).get_lightweight_clone()
    assert evaluation.evaluate_sim_board(arr, False) > 0.5


def test_pawn_advancement_bonus(evaluation: Evaluation) -> None:
    home = ChessBoard.from_fen("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1").get_lightweight_clone()
    advanced = ChessBoard.from_fen("4k3/8/4P3/8/8/8/8/4K3 w - - 0 1").get_lightweight_clone()
    assert evaluation.material_balance(advanced, True) > evaluation.material_balance(home, True)


def test_scores_stay_inside_the_unit_interval(evaluation: Evaluation) -> None:
    arr = ChessBoard.from_fen("4k3/8/8/8/8/8/8/QQQQKQQQ w - - 0 1").get_lightweight_clone()
    score = evaluation.evaluate_sim_board(arr, True)
    assert 0.0 < score <= 1.0
