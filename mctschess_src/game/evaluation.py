"""Static evaluation of rollout boards, normalized to the (0, 1) reward scale."""

from __future__ import annotations

import numpy as np

from mctschess_src.game.board import BISHOP, BOARD_SIZE, KNIGHT, PAWN, QUEEN, ROOK

# Centipawn values, kings excluded
PIECE_VALUES: dict[int, int] = {PAWN: 100, KNIGHT: 320, BISHOP: 330, ROOK: 500, QUEEN: 900}
PAWN_ADVANCE_BONUS: int = 5  # per rank past the start rank
LOGISTIC_SCALE: float = 400.0

_VALUE_TABLE: np.ndarray = np.zeros(7, dtype=np.int32)
for _kind, _value in PIECE_VALUES.items():
    _VALUE_TABLE[_kind] = _value


class Evaluation:
    """Material-based heuristic used when a rollout ends without a king capture."""

    def __init__(self, scale: float = LOGISTIC_SCALE):
        """Initialize the evaluator with the centipawn scale of the logistic squash."""
        self.scale = scale

    def material_balance(self, arr: np.ndarray, side: bool) -> int:
        """Return the centipawn balance of side (positive means side is ahead)."""
        values = _VALUE_TABLE[np.abs(arr.astype(np.int32))]
        white_total = int(values[arr > 0].sum())
        black_total = int(values[arr < 0].sum())

        rows = np.arange(BOARD_SIZE).reshape(-1, 1)
        white_advance = int(((BOARD_SIZE - 2 - rows) * (arr == PAWN)).sum())
        black_advance = int(((rows - 1) * (arr == -PAWN)).sum())

        balance = (white_total - black_total) + PAWN_ADVANCE_BONUS * (white_advance - black_advance)
        return balance if side else -balance

    def evaluate_sim_board(self, arr: np.ndarray, side: bool) -> float:
        """Return a score in (0, 1) for side on a raw board array; 0.5 means level material."""
        diff = self.material_balance(arr, side)
        return 1.0 / (1.0 + 10.0 ** (-diff / self.scale))
