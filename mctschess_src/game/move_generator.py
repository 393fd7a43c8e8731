"""Pseudo-legal move generation for full boards and lightweight rollout arrays."""

from __future__ import annotations

from typing import TYPE_CHECKING

import chess

from mctschess_src.game.board import array_to_board

if TYPE_CHECKING:
    import numpy as np

    from mctschess_src.game.board import ChessBoard


def pseudo_legal_moves(
    position: chess.Board, include_promotions: bool = True
) -> list[chess.Move]:
    """
    Return the pseudo-legal moves of the side to move on position.

    Check is not considered and kings may be captured. Castling and en-passant are left out.
    Without include_promotions, pawns reaching the last rank only promote to a queen.
    """
    return [
        move
        for move in position.pseudo_legal_moves
        if not position.is_castling(move)
        and not position.is_en_passant(move)
        and (include_promotions or move.promotion in (None, chess.QUEEN))
    ]


class MoveGenerator:
    """Produces candidate moves for tree expansion and for rollouts."""

    def generate_moves(
        self, board: ChessBoard, side: bool | None = None, include_promotions: bool = True
    ) -> list[chess.Move]:
        """
        Return the full move list of side (default: the side to move) for tree expansion.

        With include_promotions every promotion piece is generated, otherwise only queen promotions.
        """
        position = board.board
        if side is not None and side != position.turn:
            position = position.copy(stack=False)
            position.turn = side
        return pseudo_legal_moves(position, include_promotions)

    def generate_lightweight_moves(self, arr: np.ndarray, side: bool) -> list[chess.Move]:
        """Return the rollout move list of side on a raw board array (queen promotions only)."""
        return pseudo_legal_moves(array_to_board(arr, side), include_promotions=False)

    def can_capture_king(self, board: ChessBoard, side: bool | None = None) -> bool:
        """Return True if side (default: the side to move) has a move landing on the enemy king."""
        return any(board.is_king_capture(m) for m in self.generate_moves(board, side, False))
