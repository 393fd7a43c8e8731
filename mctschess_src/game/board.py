"""Chess game state backed by python-chess, plus the int8 array view used in rollouts."""

from __future__ import annotations

import chess
import numpy as np

BOARD_SIZE: int = 8

# Array codes reuse the python-chess piece types; white is positive, black negative
EMPTY_CODE: np.int8 = np.int8(0)
PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = (
    chess.PAWN, chess.KNIGHT, chess.BISHOP, chess.ROOK, chess.QUEEN, chess.KING,
)  # fmt: skip

VALID_PIECE_INTS: set[int] = set(range(-KING, KING + 1))


def piece_code(piece: chess.Piece | None) -> int:
    """Return the signed array code of a python-chess piece (0 for an empty square)."""
    if piece is None:
        return int(EMPTY_CODE)
    return piece.piece_type if piece.color == chess.WHITE else -piece.piece_type


def cell_of(square: chess.Square) -> tuple[int, int]:
    """Return the (row, col) array cell of a square. Row 0 is the eighth rank."""
    return BOARD_SIZE - 1 - chess.square_rank(square), chess.square_file(square)


def board_to_array(board: chess.BaseBoard) -> np.ndarray:
    """Project the piece placement of board onto a fresh 8x8 int8 array."""
    arr = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for square, piece in board.piece_map().items():
        arr[cell_of(square)] = piece_code(piece)
    return arr


def array_to_board(arr: np.ndarray, side: bool) -> chess.Board:
    """Build a python-chess board from an array, with side to move and no castling rights."""
    board = chess.Board(None)
    for row, col in np.argwhere(arr != EMPTY_CODE).tolist():
        code = int(arr[row, col])
        square = chess.square(col, BOARD_SIZE - 1 - row)
        board.set_piece_at(square, chess.Piece(abs(code), code > 0))
    board.turn = side
    return board


def apply_sim_move(arr: np.ndarray, move: chess.Move) -> None:
    """
    Apply a move to a raw board array in place.

    Pawns reaching the last rank become queens unless the move names another promotion piece.
    """
    start, target = cell_of(move.from_square), cell_of(move.to_square)
    piece = int(arr[start])
    if abs(piece) == PAWN and target[0] in (0, BOARD_SIZE - 1):
        kind = move.promotion or QUEEN
        piece = kind if piece > 0 else -kind
    arr[target] = piece
    arr[start] = EMPTY_CODE


def king_capture_winner(arr: np.ndarray) -> bool | None:
    """Return True if white has won by king capture, False if black has, None if both kings live."""
    if not (arr == KING).any():
        return False
    if not (arr == -KING).any():
        return True
    return None


class ChessBoard:
    """
    Game state for a chess position, wrapping a python-chess board.

    Kings can be captured: moves are pushed without legality checks, and a position missing a
    king is a finished game rather than an error.
    """

    def __init__(self, fen: str | None = None, _board: chess.Board | None = None) -> None:
        """Create a board from a FEN string, an existing python-chess board, or the start position."""
        if _board is not None:
            self.board = _board
        else:
            self.board = chess.Board(fen) if fen else chess.Board()

    @property
    def white_to_move(self) -> bool:
        return self.board.turn == chess.WHITE

    @property
    def fen(self) -> str:
        return self.board.fen()

    def piece_at(self, square: chess.Square) -> int:
        """Return the signed array code of the piece on square."""
        return piece_code(self.board.piece_at(square))

    def clone(self) -> ChessBoard:
        """Return an independent copy of this board."""
        return ChessBoard(_board=self.board.copy(stack=False))

    def make_move(self, move: chess.Move) -> None:
        """Apply move in place and pass the turn to the other side."""
        piece = self.board.piece_at(move.from_square)
        if piece is None or piece.color != self.board.turn:
            name = chess.square_name(move.from_square)
            raise ValueError(f"No piece of the side to move on {name}")
        self.board.push(move)

    def apply_move(self, move: chess.Move) -> ChessBoard:
        """Return a new board with move applied; this board is left untouched."""
        successor = self.clone()
        successor.make_move(move)
        return successor

    def get_lightweight_clone(self) -> np.ndarray:
        """Return the int8 square array used for fast rollouts."""
        return board_to_array(self.board)

    def is_king_capture(self, move: chess.Move) -> bool:
        """Return True if move lands on a square holding a king."""
        return self.board.piece_type_at(move.to_square) == chess.KING

    def winner(self) -> bool | None:
        """Return the side whose opponent has lost its king, or None while both kings stand."""
        if self.board.king(chess.WHITE) is None:
            return False
        if self.board.king(chess.BLACK) is None:
            return True
        return None

    @classmethod
    def is_valid_board(cls, arr: np.ndarray) -> bool:
        """Return True if arr is a well-formed board: 8x8 int8, valid codes, at most one king each, no pawns on the back ranks."""
        if (
            not isinstance(arr, np.ndarray)
            or arr.dtype != np.int8
            or arr.shape != (BOARD_SIZE, BOARD_SIZE)
            or not {int(v) for v in arr.flat}.issubset(VALID_PIECE_INTS)
        ):
            return False
        if int((arr == KING).sum()) > 1 or int((arr == -KING).sum()) > 1:
            return False
        back_ranks = arr[[0, BOARD_SIZE - 1], :]
        return not (np.abs(back_ranks) == PAWN).any()

    @classmethod
    def from_board(cls, arr: np.ndarray, white_to_move: bool = True) -> ChessBoard:
        """Create a board from a saved numpy int8 array."""
        if not cls.is_valid_board(arr):
            raise ValueError("Invalid chess board array")
        return cls(_board=array_to_board(arr, white_to_move))

    @classmethod
    def from_fen(cls, fen: str) -> ChessBoard:
        """Create a board from a FEN string; missing trailing fields take their defaults."""
        if not fen.strip():
            raise ValueError("Empty FEN string")
        return cls(fen)

    def board_str(self) -> str:
        """Return a string view of the board with rank and file labels."""
        rows = str(self.board).splitlines()
        lines = [f"{BOARD_SIZE - r} {row}" for r, row in enumerate(rows)]
        lines.append("  " + " ".join(chess.FILE_NAMES))
        lines.append("white to move" if self.white_to_move else "black to move")
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        """Boards are equal when placement and side to move match."""
        if not isinstance(other, ChessBoard):
            return NotImplemented
        return (
            self.board.turn == other.board.turn
            and self.board.board_fen() == other.board.board_fen()
        )

    def __str__(self) -> str:
        """Return a string representation of the board."""
        return self.board_str()

    def __repr__(self) -> str:
        """Return a string representation of the ChessBoard instance."""
        return f"ChessBoard(fen={self.fen!r})"
