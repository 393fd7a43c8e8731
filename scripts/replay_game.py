"""Script to print every position of the saved game records."""

from pathlib import Path

import numpy as np

from mctschess_src.game.board import ChessBoard
from mctschess_src.util.config import get_key
from mctschess_src.util.save_util import import_game_record

BASE = Path(__file__).resolve().parent.parent

GAMES_PATH = BASE / get_key("play.output_dir", "./games")
GAME_RECORDS = [(import_game_record(file), file.name) for file in sorted(GAMES_PATH.glob("*.np[yz]"))]


def replay(record: np.ndarray) -> None:
    """Print each position of a game, alternating the side to move from white."""
    for ply, arr in enumerate(record):
        print(f"Ply {ply}")
        print(ChessBoard.from_board(arr, white_to_move=ply % 2 == 0).board_str())
        print()


if __name__ == "__main__":
    for record, name in GAME_RECORDS:
        print(name)
        replay(record)
        print("\n" + "=" * 40 + "\n")
