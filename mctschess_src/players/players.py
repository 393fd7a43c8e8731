"""Players that choose moves, and a loop that plays them against each other."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

import chess

from mctschess_src.game.board import ChessBoard
from mctschess_src.game.move_generator import MoveGenerator
from mctschess_src.mcts.mcts import MCTSSearch, MCTSSettings
from mctschess_src.util.config import get_key, is_verbose


class Player(ABC):
    """Anything that can pick a move for the side to move."""

    @abstractmethod
    def choose_action(self, board: ChessBoard) -> chess.Move | None:
        """Return a move for the side to move on board, or None if there is none."""

    def __str__(self) -> str:
        """Return the player's class name."""
        return type(self).__name__


class RandomPlayer(Player):
    """Picks uniformly among the pseudo-legal moves."""

    def __init__(self, seed: int | None = None, move_generator: MoveGenerator | None = None):
        """Initialize with an optional seed for a private random stream."""
        self.rand = random.Random(seed)
        self.move_generator = move_generator if move_generator is not None else MoveGenerator()

    def choose_action(self, board: ChessBoard) -> chess.Move | None:
        """Return a random move, or None if the side to move has no moves."""
        moves = self.move_generator.generate_moves(board)
        return self.rand.choice(moves) if moves else None


class MCTSPlayer(Player):
    """Runs a fresh MCTS search for every move."""

    def __init__(self, settings: MCTSSettings | None = None):
        """Initialize with the search settings used on every move."""
        self.settings = settings if settings is not None else MCTSSettings()
        self.last_search: MCTSSearch | None = None

    def choose_action(self, board: ChessBoard) -> chess.Move | None:
        """Search the position and return the most visited move."""
        self.last_search = MCTSSearch(board, self.settings)
        return self.last_search.start_search()


def play_game(
    white_player: Player,
    black_player: Player,
    board: ChessBoard | None = None,
    max_moves: int = get_key("game.max_game_moves", 200),
    verbose: bool = is_verbose(),
) -> tuple[ChessBoard, list[chess.Move], bool | None]:
    """
    Play a game between two players. Returns (final_board, move_history, winner).

    The game is decided when a king has been captured or when the side to move can capture the
    enemy king. It ends undecided (winner None) when a player has no move or after max_moves plies.
    """
    # Make a copy of the board to avoid modifying the original
    current = board.clone() if board is not None else ChessBoard()
    move_generator = MoveGenerator()
    move_history: list[chess.Move] = []
    winner: bool | None = None

    for ply in range(max_moves):
        winner = current.winner()
        if winner is not None:
            break
        if move_generator.can_capture_king(current):
            winner = current.white_to_move
            break

        player = white_player if current.white_to_move else black_player
        move = player.choose_action(current)
        if move is None:
            if verbose:
                print(f"{player} has no move at ply {ply}")
            break

        current.make_move(move)
        move_history.append(move)

        if verbose:
            print(f"Ply {ply + 1}: {player} plays {move}")
    else:
        winner = current.winner()

    if verbose:
        result = {True: "white wins", False: "black wins", None: "undecided"}[winner]
        print(f"Game ended after {len(move_history)} plies: {result}")
        print(current.board_str())

    return current, move_history, winner
