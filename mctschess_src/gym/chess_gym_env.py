"""Chess Gymnasium Environment."""

from __future__ import annotations

from typing import Any

import chess
import gymnasium as gym
import numpy as np

from mctschess_src.game.board import BOARD_SIZE, KING, ChessBoard
from mctschess_src.game.move_generator import MoveGenerator
from mctschess_src.players.players import Player, RandomPlayer
from mctschess_src.util.config import get_key

NUM_SQUARES: int = BOARD_SIZE * BOARD_SIZE


def encode_action(move: chess.Move) -> int:
    """Return the discrete action index of move (promotion pieces are not encoded)."""
    return move.from_square * NUM_SQUARES + move.to_square


def decode_action(action: int) -> tuple[chess.Square, chess.Square]:
    """Return the (from, to) squares of a discrete action index."""
    from_square, to_square = divmod(int(action), NUM_SQUARES)
    return from_square, to_square


class ChessEnv(gym.Env):
    """
    King-capture chess for gymnasium, seen from one side against a fixed opponent.

    Actions are from_square * 64 + to_square; pawns reaching the last rank promote to a queen.
    The episode terminates with reward 1.0 when the agent captures the king, -1.0 when the
    opponent does or when the agent plays an illegal action, and 0.0 when a side runs out of moves.
    """

    metadata = {"render_modes": ["ansi"]}  # noqa: RUF012

    def __init__(
        self,
        opponent: Player | None = None,
        agent_side: bool = True,
        max_moves: int = get_key("game.max_game_moves", 200),
        start_board: ChessBoard | None = None,
        render_mode: str | None = None,
    ):
        """Initialize the environment with an opponent and the side the agent plays."""
        super().__init__()
        self.opponent = opponent if opponent is not None else RandomPlayer()
        self.agent_side = agent_side
        self.max_moves = max_moves
        self.start_board = start_board if start_board is not None else ChessBoard()
        self.render_mode = render_mode
        self.move_generator = MoveGenerator()
        self.board = self.start_board.clone()
        self.num_agent_moves = 0

        self.observation_space = gym.spaces.Box(
            low=-KING, high=KING, shape=(BOARD_SIZE, BOARD_SIZE), dtype=np.int8
        )
        self.action_space = gym.spaces.Discrete(NUM_SQUARES * NUM_SQUARES)

    def legal_actions(self) -> list[int]:
        """Return the action indices available to the side to move."""
        return sorted({encode_action(m) for m in self.move_generator.generate_moves(self.board)})

    def _info(self) -> dict[str, Any]:
        return {"legal_actions": self.legal_actions(), "white_to_move": self.board.white_to_move}

    def _opponent_reply(self) -> tuple[float, bool]:
        """Let the opponent move. Returns (reward, terminated) from the agent's point of view."""
        move = self.opponent.choose_action(self.board)
        if move is None:
            return 0.0, True
        self.board.make_move(move)
        if self.board.winner() is not None:
            return -1.0, True
        return 0.0, False

    def reset(
        self, *, seed: int | None = None, options: dict[str, Any] | None = None
    ) -> tuple[np.ndarray, dict[str, Any]]:
        """Start a new episode; the opponent moves first when the agent plays black."""
        super().reset(seed=seed)
        if seed is not None and isinstance(self.opponent, RandomPlayer):
            self.opponent.rand.seed(seed)
        self.board = self.start_board.clone()
        self.num_agent_moves = 0
        if self.board.white_to_move != self.agent_side:
            self._opponent_reply()
        return self.board.get_lightweight_clone(), self._info()

    def step(self, action: int) -> tuple[np.ndarray, float, bool, bool, dict[str, Any]]:
        """Play the agent's move and the opponent's reply."""
        from_square, to_square = decode_action(action)
        candidates = [
            m
            for m in self.move_generator.generate_moves(self.board, include_promotions=False)
            if m.from_square == from_square and m.to_square == to_square
        ]
        if not candidates:
            return self.board.get_lightweight_clone(), -1.0, True, False, self._info()

        self.board.make_move(candidates[0])
        self.num_agent_moves += 1
        if self.board.winner() is not None:
            return self.board.get_lightweight_clone(), 1.0, True, False, self._info()

        reward, terminated = self._opponent_reply()
        if not terminated and not self.move_generator.generate_moves(self.board):
            terminated = True
        truncated = not terminated and self.num_agent_moves >= self.max_moves
        obs = self.board.get_lightweight_clone()
        return obs, reward, terminated, truncated, self._info()

    def render(self) -> str | None:
        """Return the board as text in 'ansi' mode."""
        if self.render_mode == "ansi":
            return self.board.board_str()
        return None
