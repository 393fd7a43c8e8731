"""Tree Node for MCTS."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from mctschess_src.util.config import get_key
from mctschess_src.util.tree_node import TreeNode

if TYPE_CHECKING:
    import chess

    from mctschess_src.game.board import ChessBoard


class MCTSNode(TreeNode):
    """
    A node in the Monte-Carlo Tree Search (MCTS) tree.

    Rewards are stored from the searching side's point of view for every node. The flip to the
    point of view of whoever chooses at a given depth happens in select_child.
    """

    def __init__(
        self,
        state: ChessBoard,
        parent: MCTSNode | None = None,
        side_to_move: bool = True,
        move: chess.Move | None = None,
        exploration_constant: float = get_key("mcts.exploration_constant", 1.0),
    ):
        """Initialize the MCTS node with its board state and optional parent."""
        super().__init__(state, parent=parent)
        self.side_to_move = side_to_move
        self.move = move  # None at the root
        self.untried_moves: list[chess.Move] = []
        self.visits = 0
        self.wins = 0.0
        self.c = exploration_constant
        self.children: list[MCTSNode]

    @property
    def state(self) -> ChessBoard:
        """Return the board position at this node."""
        return self.data

    def select_child(self, is_opponents_turn: bool) -> MCTSNode | None:
        """Return the child with the highest UCB1 score, or None if there are no children."""
        return max(self.children, key=lambda ch: self.ucb(ch, is_opponents_turn), default=None)

    def ucb(self, child: MCTSNode, is_opponents_turn: bool) -> float:
        """UCB(a_i) = Q(a_i) + c * sqrt(ln(n) / n_i), with Q complemented on the opponent's turn."""
        if child.visits == 0:
            return math.inf

        win_rate = child.wins / child.visits
        if is_opponents_turn:
            win_rate = 1 - win_rate

        return win_rate + self.c * math.sqrt(math.log(max(self.visits, 1)) / child.visits)

    def add_child(self, move: chess.Move, state: ChessBoard) -> MCTSNode:
        """Attach a child reached by move and take move out of the untried list."""
        if move not in self.untried_moves:
            raise ValueError(f"Move {move} is not an untried move of this node")
        self.untried_moves.remove(move)
        child = MCTSNode(
            state,
            side_to_move=not self.side_to_move,
            move=move,
            exploration_constant=self.c,
        )
        super().add_child(child)
        return child

    def update(self, reward: float) -> None:
        """Record one backpropagation pass carrying reward."""
        self.visits += 1
        self.wins += reward

    def is_fully_expanded(self) -> bool:
        """Return True once every generated move has been expanded or discarded."""
        return len(self.untried_moves) == 0

    @property
    def win_rate(self) -> float:
        """Return the mean reward of this node, 0.0 when unvisited."""
        return self.wins / self.visits if self.visits else 0.0

    def __str__(self) -> str:
        """Return a string representation of the MCTS node."""
        return (
            f"MCTSNode(move={self.move}, visits={self.visits}, wins={self.wins:.2f}, "
            f"children={self.get_num_children()}, untried={len(self.untried_moves)})"
        )
