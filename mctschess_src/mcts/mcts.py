"""Monte-Carlo Tree Search (MCTS) move selection for chess."""

from __future__ import annotations

import random
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from tqdm import tqdm

from mctschess_src.game.board import apply_sim_move, king_capture_winner
from mctschess_src.game.evaluation import Evaluation
from mctschess_src.game.move_generator import MoveGenerator
from mctschess_src.mcts.mcts_node import MCTSNode
from mctschess_src.util.config import get_key, is_verbose

if TYPE_CHECKING:
    from collections.abc import Callable

    import chess

    from mctschess_src.game.board import ChessBoard


@dataclass(slots=True)
class MCTSSettings:
    """Search budget and tuning knobs."""

    max_playouts: int = get_key("mcts.max_playouts", 1000)
    use_time_limit: bool = get_key("mcts.use_time_limit", False)
    time_limit_ms: int = get_key("mcts.time_limit_ms", 1000)
    playout_depth_limit: int = get_key("mcts.playout_depth_limit", 50)
    include_promotions: bool = get_key("mcts.include_promotions", True)
    exploration_constant: float = get_key("mcts.exploration_constant", 1.0)
    seed: int | None = get_key("mcts.seed", None)
    verbose: bool = is_verbose("mcts")


@dataclass(slots=True)
class SearchDiagnostics:
    """Counters collected over one search call."""

    num_playouts: int = 0
    nodes_created: int = 0
    discarded_king_captures: int = 0
    decisive_rollouts: int = 0
    evaluated_rollouts: int = 0
    max_tree_depth: int = 0
    elapsed_seconds: float = 0.0

    def summary(self) -> str:
        """Return a one-line human readable summary."""
        return (
            f"{self.num_playouts} playouts in {self.elapsed_seconds:.2f}s, "
            f"{self.nodes_created} nodes, depth {self.max_tree_depth}, "
            f"{self.decisive_rollouts} decisive / {self.evaluated_rollouts} evaluated rollouts, "
            f"{self.discarded_king_captures} king captures skipped"
        )


class SearchState(Enum):
    """Lifecycle of a single search call."""

    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


class MCTSSearch:
    """
    One MCTS search over a chess position.

    A search object is single use: it builds a fresh tree rooted at a copy of the given board,
    runs Select, Expand, Simulate and Backpropagate until the playout budget, the time limit or
    an abort request stops it, and then reports the most visited root move.
    """

    def __init__(
        self,
        board: ChessBoard,
        settings: MCTSSettings | None = None,
        move_generator: MoveGenerator | None = None,
        evaluation: Evaluation | None = None,
    ):
        """Initialize the search for the side to move on board."""
        self.board = board.clone()
        self.settings = settings if settings is not None else MCTSSettings()
        self.move_generator = move_generator if move_generator is not None else MoveGenerator()
        self.evaluation = evaluation if evaluation is not None else Evaluation()
        self.searching_side: bool = board.white_to_move

        self.root: MCTSNode | None = None
        self.best_move: chess.Move | None = None
        self.diagnostics = SearchDiagnostics()
        self.state = SearchState.IDLE

        self._abort = threading.Event()
        self._callbacks: list[Callable[[chess.Move | None], None]] = []

    def on_search_complete(self, callback: Callable[[chess.Move | None], None]) -> None:
        """Register a callback invoked once with the chosen move (or None) when the search ends."""
        self._callbacks.append(callback)

    def end_search(self) -> None:
        """Ask the search to stop; it finishes the running iteration first."""
        self._abort.set()

    @property
    def aborted(self) -> bool:
        """Return True if end_search has been requested."""
        return self._abort.is_set()

    def start_search(self) -> chess.Move | None:
        """
        Run the search to completion and return the best move, or None if no move was found.

        Completion callbacks run exactly once, also when a collaborator raises. In that case they
        receive None and the exception is re-raised afterwards.
        """
        if self.state is not SearchState.IDLE:
            raise RuntimeError("A search can only be started once")
        self.state = SearchState.RUNNING

        start = time.perf_counter()
        try:
            self._search_moves(random.Random(self.settings.seed))
        finally:
            self.diagnostics.elapsed_seconds = time.perf_counter() - start
            self.state = SearchState.DONE
            self._notify_complete()
        return self.best_move

    def _notify_complete(self) -> None:
        if self.settings.verbose:
            print(f"Best move: {self.best_move} ({self.diagnostics.summary()})")

        for callback in self._callbacks:
            callback(self.best_move)

    def _search_moves(self, rand: random.Random) -> None:
        """Build the tree and fill in best_move."""
        root = MCTSNode(
            self.board,
            side_to_move=self.searching_side,
            exploration_constant=self.settings.exploration_constant,
        )
        root.untried_moves = self.move_generator.generate_moves(
            root.state, root.side_to_move, self.settings.include_promotions
        )
        self.root = root

        if not root.untried_moves:
            if self.settings.verbose:
                print("No candidate moves at the root")
            return

        deadline = None
        if self.settings.use_time_limit:
            deadline = time.perf_counter() + self.settings.time_limit_ms / 1000

        playouts = range(self.settings.max_playouts)
        if self.settings.verbose:
            print("Starting MCTS process...")
            playouts = tqdm(playouts, desc="Simulating playouts", unit="playouts")

        for _ in playouts:
            if self._abort.is_set() or (deadline is not None and time.perf_counter() >= deadline):
                break

            node = self.select(root)
            node = self.expand(node)
            reward = self.simulate(node, rand)
            self.backpropagate(node, reward)

            self.diagnostics.num_playouts += 1

        self.best_move = self.get_best_move(root)

    def select(self, node: MCTSNode) -> MCTSNode:
        """Descend to the first node with untried moves, or to a node with nothing left to explore."""
        while node.children or node.untried_moves:
            if node.untried_moves:
                return node
            node = node.select_child(node.side_to_move != self.searching_side)
        return node

    def expand(self, node: MCTSNode) -> MCTSNode:
        """
        Expand one untried move of node and return the new child.

        Moves landing on a king are dropped without creating a child; the pseudo-legal generator
        can produce them because check is never enforced. A node with no usable untried move is
        returned unchanged.
        """
        while not node.is_fully_expanded():
            move = node.untried_moves[-1]
            if node.state.is_king_capture(move):
                node.untried_moves.pop()
                self.diagnostics.discarded_king_captures += 1
                continue

            child = node.add_child(move, node.state.apply_move(move))
            child.untried_moves = self.move_generator.generate_moves(
                child.state, child.side_to_move, self.settings.include_promotions
            )

            self.diagnostics.nodes_created += 1
            self.diagnostics.max_tree_depth = max(self.diagnostics.max_tree_depth, child.depth())
            return child
        return node

    def simulate(self, node: MCTSNode, rand: random.Random) -> float:
        """
        Play random lightweight moves from node and return the reward for the searching side.

        A king capture ends the rollout with 1.0 or 0.0. Reaching the depth limit or running out
        of moves ends it with the heuristic evaluation of the final board.
        """
        sim_board = node.state.get_lightweight_clone()
        side = node.side_to_move
        winner = king_capture_winner(sim_board)
        depth = 0

        while winner is None and depth < self.settings.playout_depth_limit:
            moves = self.move_generator.generate_lightweight_moves(sim_board, side)
            if not moves:
                break

            move = rand.choice(moves)
            apply_sim_move(sim_board, move)
            winner = king_capture_winner(sim_board)

            side = not side
            depth += 1

        if winner is not None:
            self.diagnostics.decisive_rollouts += 1
            return 1.0 if winner == self.searching_side else 0.0

        self.diagnostics.evaluated_rollouts += 1
        return float(self.evaluation.evaluate_sim_board(sim_board, self.searching_side))

    def backpropagate(self, node: MCTSNode | None, reward: float) -> None:
        """Add reward to every node from node up to the root inclusive."""
        while node is not None:
            node.update(reward)
            node = node.parent

    @staticmethod
    def get_best_move(root: MCTSNode) -> chess.Move | None:
        """Return the move of the most visited root child, or None if the root was never expanded."""
        best_child = max(root.children, key=lambda child: child.visits, default=None)
        return best_child.move if best_child is not None else None


@dataclass
class SearchHandle:
    """A search running on a worker thread."""

    search: MCTSSearch
    future: Future = field(repr=False)

    def cancel(self) -> None:
        """Request the search to stop at the next iteration boundary."""
        self.search.end_search()

    def done(self) -> bool:
        """Return True once the search has finished (or failed)."""
        return self.future.done()

    def result(self, timeout: float | None = None) -> chess.Move | None:
        """Wait for and return the chosen move; collaborator errors are re-raised here."""
        return self.future.result(timeout)


def start_search(
    board: ChessBoard,
    settings: MCTSSettings | None = None,
    *,
    executor: ThreadPoolExecutor | None = None,
    move_generator: MoveGenerator | None = None,
    evaluation: Evaluation | None = None,
) -> SearchHandle:
    """Start an MCTS search on a worker thread and return a handle to its result."""
    search = MCTSSearch(board, settings, move_generator=move_generator, evaluation=evaluation)
    if executor is not None:
        return SearchHandle(search, executor.submit(search.start_search))

    own_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mcts-search")
    future = own_executor.submit(search.start_search)
    own_executor.shutdown(wait=False)
    return SearchHandle(search, future)
