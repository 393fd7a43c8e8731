"""Play MCTS against a random mover from the command line."""

import argparse
from datetime import datetime
from multiprocessing import Pool, cpu_count
from pathlib import Path

# Config keys:
#   play.output_dir: directory for saved game records
#   play.seed: base seed; game i uses seed + i for both players
#   mcts.*: defaults for the search settings of the MCTS player
from tqdm import tqdm

from mctschess_src.game.board import ChessBoard
from mctschess_src.mcts.mcts import MCTSSettings
from mctschess_src.players.players import MCTSPlayer, RandomPlayer, play_game
from mctschess_src.util.config import get_key
from mctschess_src.util.save_util import export_game_record

OUTPUT_DIR = Path(get_key("play.output_dir", "./games"))
BASE_SEED = int(get_key("play.seed", 7))


def generate_hash() -> str:
    """Generate a unique hash based on the current datetime."""
    return datetime.now().strftime("%Y%m%d%H%M%S")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for a match."""
    parser = argparse.ArgumentParser(description="Play MCTS against a random mover.")
    parser.add_argument("-n", "--num-games", type=int, required=True)
    parser.add_argument("-w", "--workers", type=int, default=cpu_count())
    parser.add_argument(
        "-p", "--playouts", type=int, default=MCTSSettings().max_playouts, help="Playouts per move"
    )
    parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=MCTSSettings().playout_depth_limit,
        help="Rollout ply-depth limit",
    )
    parser.add_argument("-m", "--max-moves", type=int, default=get_key("game.max_game_moves", 200))
    parser.add_argument("--fen", type=str, default=None, help="Starting position (FEN)")
    parser.add_argument("--save", action="store_true", help="Save every game's positions")
    return parser.parse_args()


def play_one(task: tuple[int, argparse.Namespace]) -> tuple[int, bool, bool | None, list]:
    """Play game number idx. MCTS takes white in even games and black in odd ones."""
    idx, args = task
    seed = BASE_SEED + idx
    mcts_is_white = idx % 2 == 0

    settings = MCTSSettings(
        max_playouts=args.playouts, playout_depth_limit=args.depth, seed=seed, verbose=False
    )
    mcts_player, random_player = MCTSPlayer(settings), RandomPlayer(seed)
    white_player, black_player = (
        (mcts_player, random_player) if mcts_is_white else (random_player, mcts_player)
    )

    start = ChessBoard.from_fen(args.fen) if args.fen else ChessBoard()
    _, history, winner = play_game(
        white_player, black_player, board=start, max_moves=args.max_moves, verbose=False
    )

    positions = [start.get_lightweight_clone()]
    replay = start.clone()
    for move in history:
        replay.make_move(move)
        positions.append(replay.get_lightweight_clone())

    return idx, mcts_is_white, winner, positions


def main() -> None:
    """Match play with CLI."""
    args = parse_args()
    if args.save:
        OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    tasks = [(i, args) for i in range(args.num_games)]
    score = {"mcts": 0, "random": 0, "undecided": 0}

    pbar = tqdm(total=args.num_games, desc="Playing games", unit="game")
    chunksize = max(1, args.num_games // (args.workers * 4))

    with Pool(args.workers) as pool:
        for idx, mcts_is_white, winner, positions in pool.imap_unordered(
            play_one, tasks, chunksize=chunksize
        ):
            if winner is None:
                score["undecided"] += 1
            elif winner == mcts_is_white:
                score["mcts"] += 1
            else:
                score["random"] += 1

            if args.save:
                colour = "w" if mcts_is_white else "b"
                out = OUTPUT_DIR / f"game_{generate_hash()}_{idx:0{len(str(args.num_games))}d}_{colour}"
                export_game_record(positions, out, compressed=True)
            pbar.update(1)
    pbar.close()

    print(f"MCTS {score['mcts']} - Random {score['random']} ({score['undecided']} undecided)")
    if args.save:
        print(f"Games saved to {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
