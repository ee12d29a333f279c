"""Entry point: python -m tetris_brain

Plays headless games with the heuristic planner and reports how long
each one lasted.

Usage:
  python -m tetris_brain
  python -m tetris_brain --games 10 --seed 42 --max-pieces 1000
  python -m tetris_brain --width 6 --height 12 --show --debug
"""

import argparse
import logging
import sys

from .game.tetris_sim import TetrisSim

logger = logging.getLogger("tetris_brain")

# Default configuration
CONFIG = {
    "games": 3,
    "seed": 0,
    "width": 10,
    "height": 20,
    # 0 plays each game until the planner runs out of moves
    "max_pieces": 2000,
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tetris_brain", description="Play headless Tetris with the heuristic planner."
    )
    parser.add_argument("--games", type=int, default=CONFIG["games"])
    parser.add_argument("--seed", type=int, default=CONFIG["seed"])
    parser.add_argument("--width", type=int, default=CONFIG["width"])
    parser.add_argument("--height", type=int, default=CONFIG["height"])
    parser.add_argument(
        "--max-pieces", type=int, default=CONFIG["max_pieces"],
        help="stop a game after this many pieces (0 = no limit)",
    )
    parser.add_argument("--show", action="store_true", help="print the final board of each game")
    parser.add_argument("--debug", action="store_true", help="log every planner decision")
    args = parser.parse_args(argv)

    if args.games < 1:
        parser.error("--games must be at least 1")
    if args.width < 4 or args.height < 8:
        parser.error("board must be at least 4 wide and 8 tall")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    max_pieces = args.max_pieces or None
    sim = TetrisSim(width=args.width, height=args.height, seed=args.seed)
    total_lines = 0
    for game_idx in range(args.games):
        sim.reset()
        stats = sim.play(max_pieces=max_pieces)
        total_lines += stats.lines_cleared
        logger.info(
            "Game %d: %d pieces, %d lines, highest stack %d%s",
            game_idx + 1,
            stats.pieces_placed,
            stats.lines_cleared,
            stats.highest_stack,
            "" if sim.game_over else " (piece limit reached)",
        )
        if args.show:
            print(sim.render())

    logger.info(
        "Average over %d games: %.1f lines", args.games, total_lines / args.games
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
