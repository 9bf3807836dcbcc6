#!/usr/bin/env python3
"""CLI script to preview generated puzzles for Neuron Graph.

Usage:
    python generate_puzzle.py LEVEL [options]

Examples:
    python generate_puzzle.py 1
    python generate_puzzle.py 20 --seed 12345
    python generate_puzzle.py 50 --layouts layouts --tiers tiers.json
"""

import argparse
import random
import sys
from pathlib import Path

from difficulty import DEFAULT_TIERS, ConfigurationError, DifficultyResolver, load_tiers_json
from layout_loader import LayoutStore
from logger_config import configure_logging
from puzzle_generator import GenerationError, PuzzleGenerator


def main() -> None:
    """Main entry point for puzzle preview CLI."""
    parser = argparse.ArgumentParser(
        description="Generate a Neuron Graph puzzle for a level and show how to solve it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Default tiers:
  beginner  levels 1-5    3 nodes, 2 colors
  easy      levels 6-12   4 nodes, 2 colors
  medium    levels 13-30  5 nodes, 3 colors
  advanced  levels 31-45  7 nodes, 3 colors
  hard      levels 46-60  9 nodes, 4 colors
""",
    )

    parser.add_argument(
        "level",
        type=int,
        help="Level number to generate for",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--layouts",
        type=Path,
        default=None,
        help="Layout directory (<dir>/<tier>/*.json); default: built-in library",
    )
    parser.add_argument(
        "--tiers",
        type=Path,
        default=None,
        help="Tier table JSON file; default: built-in tiers",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    rng = random.Random(args.seed)
    store = LayoutStore.from_directory(args.layouts) if args.layouts else LayoutStore.default()

    try:
        tiers = load_tiers_json(args.tiers) if args.tiers else DEFAULT_TIERS
        resolver = DifficultyResolver(store, tiers, rng=rng)
    except ConfigurationError as e:
        print(f"Invalid tier table: {e}")
        sys.exit(1)

    config = resolver.resolve(args.level)

    print(f"Level {config.level}: tier {config.tier_name}")
    print(f"  Nodes: {config.node_count}")
    print(f"  Colors: {config.color_count}")
    print(f"  Shuffle moves: {config.shuffle_moves}")
    print(f"  Session time: {config.session_time_limit:.0f}s")
    print(f"  Score: {config.solve_score} (x{config.combo_multiplier} from combo {config.combo_threshold})")
    print(f"  Layout pool: {', '.join(h.name for h in config.layout_pool) or '(empty)'}")

    try:
        puzzle = PuzzleGenerator(rng).generate(config)
    except GenerationError as e:
        print(f"\nGeneration failed: {e}")
        sys.exit(1)

    presses = puzzle.solution_presses()
    print(f"\nPuzzle generated on {puzzle.layout.name}")
    print(f"  Target color: {puzzle.target_color}")
    print(f"  Colors: {puzzle.colors().tolist()}")
    print(f"  Mismatched: {puzzle.mismatch_count()}/{puzzle.node_count}")
    print("  Solution:")
    for node_id, count in enumerate(presses.tolist()):
        if count:
            print(f"    press node {node_id} x{count}")
    if not presses.any():
        print("    already solved")

    puzzle.discard()


if __name__ == "__main__":
    main()
