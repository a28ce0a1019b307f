#!/usr/bin/env python3
"""
Search Benchmark Runner

Runs the tactical test suite at multiple depths and times a search from the
initial position, to track search speed and correctness.

Usage:
    python tools/run_benchmark.py [--depths 1,2,3] [--perft 3] [--verbose]
"""

import argparse
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from chessling.board.state import GameState
from chessling.search.alphabeta import find_best_move
from chessling.utils.testing import perft, run_suite


def format_time(seconds: float) -> str:
    """Format time"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"


def run_benchmark(depths: list[int], perft_depth: int = 0, verbose: bool = False):
    """
    Run the tactical suite and an opening search at multiple depths.

    Args:
        depths: List of depths to test
        perft_depth: If positive, also count perft nodes to this depth
        verbose: If True, print detailed results for each position
    """
    print("=" * 80)
    print("SEARCH BENCHMARK - Chessling")
    print("=" * 80)
    print("Evaluator: Material + pawn advancement")
    print("Search: Fixed-depth minimax with alpha-beta pruning")
    print(f"Depths: {depths}")
    print("=" * 80)

    all_results = []

    for depth in depths:
        print(f"\n{'=' * 80}")
        print(f"DEPTH {depth}")
        print("=" * 80)

        suite = run_suite(depth=depth, verbose=verbose)

        start_time = time.time()
        opening = find_best_move(GameState.initial(), depth)
        opening_time = time.time() - start_time
        nodes_per_sec = opening.nodes / opening_time if opening_time > 0 else 0

        all_results.append({
            'depth': depth,
            'score': suite['score'],
            'total': suite['total'],
            'percentage': suite['percentage'],
            'opening_time': opening_time,
            'opening_nodes': opening.nodes,
            'nodes_per_sec': nodes_per_sec,
        })

        print(f"\nResults at depth {depth}:")
        print(f"  Tactics correct: {suite['score']}/{suite['total']} ({suite['percentage']:.1f}%)")
        print(f"  Tactics time: {format_time(suite['total_time'])}")
        print(f"  Opening search: {opening.move} in {format_time(opening_time)}")
        print(f"  Opening nodes: {opening.nodes:,}")
        print(f"  Nodes/sec: {nodes_per_sec:,.0f}")

        failed = [r for r in suite['results'] if not r.correct]
        if failed and verbose:
            print("\n  Failed positions:")
            for r in failed:
                print(f"    {r.position.id}: Expected {r.position.best_moves}, got {r.found_move}")

    print("\n" + "=" * 80)
    print("SUMMARY TABLE")
    print("=" * 80)
    print(f"{'Depth':<8} {'Correct':<12} {'%':<8} {'Opening':<12} {'Nodes/sec':<15}")
    print("-" * 80)

    for r in all_results:
        print(f"{r['depth']:<8} {r['score']}/{r['total']:<8} {r['percentage']:<7.1f}% {format_time(r['opening_time']):<12} {r['nodes_per_sec']:>12,.0f}")

    if perft_depth > 0:
        print("\n" + "=" * 80)
        print("PERFT")
        print("=" * 80)
        state = GameState.initial()
        for depth in range(1, perft_depth + 1):
            start_time = time.time()
            nodes = perft(state, depth)
            print(f"  perft({depth}) = {nodes:,} in {format_time(time.time() - start_time)}")

    print("\n" + "=" * 80)
    print("Benchmark complete!")
    print("=" * 80)

    return all_results


def main():
    parser = argparse.ArgumentParser(
        description="Run the Chessling search benchmark at multiple depths"
    )
    parser.add_argument(
        "--depths",
        type=str,
        default="1,2,3",
        help="Comma-separated list of depths to test (default: 1,2,3)"
    )
    parser.add_argument(
        "--perft",
        type=int,
        default=0,
        help="Also run perft up to this depth from the initial position"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print detailed results for each position"
    )

    args = parser.parse_args()

    try:
        depths = [int(d.strip()) for d in args.depths.split(",")]
    except ValueError:
        print("Error: depths must be comma-separated integers")
        sys.exit(1)

    try:
        run_benchmark(depths, perft_depth=args.perft, verbose=args.verbose)
    except KeyboardInterrupt:
        print("\n\nBenchmark interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
