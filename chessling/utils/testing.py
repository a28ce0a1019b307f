"""
Engine Testing and Benchmarking

This module provides move-generation verification and a small tactical test
suite for the search.

Perft:
    Counts the leaf nodes of the legal move tree to a fixed depth. From the
    standard initial position the counts are 20, 400, 8902 and 197281 for
    depths 1-4, which match standard chess because en passant and castling
    cannot occur within the first four plies.

Tactical Suite:
    Positions whose best move is decided by material and king capture
    within a few plies, sized for the material evaluator and fixed-depth
    search.

Evaluation Metrics:
    - Correct Moves: Number of positions where engine found best move
    - Time per Position: Average thinking time
    - Nodes Searched: Total nodes visited

References:
    - Perft: https://www.chessprogramming.org/Perft_Results
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from chessling.board.notation import move_to_uci, state_from_fen
from chessling.board.state import GameState
from chessling.evaluation.base import Evaluator
from chessling.search.alphabeta import find_best_move


def perft(state: GameState, depth: int) -> int:
    """
    Number of legal move sequences of length ``depth`` from ``state``.

    Promotions count once per promotion piece.
    """
    if depth <= 0:
        return 1
    moves = state.legal_moves()
    if depth == 1:
        return len(moves)
    return sum(perft(state.do(move), depth - 1) for move in moves)


@dataclass
class TestPosition:
    """
    A test position with expected best move(s).

    Attributes:
        fen: Board position in FEN notation
        best_moves: List of acceptable best moves (UCI format)
        depth: Smallest depth at which the move is found
        description: Human-readable description of the position
        id: Position identifier
    """
    __test__ = False

    fen: str
    best_moves: List[str]
    depth: int = 1
    description: str = ""
    id: str = ""


@dataclass
class TestResult:
    """
    Result of testing a single position.

    Attributes:
        position: The test position
        found_move: Move the engine found (UCI format, "" if none)
        score: Evaluation score for the move
        correct: Whether the engine found a best move
        time_taken: Time spent searching (seconds)
        nodes_searched: Number of nodes visited
        depth: Search depth used
    """
    __test__ = False

    position: TestPosition
    found_move: str
    score: int
    correct: bool
    time_taken: float
    nodes_searched: int = 0
    depth: int = 0


TACTICAL_POSITIONS = [
    TestPosition(
        id="TC.01",
        fen="4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1",
        best_moves=["e4d5"],
        depth=1,
        description="Pawn captures the undefended queen"
    ),
    TestPosition(
        id="TC.02",
        fen="4k3/8/8/8/8/8/r7/R3K3 w - - 0 1",
        best_moves=["a1a2"],
        depth=2,
        description="Rook captures the rook in front of it"
    ),
    TestPosition(
        id="TC.03",
        fen="6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1",
        best_moves=["a1a8"],
        depth=3,
        description="Back-rank mate: every reply loses the king"
    ),
]


def evaluate_position(
    position: TestPosition,
    depth: Optional[int] = None,
    evaluator: Optional[Evaluator] = None,
    verbose: bool = False,
) -> TestResult:
    """
    Search a single test position.

    Args:
        position: Test position to evaluate
        depth: Search depth (default: the position's own depth)
        evaluator: Position evaluator (default: MaterialEvaluator)
        verbose: If True, print detailed output

    Returns:
        TestResult with engine's move and whether it was correct
    """
    if depth is None:
        depth = position.depth
    state = state_from_fen(position.fen)

    if verbose:
        print(f"\nTesting {position.id}: {position.description}")
        print(f"FEN: {position.fen}")
        print(f"Expected moves: {position.best_moves}")

    start_time = time.time()
    result = find_best_move(state, depth, evaluator)
    time_taken = time.time() - start_time

    found_move = move_to_uci(result.move) if result.move else ""
    correct = found_move in position.best_moves

    if verbose:
        print(f"Engine found: {found_move or '(none)'} (score: {result.score})")
        print(f"Nodes searched: {result.nodes:,}")
        print(f"Time: {time_taken:.2f}s")
        print(f"Result: {'CORRECT' if correct else 'WRONG'}")

    return TestResult(
        position=position,
        found_move=found_move,
        score=result.score,
        correct=correct,
        time_taken=time_taken,
        nodes_searched=result.nodes,
        depth=depth,
    )


def run_suite(
    positions: Optional[List[TestPosition]] = None,
    depth: Optional[int] = None,
    evaluator: Optional[Evaluator] = None,
    verbose: bool = True,
) -> Dict[str, Any]:
    """
    Run a list of test positions.

    Args:
        positions: Positions to test (default: TACTICAL_POSITIONS)
        depth: Search depth for every position (default: each position's own)
        evaluator: Position evaluator
        verbose: If True, print detailed results

    Returns:
        Dictionary with test results:
            - score: Number of correct positions
            - total: Total number of positions
            - percentage: Success percentage
            - results: List of TestResult objects
            - avg_time: Average time per position
            - total_time: Total search time
            - total_nodes: Nodes visited over all positions
    """
    if positions is None:
        positions = TACTICAL_POSITIONS

    if verbose:
        print("=" * 70)
        print("TACTICAL TEST SUITE")
        print("=" * 70)

    results = [evaluate_position(position, depth, evaluator, verbose=verbose) for position in positions]
    correct_count = sum(1 for result in results if result.correct)
    total_time = sum(result.time_taken for result in results)

    avg_time = total_time / len(positions) if positions else 0
    percentage = (correct_count / len(positions) * 100) if positions else 0

    if verbose:
        print("\n" + "=" * 70)
        print("SUMMARY")
        print("=" * 70)
        print(f"Score: {correct_count}/{len(positions)} ({percentage:.1f}%)")
        print(f"Average time: {avg_time:.2f}s")
        print(f"Total time: {total_time:.2f}s")

    return {
        'score': correct_count,
        'total': len(positions),
        'percentage': percentage,
        'results': results,
        'avg_time': avg_time,
        'total_time': total_time,
        'total_nodes': sum(result.nodes_searched for result in results),
    }
