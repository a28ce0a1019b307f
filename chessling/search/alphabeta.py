"""
Depth-Bounded Alpha-Beta Search

This module implements the engine's move selection: a fixed-depth minimax
search with alpha-beta pruning over pseudo-legal moves.

Key Concepts:
    - Minimax: White maximises the evaluation, Black minimises it
    - Alpha-Beta: A node stops searching once its running value is already
      at least as good for its own side as the best value its parent has
      found so far; the parent would never choose it
    - Terminal proxy: the search never tests for checkmate. Moves that leave
      a king en prise are explored, and a captured king shows up as the
      evaluator's ±1000 score

Simplifications:
    - Moves are searched in generation order (board scan, row 0 first)
    - No transposition table, iterative deepening or quiescence search
    - Promotions are only tried as queen and knight

Known approximation:
    Because candidate moves are pseudo-legal, a line in which the side to
    move leaves its king attacked is only refuted one ply later, when the
    king is actually captured. At the horizon such a line is scored on
    material alone.

References:
    - Minimax: https://www.chessprogramming.org/Minimax
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from chessling.board.pieces import Color, PieceType
from chessling.board.state import GameState, Move
from chessling.evaluation.base import Evaluator
from chessling.evaluation.material import MaterialEvaluator

logger = logging.getLogger(__name__)

# Starting value of an interior node before any child is searched
NODE_BOUND = 10000
# Starting value at the root; beyond every interior bound so any move wins
ROOT_BOUND = 20000

SEARCH_PROMOTIONS = (PieceType.QUEEN, PieceType.KNIGHT)

_DEFAULT_EVALUATOR = MaterialEvaluator()


@dataclass
class SearchResult:
    """
    Outcome of a root search.

    Attributes:
        move: Best move found, None if the side to move has no candidate
        score: Value of the best move (static evaluation if move is None)
        nodes: Number of positions visited
    """

    move: Optional[Move]
    score: int
    nodes: int


def reasonable_moves(state: GameState) -> List[Move]:
    """
    Candidate moves for the side to move.

    All pseudo-legal moves of every piece of the side to move, in board scan
    order. A pawn move onto the last rank yields exactly two moves, one
    promoting to a queen and one to a knight.
    """
    moves = []
    for square, _ in state.iter_pieces(state.current):
        for target in state.target_fields(square):
            if state.is_promotion(square, target):
                for promotion in SEARCH_PROMOTIONS:
                    moves.append(Move(square, target, promotion))
            else:
                moves.append(Move(square, target))
    return moves


def min_value(
    state: GameState,
    depth: int,
    parent_best: int,
    evaluator: Evaluator,
    nodes_searched: Optional[List[int]] = None,
) -> int:
    """
    Value of ``state`` for the minimising side (Black).

    Args:
        state: Position with Black to move
        depth: Remaining plies; the position is evaluated statically at 0
        parent_best: Best value the maximising parent has found so far
        evaluator: Static evaluator for leaf positions
        nodes_searched: Optional mutable list [count] to track positions visited

    Returns:
        int: Fail-soft value; may be above the true value when the node
        was cut off, which the parent ignores
    """
    if nodes_searched is not None:
        nodes_searched[0] += 1

    if depth <= 0:
        return evaluator.evaluate(state)

    best = NODE_BOUND
    for move in reasonable_moves(state):
        value = max_value(state.do(move), depth - 1, best, evaluator, nodes_searched)
        if value < best:
            best = value
        if best <= parent_best:
            return best
    return best


def max_value(
    state: GameState,
    depth: int,
    parent_best: int,
    evaluator: Evaluator,
    nodes_searched: Optional[List[int]] = None,
) -> int:
    """
    Value of ``state`` for the maximising side (White).

    Mirror image of min_value(): ``parent_best`` is the lowest value the
    minimising parent has found so far.
    """
    if nodes_searched is not None:
        nodes_searched[0] += 1

    if depth <= 0:
        return evaluator.evaluate(state)

    best = -NODE_BOUND
    for move in reasonable_moves(state):
        value = min_value(state.do(move), depth - 1, best, evaluator, nodes_searched)
        if value > best:
            best = value
        if best >= parent_best:
            return best
    return best


def find_best_move(
    state: GameState,
    depth: int,
    evaluator: Optional[Evaluator] = None,
) -> SearchResult:
    """
    Find the best move for the side to move.

    Args:
        state: Position to search
        depth: Search depth in plies (the reference strength uses 6)
        evaluator: Static evaluator (default: MaterialEvaluator)

    Returns:
        SearchResult; ``move`` is None when the side to move has no
        candidate moves. Callers tell checkmate from stalemate with
        GameState.is_checkmate().
    """
    if evaluator is None:
        evaluator = _DEFAULT_EVALUATOR

    minimize = state.current == Color.BLACK
    best_score = ROOT_BOUND if minimize else -ROOT_BOUND
    best_move = None
    nodes = [1]

    for move in reasonable_moves(state):
        child = state.do(move)
        if minimize:
            score = max_value(child, depth - 1, best_score, evaluator, nodes)
            if score < best_score:
                best_score = score
                best_move = move
        else:
            score = min_value(child, depth - 1, best_score, evaluator, nodes)
            if score > best_score:
                best_score = score
                best_move = move

    if best_move is None:
        best_score = evaluator.evaluate(state)
        logger.debug(f"No candidate moves for {state.current.name}")
    else:
        logger.debug(
            f"Search complete: depth={depth}, best_move={best_move}, "
            f"score={best_score}, nodes={nodes[0]}"
        )

    return SearchResult(best_move, best_score, nodes[0])


def request_best_move(state: GameState, depth: int) -> Optional[Move]:
    """Best move for the side to move, or None in a terminal position."""
    return find_best_move(state, depth).move
