"""
Evaluation Module

This module provides position evaluation functions for the chess engine.
The key design principle is that evaluators are SWAPPABLE - the search
algorithm works with any evaluator that implements the base interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - MaterialEvaluator: Material count plus pawn advancement

Data Flow:
    GameState → evaluator.evaluate() → int
                                       Positive = White advantage
                                       Negative = Black advantage
                                       ±1000 = a king is missing
"""

from chessling.evaluation.base import Evaluator, KING_CAPTURED_SCORE, king_capture_score
from chessling.evaluation.material import MaterialEvaluator, PIECE_VALUES, evaluate

__all__ = [
    'Evaluator',
    'KING_CAPTURED_SCORE',
    'MaterialEvaluator',
    'PIECE_VALUES',
    'evaluate',
    'king_capture_score',
]
