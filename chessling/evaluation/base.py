"""
Abstract Evaluator Interface

This module defines the abstract base class for all position evaluators.
By defining a common interface, we can swap between evaluators without
modifying the search algorithm.

Key Principles:
    1. Evaluators are stateless
    2. evaluate() always returns a score from White's perspective
    3. Positive = White advantage, Negative = Black advantage
    4. A position without a king is terminal: ±KING_CAPTURED_SCORE

Convention:
    - Material in pawn tenths (pawn = 10, queen = 90)
    - The search never asks whether a side is checkmated; a king that can be
      captured inside the horizon shows up as a terminal score instead
"""

from abc import ABC, abstractmethod
from typing import Optional

from chessling.board.state import GameState

# Evaluation constants
KING_CAPTURED_SCORE = 1000


def king_capture_score(white_king: bool, black_king: bool) -> Optional[int]:
    """
    Terminal score for the kings still on the board.

    The White king is checked first, so a board without either king scores
    as a White loss.

    Returns:
        -KING_CAPTURED_SCORE without a White king, +KING_CAPTURED_SCORE
        without a Black king, None while both kings stand
    """
    if not white_king:
        return -KING_CAPTURED_SCORE
    if not black_king:
        return KING_CAPTURED_SCORE
    return None


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    All evaluator implementations must inherit from this class and implement
    the evaluate() method.
    """

    @abstractmethod
    def evaluate(self, state: GameState) -> int:
        """
        Evaluate a position from White's perspective.

        Args:
            state: Position to evaluate

        Returns:
            int: Score, positive when White is better
        """
        pass

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
