"""
Utilities Module

This module provides utility functions for testing and benchmarking the
chess engine.

Key Components:
    - perft: Move generation verification by leaf-node counting
    - Tactical test suite: positions with a known best move
"""

from chessling.utils.testing import (
    TACTICAL_POSITIONS,
    evaluate_position,
    perft,
    run_suite,
)

__all__ = [
    'TACTICAL_POSITIONS',
    'evaluate_position',
    'perft',
    'run_suite',
]
