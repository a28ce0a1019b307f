"""
Search Module

This module implements move selection: a fixed-depth minimax search with
alpha-beta pruning, plus a worker that runs searches in the background.

Key Components:
    - reasonable_moves: Pseudo-legal candidate moves of the side to move
    - min_value / max_value: Mutually recursive alpha-beta search
    - find_best_move: Root-level search function
    - request_best_move: Synchronous best move (None at terminal roots)
    - SearchWorker: Asynchronous best move through a worker thread/process
"""

from chessling.search.alphabeta import (
    SearchResult,
    find_best_move,
    max_value,
    min_value,
    reasonable_moves,
    request_best_move,
)
from chessling.search.worker import SearchWorker, search_request

__all__ = [
    'SearchResult',
    'SearchWorker',
    'find_best_move',
    'max_value',
    'min_value',
    'reasonable_moves',
    'request_best_move',
    'search_request',
]
