"""
UCI Protocol Interface

This module implements the Universal Chess Interface (UCI) protocol, which
lets chess GUIs and tournament managers drive the engine over stdin/stdout.

Protocol Flow:
    GUI → "uci"
    Engine → "id name Chessling 0.1.0"
    Engine → "uciok"
    GUI → "isready"
    Engine → "readyok"
    GUI → "position startpos moves e2e4"
    GUI → "go depth 4"
    Engine → "info depth 4 score cp 0 nodes 12345 time 850"
    Engine → "bestmove e7e5"

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from chessling.uci.interface import UCIEngine

__all__ = ['UCIEngine']
