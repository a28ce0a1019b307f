"""
Board Module

This module holds the rules engine: piece encoding, the immutable GameState
with move generation, attack/check detection and move application, plus the
codecs used at the engine's edges.

Key Components:
    - pieces: Color / PieceType / Piece encoding helpers
    - state: GameState, Move, CastlingRights, CheckInfo
    - serialization: dict codec for the search worker boundary
    - notation: FEN and UCI interop through python-chess

Data Flow:
    GameState.initial() → state.do(move) → new GameState (source untouched)
"""

from chessling.board.pieces import Color, Piece, PieceType, get_color, get_piece_type, make_piece
from chessling.board.state import CastlingRights, CheckInfo, GameState, Move, NO_KING

__all__ = [
    'CastlingRights',
    'CheckInfo',
    'Color',
    'GameState',
    'Move',
    'NO_KING',
    'Piece',
    'PieceType',
    'get_color',
    'get_piece_type',
    'make_piece',
]
