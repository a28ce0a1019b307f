"""
Piece Encoding

A piece is a plain ``int`` packing a color in the high nibble and a piece
type in the low nibble. This keeps board rows cheap to copy and compare while
still letting color and type be extracted independently.

Encoding:
    0x10-0x15: White pawn, rook, knight, bishop, queen, king
    0x30-0x35: Black pawn, rook, knight, bishop, queen, king
    0x26:      Empty square (color NONE, type NONE)
"""

from enum import IntEnum


class Color(IntEnum):
    """Side owning a piece."""

    WHITE = 0x10
    NONE = 0x20
    BLACK = 0x30


class PieceType(IntEnum):
    """Kind of piece, independent of its color."""

    PAWN = 0x0
    ROOK = 0x1
    KNIGHT = 0x2
    BISHOP = 0x3
    QUEEN = 0x4
    KING = 0x5
    NONE = 0x6


class Piece(IntEnum):
    """Every value a board square can hold."""

    WHITE_PAWN = 0x10
    WHITE_ROOK = 0x11
    WHITE_KNIGHT = 0x12
    WHITE_BISHOP = 0x13
    WHITE_QUEEN = 0x14
    WHITE_KING = 0x15

    BLACK_PAWN = 0x30
    BLACK_ROOK = 0x31
    BLACK_KNIGHT = 0x32
    BLACK_BISHOP = 0x33
    BLACK_QUEEN = 0x34
    BLACK_KING = 0x35

    EMPTY = 0x26


EMPTY = int(Piece.EMPTY)

# FEN letters, white upper case
_TYPE_SYMBOLS = {
    PieceType.PAWN: "p",
    PieceType.ROOK: "r",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_SYMBOL_TYPES = {symbol: piece_type for piece_type, symbol in _TYPE_SYMBOLS.items()}

VALID_PIECES = frozenset(int(piece) for piece in Piece)


def get_color(piece: int) -> int:
    """Return the ``Color`` value of a piece (``Color.NONE`` for empty)."""
    return piece & 0xF0


def get_piece_type(piece: int) -> int:
    """Return the ``PieceType`` value of a piece (``PieceType.NONE`` for empty)."""
    return piece & 0x0F


def make_piece(color: int, piece_type: int) -> int:
    """
    Build a piece from its color and type.

    Any combination involving ``Color.NONE`` or ``PieceType.NONE`` collapses
    to the empty-square sentinel.
    """
    if color == Color.NONE or piece_type == PieceType.NONE:
        return EMPTY
    return color | piece_type


def other_color(color: int) -> int:
    """Return the opposing color (``Color.NONE`` stays ``Color.NONE``)."""
    return 0x40 - color


def piece_symbol(piece: int) -> str:
    """Return the FEN letter of a piece, ``'.'`` for an empty square."""
    symbol = _TYPE_SYMBOLS.get(get_piece_type(piece))
    if symbol is None or get_color(piece) == Color.NONE:
        return "."
    return symbol.upper() if get_color(piece) == Color.WHITE else symbol


def piece_from_symbol(symbol: str) -> int:
    """
    Parse a FEN letter back into a piece.

    Raises:
        ValueError: If the symbol is not one of ``pnbrqkPNBRQK.``
    """
    if symbol == ".":
        return EMPTY
    piece_type = _SYMBOL_TYPES.get(symbol.lower())
    if piece_type is None:
        raise ValueError(f"Unknown piece symbol: {symbol!r}")
    color = Color.WHITE if symbol.isupper() else Color.BLACK
    return make_piece(color, piece_type)
