"""
Unit Tests for Piece Encoding

Tests for the int piece encoding: color/type extraction, reconstruction,
the empty-square sentinel and FEN symbols.
"""

import pytest

from chessling.board.pieces import (
    EMPTY,
    Color,
    Piece,
    PieceType,
    get_color,
    get_piece_type,
    make_piece,
    other_color,
    piece_from_symbol,
    piece_symbol,
)


class TestPieceEncoding:
    """Tests for color/type packing."""

    @pytest.mark.parametrize("color", [Color.WHITE, Color.BLACK])
    @pytest.mark.parametrize(
        "piece_type",
        [PieceType.PAWN, PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN, PieceType.KING],
    )
    def test_color_and_type_are_recoverable(self, color, piece_type):
        """Test that a piece rebuilt from its parts is the same piece."""
        piece = make_piece(color, piece_type)

        assert get_color(piece) == color
        assert get_piece_type(piece) == piece_type
        assert make_piece(get_color(piece), get_piece_type(piece)) == piece

    def test_named_pieces_match_encoding(self):
        """Test that Piece members agree with make_piece."""
        assert make_piece(Color.WHITE, PieceType.KING) == Piece.WHITE_KING
        assert make_piece(Color.BLACK, PieceType.PAWN) == Piece.BLACK_PAWN

    def test_none_collapses_to_empty(self):
        """Test that NONE color or NONE type always gives the empty sentinel."""
        assert make_piece(Color.NONE, PieceType.QUEEN) == EMPTY
        assert make_piece(Color.WHITE, PieceType.NONE) == EMPTY
        assert make_piece(Color.NONE, PieceType.NONE) == EMPTY

    def test_empty_has_no_color_or_type(self):
        """Test that the empty square reports NONE for both parts."""
        assert get_color(EMPTY) == Color.NONE
        assert get_piece_type(EMPTY) == PieceType.NONE

    def test_other_color(self):
        """Test color flipping."""
        assert other_color(Color.WHITE) == Color.BLACK
        assert other_color(Color.BLACK) == Color.WHITE
        assert other_color(Color.NONE) == Color.NONE


class TestPieceSymbols:
    """Tests for FEN letters."""

    def test_symbols(self):
        """Test upper case for White, lower case for Black."""
        assert piece_symbol(Piece.WHITE_KNIGHT) == "N"
        assert piece_symbol(Piece.BLACK_QUEEN) == "q"
        assert piece_symbol(EMPTY) == "."

    def test_symbol_round_trip(self):
        """Test that every piece survives symbol conversion."""
        for piece in Piece:
            assert piece_from_symbol(piece_symbol(piece)) == piece

    def test_unknown_symbol_raises(self):
        """Test that unknown letters are rejected."""
        with pytest.raises(ValueError):
            piece_from_symbol("x")
