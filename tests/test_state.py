"""
Unit Tests for the Rules Engine

Tests for GameState, focusing on:
    - Pseudo-legal move generation per piece type
    - Castling candidates and castling rights
    - Attack, check, checkmate and stalemate detection
    - Move application: purity, row sharing, promotion
    - Edge cases (off-board squares, empty source, missing king)
"""

import pytest

from chessling.board.notation import state_from_fen
from chessling.board.pieces import EMPTY, Color, Piece, PieceType
from chessling.board.state import NO_KING, CastlingRights, CheckInfo, GameState, Move
from chessling.search.alphabeta import reasonable_moves


def play(state, *moves):
    """Apply a sequence of ((row, col), (row, col)) pairs."""
    for from_square, to_square in moves:
        state = state.do(Move(from_square, to_square))
    return state


class TestInitialPosition:
    """Tests for the standard starting position."""

    @pytest.fixture
    def state(self):
        return GameState.initial()

    def test_layout(self, state):
        """Test back ranks, pawns and side to move."""
        assert state.piece_at(0, 4) == Piece.WHITE_KING
        assert state.piece_at(0, 3) == Piece.WHITE_QUEEN
        assert state.piece_at(7, 4) == Piece.BLACK_KING
        assert all(state.piece_at(1, col) == Piece.WHITE_PAWN for col in range(8))
        assert all(state.piece_at(6, col) == Piece.BLACK_PAWN for col in range(8))
        assert all(state.piece_at(row, col) == EMPTY for row in range(2, 6) for col in range(8))
        assert state.current == Color.WHITE

    def test_all_castling_rights(self, state):
        """Test that both colors start with both rights."""
        assert state.castling_rights(Color.WHITE) == CastlingRights(True, True)
        assert state.castling_rights(Color.BLACK) == CastlingRights(True, True)

    def test_twenty_candidate_moves(self, state):
        """Test 16 pawn moves plus 4 knight moves for White."""
        moves = reasonable_moves(state)

        assert len(moves) == 20
        pawn_moves = [m for m in moves if state.piece_at(*m.from_square) == Piece.WHITE_PAWN]
        knight_moves = [m for m in moves if state.piece_at(*m.from_square) == Piece.WHITE_KNIGHT]
        assert len(pawn_moves) == 16
        assert len(knight_moves) == 4

    def test_king_has_no_moves(self, state):
        """Test that the boxed-in king has no moves and no castling candidates."""
        assert state.target_fields((0, 4)) == []
        assert state.legal_target_fields((0, 4)) == []

    def test_knight_targets(self, state):
        """Test the b1 knight's two jumps."""
        assert sorted(state.target_fields((0, 1))) == [(2, 0), (2, 2)]

    def test_symmetric_opening_no_check(self, state):
        """Test that e4 e5 leaves neither side in check."""
        state = play(state, ((1, 4), (3, 4)), ((6, 4), (4, 4)))

        assert state.is_check(Color.WHITE).in_check is False
        assert state.is_check(Color.BLACK).in_check is False
        assert state.current == Color.WHITE

    def test_str_diagram(self, state):
        """Test that the diagram has rank 8 on top."""
        lines = str(state).splitlines()

        assert lines[0] == "r n b q k b n r"
        assert lines[-1] == "R N B Q K B N R"


class TestPieceMovement:
    """Tests for pseudo-legal target generation."""

    def test_pawn_blocked(self):
        """Test that a blocked pawn has neither step nor double step."""
        state = state_from_fen("4k3/8/8/8/8/4n3/4P3/4K3 w - - 0 1")

        assert state.target_fields((1, 4)) == []

    def test_pawn_double_step_needs_empty_destination(self):
        """Test that a piece on the fourth rank stops the double step."""
        state = state_from_fen("4k3/8/8/8/4n3/8/4P3/4K3 w - - 0 1")

        assert state.target_fields((1, 4)) == [(2, 4)]

    def test_pawn_captures_only_enemies(self):
        """Test diagonal captures of enemy pieces but not own pieces."""
        state = state_from_fen("4k3/8/8/8/8/3p1N2/4P3/4K3 w - - 0 1")

        assert sorted(state.target_fields((1, 4))) == [(2, 3), (2, 4), (3, 4)]

    def test_pawn_never_captures_empty_diagonal(self):
        """Test that there is no en passant-style capture onto an empty square."""
        state = state_from_fen("4k3/8/8/3Pp3/8/8/8/4K3 w - e6 0 1")

        assert sorted(state.target_fields((4, 3))) == [(5, 3)]

    def test_black_pawn_moves_down(self):
        """Test that Black pawns advance toward row 0."""
        state = state_from_fen("4k3/4p3/8/8/8/8/8/4K3 b - - 0 1")

        assert sorted(state.target_fields((6, 4))) == [(4, 4), (5, 4)]

    def test_rook_on_empty_board(self):
        """Test that a central rook reaches 14 squares."""
        state = state_from_fen("4k3/8/8/8/3R4/8/8/4K3 w - - 0 1")

        assert len(state.target_fields((3, 3))) == 14

    def test_rook_stops_at_pieces(self):
        """Test that rays include enemy pieces and exclude own pieces."""
        state = state_from_fen("4k3/3p4/8/8/3R4/8/3P4/4K3 w - - 0 1")
        targets = state.target_fields((3, 3))

        assert len(targets) == 11
        assert (6, 3) in targets
        assert (7, 3) not in targets
        assert (1, 3) not in targets

    def test_queen_on_empty_board(self):
        """Test that a d4 queen reaches 27 squares."""
        state = state_from_fen("4k3/8/8/8/3Q4/8/8/4K3 w - - 0 1")

        assert len(state.target_fields((3, 3))) == 27

    def test_knight_in_corner(self):
        """Test that a cornered knight has two jumps."""
        state = state_from_fen("4k3/8/8/8/8/8/8/N3K3 w - - 0 1")

        assert sorted(state.target_fields((0, 0))) == [(1, 2), (2, 1)]

    def test_off_board_is_empty(self):
        """Test that off-board coordinates read as empty and never raise."""
        state = GameState.initial()

        assert state.piece_at(-1, 0) == EMPTY
        assert state.piece_at(8, 8) == EMPTY
        assert state.piece_at(3, 12) == EMPTY
        assert state.target_fields((9, 9)) == []
        assert state.target_fields((4, 4)) == []


class TestLegalMoves:
    """Tests for legal filtering."""

    def test_pinned_piece_cannot_move(self):
        """Test that a bishop pinned to its king has no legal moves."""
        state = state_from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")

        assert state.target_fields((1, 4)) != []
        assert state.legal_target_fields((1, 4)) == []

    def test_king_avoids_attacked_squares(self):
        """Test that the king cannot step onto a rook-controlled rank."""
        state = state_from_fen("4k3/8/8/8/8/8/r7/4K3 w - - 0 1")

        assert sorted(state.legal_target_fields((0, 4))) == [(0, 3), (0, 5)]

    def test_empty_square_has_no_legal_targets(self):
        """Test legal targets of an empty square."""
        assert GameState.initial().legal_target_fields((3, 3)) == []

    def test_promotions_expand_to_four_moves(self):
        """Test that legal_moves offers every promotion piece."""
        state = state_from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
        promotions = {m.promotion for m in state.legal_moves() if m.from_square == (6, 4)}

        assert promotions == {PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT}


class TestCheck:
    """Tests for attack and check detection."""

    def test_check_reports_king_square(self):
        """Test that is_check returns the attacked king's coordinates."""
        state = state_from_fen("4k3/8/8/8/8/8/8/4K2r w - - 0 1")

        assert state.is_check(Color.WHITE) == CheckInfo(True, (0, 4))
        assert state.is_check(Color.BLACK) == CheckInfo(False, (7, 4))

    def test_missing_king_is_not_check(self):
        """Test that a missing king is reported as no check at NO_KING."""
        state = state_from_fen("8/8/8/8/8/8/8/4K2r w - - 0 1")

        assert state.is_check(Color.BLACK) == CheckInfo(False, NO_KING)
        assert NO_KING == (-1, -1)

    def test_is_any_attacked(self):
        """Test attack detection on a set of squares."""
        state = state_from_fen("4k3/8/8/8/8/8/r7/4K3 w - - 0 1")

        assert state.is_any_attacked([(1, 4)], Color.BLACK)
        assert state.is_any_attacked([(5, 5), (1, 7)], Color.BLACK)
        assert not state.is_any_attacked([(0, 3), (0, 5)], Color.BLACK)

    def test_adjacent_kings_terminate(self):
        """Test that king-versus-king attack checks do not recurse forever."""
        state = state_from_fen("8/8/8/8/8/8/4k3/4K2R w K - 0 1")

        assert state.is_check(Color.WHITE).in_check
        assert (0, 6) not in state.target_fields((0, 4))


class TestCheckmate:
    """Tests for checkmate and stalemate."""

    MATE_FEN = "7k/8/6Q1/8/8/8/8/K6R b - - 0 1"
    STALEMATE_FEN = "7k/8/6Q1/8/8/8/8/K7 b - - 0 1"

    def test_checkmate(self):
        """Test a rook-and-queen mate on h8."""
        state = state_from_fen(self.MATE_FEN)

        assert state.is_check(Color.BLACK).in_check
        assert state.legal_moves() == []
        assert state.is_checkmate(Color.BLACK)
        assert not state.is_stalemate(Color.BLACK)

    def test_stalemate_is_not_checkmate(self):
        """Test that removing the checking rook leaves zero moves but no mate."""
        state = state_from_fen(self.STALEMATE_FEN)

        assert state.legal_moves() == []
        assert not state.is_checkmate(Color.BLACK)
        assert state.is_stalemate(Color.BLACK)

    def test_side_with_moves_is_not_mated(self):
        """Test that the starting position is neither mate nor stalemate."""
        state = GameState.initial()

        assert not state.is_checkmate(Color.WHITE)
        assert not state.is_stalemate(Color.BLACK)


class TestCastling:
    """Tests for castling candidates and rights."""

    def test_king_side_castling(self):
        """Test castling target, rook relocation and revoked rights."""
        state = state_from_fen("4k3/8/8/8/8/8/8/4K2R w K - 0 1")

        assert (0, 6) in state.legal_target_fields((0, 4))

        castled = state.do(Move((0, 4), (0, 6)))

        assert castled.piece_at(0, 6) == Piece.WHITE_KING
        assert castled.piece_at(0, 5) == Piece.WHITE_ROOK
        assert castled.piece_at(0, 7) == EMPTY
        assert castled.piece_at(0, 4) == EMPTY
        assert castled.castling_rights(Color.WHITE).king_side is False
        assert castled.current == Color.BLACK

    def test_queen_side_castling_black(self):
        """Test Black's long castling."""
        state = state_from_fen("r3k3/8/8/8/8/8/8/4K3 b q - 0 1")

        assert (7, 2) in state.legal_target_fields((7, 4))

        castled = state.do(Move((7, 4), (7, 2)))

        assert castled.piece_at(7, 2) == Piece.BLACK_KING
        assert castled.piece_at(7, 3) == Piece.BLACK_ROOK
        assert castled.piece_at(7, 0) == EMPTY
        assert castled.castling_rights(Color.BLACK) == CastlingRights(False, False)

    def test_both_wings_available(self):
        """Test that both castling targets appear with rooks on both corners."""
        state = state_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        targets = state.legal_target_fields((0, 4))

        assert (0, 2) in targets
        assert (0, 6) in targets

    @pytest.mark.parametrize(
        "fen",
        [
            "4kr2/8/8/8/8/8/8/4K2R w K - 0 1",   # f1 attacked
            "4r1k1/8/8/8/8/8/8/4K2R w K - 0 1",  # king in check
            "4k3/8/8/8/8/8/8/4KB1R w K - 0 1",   # f1 occupied
            "4k3/8/8/8/8/8/8/4K2R w - - 0 1",    # no right
        ],
    )
    def test_king_side_castling_forbidden(self, fen):
        """Test that castling needs the right, empty squares and no attacks."""
        state = state_from_fen(fen)

        assert (0, 6) not in state.target_fields((0, 4))

    def test_king_move_revokes_rights_permanently(self):
        """Test that a king returning home does not regain castling."""
        state = state_from_fen("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        state = play(state, ((0, 4), (0, 5)), ((7, 4), (7, 3)), ((0, 5), (0, 4)), ((7, 3), (7, 4)))

        assert state.piece_at(0, 4) == Piece.WHITE_KING
        assert state.piece_at(0, 7) == Piece.WHITE_ROOK
        assert state.castling_rights(Color.WHITE) == CastlingRights(False, False)
        assert (0, 6) not in state.target_fields((0, 4))

    def test_king_move_from_start_revokes_both(self):
        """Test Ke2 / Ke1 from the opening."""
        state = play(
            GameState.initial(),
            ((1, 4), (3, 4)), ((6, 4), (4, 4)),
            ((0, 4), (1, 4)), ((7, 4), (6, 4)),
            ((1, 4), (0, 4)),
        )

        assert state.castling_rights(Color.WHITE) == CastlingRights(False, False)
        assert state.castling_rights(Color.BLACK) == CastlingRights(False, False)

    def test_rook_move_revokes_its_wing_only(self):
        """Test that a returning a1 rook does not restore the long castle."""
        state = state_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        state = play(state, ((0, 0), (1, 0)), ((7, 7), (6, 7)), ((1, 0), (0, 0)), ((6, 7), (7, 7)))

        assert state.castling_rights(Color.WHITE) == CastlingRights(king_side=True, queen_side=False)
        assert state.castling_rights(Color.BLACK) == CastlingRights(king_side=False, queen_side=True)
        targets = state.target_fields((0, 4))
        assert (0, 6) in targets
        assert (0, 2) not in targets

    def test_rook_returning_to_corner_does_not_restore_right(self):
        """Test that a rook coming back to h8 keeps the right revoked."""
        state = state_from_fen("r3k2r/8/8/8/8/8/8/4K3 b kq - 0 1")
        state = play(
            state,
            ((7, 7), (3, 7)), ((0, 4), (0, 3)),
            ((7, 0), (7, 1)), ((0, 3), (0, 4)),
            ((7, 1), (5, 1)), ((0, 4), (0, 3)),
            ((3, 7), (7, 7)), ((0, 3), (0, 4)),
        )

        assert state.piece_at(7, 7) == Piece.BLACK_ROOK
        assert state.castling_rights(Color.BLACK).king_side is False
        assert (7, 6) not in state.target_fields((7, 4))

    def test_promoted_piece_on_corner_does_not_allow_castling(self):
        """Test that a captured corner rook blocks castling although the right is still held."""
        state = state_from_fen("4k2r/6P1/8/8/8/8/8/4K3 w k - 0 1")
        state = state.do(Move((6, 6), (7, 7), PieceType.ROOK))

        assert state.piece_at(7, 7) == Piece.WHITE_ROOK
        assert state.castling_rights(Color.BLACK).king_side is True
        assert (7, 6) not in state.target_fields((7, 4))


class TestDo:
    """Tests for move application."""

    def test_source_state_is_never_mutated(self):
        """Test that applying every candidate move leaves the source intact."""
        state = play(GameState.initial(), ((1, 4), (3, 4)), ((6, 3), (4, 3)))
        snapshot = [list(row) for row in state.rows]
        rights = (state.castling_rights(Color.WHITE), state.castling_rights(Color.BLACK))
        current = state.current

        for move in reasonable_moves(state):
            state.do(move)

        assert [list(row) for row in state.rows] == snapshot
        assert (state.castling_rights(Color.WHITE), state.castling_rights(Color.BLACK)) == rights
        assert state.current == current

    def test_untouched_rows_are_shared(self):
        """Test row-level copy-on-write."""
        state = GameState.initial()
        after = state.do(Move((1, 4), (3, 4)))

        for row in (0, 2, 4, 5, 6, 7):
            assert after.rows[row] is state.rows[row]
        assert after.rows[1] is not state.rows[1]
        assert after.rows[3] is not state.rows[3]
        assert state.piece_at(1, 4) == Piece.WHITE_PAWN
        assert after.piece_at(3, 4) == Piece.WHITE_PAWN

    def test_capture_overwrites_target(self):
        """Test that a capture replaces the captured piece."""
        state = state_from_fen("4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1")
        after = state.do(Move((3, 4), (4, 3)))

        assert after.piece_at(4, 3) == Piece.WHITE_PAWN
        assert after.piece_at(3, 4) == EMPTY

    def test_empty_source_is_noop(self):
        """Test that moving from an empty square returns the same state."""
        state = GameState.initial()

        assert state.do(Move((3, 3), (4, 3))) is state

    def test_off_board_target_is_noop(self):
        """Test that moving off the board returns the same state."""
        state = GameState.initial()

        assert state.do(Move((1, 4), (8, 4))) is state

    def test_side_to_move_flips(self):
        """Test that each move hands the turn over."""
        state = GameState.initial().do(Move((0, 1), (2, 2)))

        assert state.current == Color.BLACK
        assert state.do(Move((7, 1), (5, 2))).current == Color.WHITE

    @pytest.mark.parametrize(
        "promotion, expected",
        [
            (PieceType.KNIGHT, Piece.WHITE_KNIGHT),
            (PieceType.ROOK, Piece.WHITE_ROOK),
            (PieceType.QUEEN, Piece.WHITE_QUEEN),
            (PieceType.NONE, Piece.WHITE_QUEEN),
        ],
    )
    def test_promotion(self, promotion, expected):
        """Test promotion to the requested piece, queen by default."""
        state = state_from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")

        assert state.is_promotion((6, 4), (7, 4))
        assert state.do(Move((6, 4), (7, 4), promotion)).piece_at(7, 4) == expected

    def test_promotion_field_ignored_for_other_moves(self):
        """Test that a non-pawn move keeps its piece."""
        state = GameState.initial().do(Move((0, 6), (2, 5), PieceType.QUEEN))

        assert state.piece_at(2, 5) == Piece.WHITE_KNIGHT

    def test_black_promotion(self):
        """Test that Black promotes on row 0."""
        state = state_from_fen("4k3/8/8/8/8/8/p7/4K3 b - - 0 1")

        assert state.is_promotion((1, 0), (0, 0))
        assert state.do(Move((1, 0), (0, 0), PieceType.KNIGHT)).piece_at(0, 0) == Piece.BLACK_KNIGHT

    def test_promotion_requires_side_to_move(self):
        """Test that only the side to move's pawns are promotion eligible."""
        state = state_from_fen("k7/4P3/8/8/8/8/8/4K3 b - - 0 1")

        assert not state.is_promotion((6, 4), (7, 4))


class TestValueSemantics:
    """Tests for equality, hashing and construction."""

    def test_equal_states(self):
        """Test that equal positions compare and hash equal."""
        a = GameState.initial().do(Move((1, 4), (3, 4)))
        b = GameState.initial().do(Move((1, 4), (3, 4)))

        assert a == b
        assert hash(a) == hash(b)
        assert a != GameState.initial()

    def test_constructor_copies_rows(self):
        """Test that later changes to the input rows do not leak in."""
        rows = [list(row) for row in GameState.initial().rows]
        state = GameState(rows)
        rows[0][0] = EMPTY

        assert state.piece_at(0, 0) == Piece.WHITE_ROOK
        assert state == GameState.initial()

    @pytest.mark.parametrize(
        "rows",
        [
            [[EMPTY] * 8] * 7,
            [[EMPTY] * 7] * 8,
            [[0x99] + [EMPTY] * 7] + [[EMPTY] * 8] * 7,
        ],
    )
    def test_invalid_rows_raise(self, rows):
        """Test that malformed boards are rejected."""
        with pytest.raises(ValueError):
            GameState(rows)

    def test_invalid_side_raises(self):
        """Test that NONE cannot be the side to move."""
        with pytest.raises(ValueError):
            GameState(GameState.initial().rows, Color.NONE)
