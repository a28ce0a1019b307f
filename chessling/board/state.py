"""
Game State and Move Generation

This module is the rules engine. A ``GameState`` is an immutable snapshot of
the board, the side to move and both colors' castling rights. Applying a move
with ``GameState.do()`` never touches the source state: it returns a new
state that shares every untouched row tuple with its parent and rebuilds only
the rows the move writes to.

Board Orientation:
    - Row 0 = Rank 1 (White's back rank)
    - Row 7 = Rank 8 (Black's back rank)
    - Column 0 = A-file
    - Column 7 = H-file

Move Generation:
    - target_fields():       pseudo-legal targets of the piece on a square
    - legal_target_fields(): pseudo-legal targets that keep the own king safe
    - legal_moves():         every legal Move of a color

Known Limitations:
    - En passant is not modelled. A pawn that double-steps can never be
      captured in passing.
    - Attack detection reuses move generation, so pawns only "attack" a
      diagonal square when an enemy piece stands on it, and "attack" the
      empty square straight in front of them.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from chessling.board.pieces import (
    EMPTY,
    VALID_PIECES,
    Color,
    Piece,
    PieceType,
    get_color,
    get_piece_type,
    make_piece,
    other_color,
    piece_symbol,
)

Square = Tuple[int, int]
Row = Tuple[int, ...]

NO_KING: Square = (-1, -1)

ROOK_DIRECTIONS = ((1, 0), (-1, 0), (0, 1), (0, -1))
BISHOP_DIRECTIONS = ((1, 1), (-1, 1), (1, -1), (-1, -1))
KNIGHT_OFFSETS = ((2, -1), (2, 1), (1, 2), (-1, 2), (-2, 1), (-2, -1), (-1, -2), (1, -2))
KING_OFFSETS = ((-1, -1), (-1, 0), (-1, 1), (0, 1), (1, 1), (1, 0), (1, -1), (0, -1))

KING_COLUMN = 4
QUEEN_SIDE_ROOK_COLUMN = 0
KING_SIDE_ROOK_COLUMN = 7

PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


def on_board(row: int, col: int) -> bool:
    """True if (row, col) lies on the 8x8 board."""
    return 0 <= row < 8 and 0 <= col < 8


def home_row(color: int) -> int:
    """Back rank of a color: 0 for White, 7 for Black."""
    return 0 if color == Color.WHITE else 7


def last_row(color: int) -> int:
    """Promotion rank of a color: 7 for White, 0 for Black."""
    return 7 if color == Color.WHITE else 0


@dataclass(frozen=True)
class CastlingRights:
    """Whether a color may still castle on either wing."""

    king_side: bool = True
    queen_side: bool = True


NO_CASTLING = CastlingRights(king_side=False, queen_side=False)


@dataclass(frozen=True)
class Move:
    """
    A move from one square to another.

    Attributes:
        from_square: (row, col) the piece leaves
        to_square: (row, col) the piece lands on
        promotion: PieceType a pawn turns into on its last rank. Ignored for
            every other move; PieceType.NONE promotes to a queen.
    """

    from_square: Square
    to_square: Square
    promotion: int = PieceType.NONE

    def __str__(self) -> str:
        text = f"{self.from_square}->{self.to_square}"
        if self.promotion != PieceType.NONE:
            text += f"={PieceType(self.promotion).name}"
        return text


class CheckInfo(NamedTuple):
    """Result of ``GameState.is_check``; ``king`` is NO_KING if absent."""

    in_check: bool
    king: Square


_BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)
_EMPTY_ROW: Row = (EMPTY,) * 8

INITIAL_ROWS: Tuple[Row, ...] = (
    tuple(make_piece(Color.WHITE, piece_type) for piece_type in _BACK_RANK),
    (int(Piece.WHITE_PAWN),) * 8,
    _EMPTY_ROW,
    _EMPTY_ROW,
    _EMPTY_ROW,
    _EMPTY_ROW,
    (int(Piece.BLACK_PAWN),) * 8,
    tuple(make_piece(Color.BLACK, piece_type) for piece_type in _BACK_RANK),
)


class GameState:
    """
    Immutable chess position.

    Construct the standard start with ``GameState.initial()`` and derive every
    later position with ``do()``. Arbitrary positions (tests, FEN import,
    deserialization) go through the constructor, which validates its input.

    Attributes:
        rows: 8 row tuples of 8 pieces each
        current: Color to move next
    """

    __slots__ = ("_rows", "_current", "_castling")

    def __init__(
        self,
        rows: Sequence[Sequence[int]],
        current: int = Color.WHITE,
        castling: Optional[Dict[int, CastlingRights]] = None,
    ):
        """
        Build a position from raw rows.

        Args:
            rows: 8 sequences of 8 piece values, row 0 = White's back rank
            current: Color.WHITE or Color.BLACK
            castling: Rights per color; both colors keep all rights if omitted

        Raises:
            ValueError: If the rows are not 8x8 valid pieces or the color is
                not WHITE/BLACK
        """
        board = tuple(tuple(int(piece) for piece in row) for row in rows)
        if len(board) != 8 or any(len(row) != 8 for row in board):
            raise ValueError("Board must have 8 rows of 8 squares")
        for row in board:
            for piece in row:
                if piece not in VALID_PIECES:
                    raise ValueError(f"Invalid piece value: {piece:#x}")
        if current not in (Color.WHITE, Color.BLACK):
            raise ValueError(f"Side to move must be WHITE or BLACK, got {current!r}")

        if castling is None:
            castling = {}
        self._rows = board
        self._current = Color(current)
        self._castling = {
            Color.WHITE: castling.get(Color.WHITE, CastlingRights()),
            Color.BLACK: castling.get(Color.BLACK, CastlingRights()),
        }

    @classmethod
    def initial(cls) -> "GameState":
        """Standard starting position, White to move, all castling rights."""
        return cls._derive(
            INITIAL_ROWS,
            Color.WHITE,
            {Color.WHITE: CastlingRights(), Color.BLACK: CastlingRights()},
        )

    @classmethod
    def _derive(
        cls, rows: Tuple[Row, ...], current: int, castling: Dict[int, CastlingRights]
    ) -> "GameState":
        # Trusted construction from an existing state; skips validation.
        state = cls.__new__(cls)
        state._rows = rows
        state._current = current
        state._castling = castling
        return state

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self._rows

    @property
    def current(self) -> Color:
        return Color(self._current)

    def castling_rights(self, color: int) -> CastlingRights:
        """Castling rights still held by ``color``."""
        return self._castling[color]

    def piece_at(self, row: int, col: int) -> int:
        """Piece on (row, col); off-board squares read as empty."""
        if 0 <= row < 8 and 0 <= col < 8:
            return self._rows[row][col]
        return EMPTY

    def iter_pieces(self, color: Optional[int] = None) -> Iterator[Tuple[Square, int]]:
        """Yield ((row, col), piece) for every occupied square, optionally of one color."""
        for row_index, row in enumerate(self._rows):
            for col_index, piece in enumerate(row):
                if piece == EMPTY:
                    continue
                if color is None or get_color(piece) == color:
                    yield (row_index, col_index), piece

    # ------------------------------------------------------------------
    # Pseudo-legal move generation
    # ------------------------------------------------------------------

    def _probe(self, row: int, col: int, color: int, result: List[Square]) -> bool:
        """
        Record (row, col) if a piece of ``color`` could land there.

        Returns:
            True if a ray through this square must stop (off-board or
            occupied), False if the square is empty and scanning continues.
        """
        if not (0 <= row < 8 and 0 <= col < 8):
            return True
        piece = self._rows[row][col]
        if piece == EMPTY:
            result.append((row, col))
            return False
        if get_color(piece) != color:
            result.append((row, col))
        return True

    def _slide(
        self, square: Square, directions: Iterable[Square], color: int, result: List[Square]
    ) -> None:
        row, col = square
        for d_row, d_col in directions:
            for step in range(1, 8):
                if self._probe(row + d_row * step, col + d_col * step, color, result):
                    break

    def _jump(
        self, square: Square, offsets: Iterable[Square], color: int, result: List[Square]
    ) -> None:
        row, col = square
        for d_row, d_col in offsets:
            self._probe(row + d_row, col + d_col, color, result)

    def _pawn_fields(self, square: Square, color: int, result: List[Square]) -> None:
        row, col = square
        rows = self._rows
        direction = 1 if color == Color.WHITE else -1
        ahead = row + direction
        if not 0 <= ahead < 8:
            return

        if rows[ahead][col] == EMPTY:
            result.append((ahead, col))
            start = 1 if color == Color.WHITE else 6
            two_ahead = row + 2 * direction
            if row == start and rows[two_ahead][col] == EMPTY:
                result.append((two_ahead, col))

        enemy = other_color(color)
        for capture_col in (col + 1, col - 1):
            if 0 <= capture_col < 8 and get_color(rows[ahead][capture_col]) == enemy:
                result.append((ahead, capture_col))

    def _king_fields(self, square: Square, color: int, result: List[Square]) -> None:
        self._jump(square, KING_OFFSETS, color, result)

        y = home_row(color)
        if square != (y, KING_COLUMN):
            return
        rights = self._castling[color]
        rook = make_piece(color, PieceType.ROOK)
        back_rank = self._rows[y]
        enemy = other_color(color)

        if (
            rights.queen_side
            and back_rank[QUEEN_SIDE_ROOK_COLUMN] == rook
            and back_rank[1] == EMPTY
            and back_rank[2] == EMPTY
            and back_rank[3] == EMPTY
            and not self.is_any_attacked(((y, 2), (y, 3), (y, 4)), enemy)
        ):
            result.append((y, 2))
        if (
            rights.king_side
            and back_rank[KING_SIDE_ROOK_COLUMN] == rook
            and back_rank[5] == EMPTY
            and back_rank[6] == EMPTY
            and not self.is_any_attacked(((y, 4), (y, 5), (y, 6)), enemy)
        ):
            result.append((y, 6))

    def target_fields(self, square: Square) -> List[Square]:
        """
        Pseudo-legal target squares of the piece on ``square``.

        Does not check whether the move leaves the mover's own king
        attacked. An empty or off-board square has no targets.
        """
        row, col = square
        square = (row, col)
        piece = self.piece_at(row, col)
        color = get_color(piece)
        piece_type = get_piece_type(piece)
        result: List[Square] = []

        if piece_type == PieceType.PAWN:
            self._pawn_fields(square, color, result)
        elif piece_type == PieceType.ROOK:
            self._slide(square, ROOK_DIRECTIONS, color, result)
        elif piece_type == PieceType.KNIGHT:
            self._jump(square, KNIGHT_OFFSETS, color, result)
        elif piece_type == PieceType.BISHOP:
            self._slide(square, BISHOP_DIRECTIONS, color, result)
        elif piece_type == PieceType.QUEEN:
            self._slide(square, ROOK_DIRECTIONS, color, result)
            self._slide(square, BISHOP_DIRECTIONS, color, result)
        elif piece_type == PieceType.KING:
            self._king_fields(square, color, result)
        return result

    # ------------------------------------------------------------------
    # Attacks and check
    # ------------------------------------------------------------------

    def _reaches_any(self, square: Square, piece: int, fields: Sequence[Square]) -> bool:
        short_range = get_piece_type(piece) in (PieceType.KING, PieceType.PAWN)
        targets = None
        for field in fields:
            # King targets recurse into attack detection through castling;
            # never expand a king or pawn toward a field it cannot reach.
            if short_range and abs(field[0] - square[0]) > 1:
                continue
            if targets is None:
                targets = self.target_fields(square)
            if field in targets:
                return True
        return False

    def is_any_attacked(self, fields: Iterable[Square], by_color: int) -> bool:
        """True if any piece of ``by_color`` has a pseudo-legal target in ``fields``."""
        fields = tuple(tuple(field) for field in fields)
        for square, piece in self.iter_pieces(by_color):
            if self._reaches_any(square, piece, fields):
                return True
        return False

    def find_king(self, color: int) -> Square:
        """Coordinates of ``color``'s king, NO_KING if it is not on the board."""
        king = make_piece(color, PieceType.KING)
        for square, piece in self.iter_pieces(color):
            if piece == king:
                return square
        return NO_KING

    def is_check(self, color: int) -> CheckInfo:
        """
        Whether ``color``'s king is attacked by the other color.

        A missing king is reported as not in check, with ``king == NO_KING``.
        """
        king = self.find_king(color)
        if king == NO_KING:
            return CheckInfo(False, NO_KING)
        return CheckInfo(self.is_any_attacked((king,), other_color(color)), king)

    # ------------------------------------------------------------------
    # Legal moves
    # ------------------------------------------------------------------

    def legal_target_fields(self, square: Square) -> List[Square]:
        """Pseudo-legal targets that do not leave the mover's king in check."""
        color = get_color(self.piece_at(*square))
        if color == Color.NONE:
            return []
        return [
            target
            for target in self.target_fields(square)
            if not self.do(Move(square, target)).is_check(color).in_check
        ]

    def legal_moves(self, color: Optional[int] = None) -> List[Move]:
        """
        Every legal move of ``color`` (default: side to move).

        Pawn moves onto the last rank are expanded into one move per
        promotion piece.
        """
        if color is None:
            color = self._current
        pawn = make_piece(color, PieceType.PAWN)
        promotion_row = last_row(color)
        moves = []
        for square, piece in self.iter_pieces(color):
            for target in self.legal_target_fields(square):
                if piece == pawn and target[0] == promotion_row:
                    moves.extend(Move(square, target, promotion) for promotion in PROMOTION_TYPES)
                else:
                    moves.append(Move(square, target))
        return moves

    def has_legal_move(self, color: int) -> bool:
        """True if ``color`` has at least one legal move."""
        for square, _ in self.iter_pieces(color):
            if self.legal_target_fields(square):
                return True
        return False

    def is_checkmate(self, color: int) -> bool:
        """True if ``color`` has no legal move and its king is attacked."""
        if self.has_legal_move(color):
            return False
        return self.is_check(color).in_check

    def is_stalemate(self, color: int) -> bool:
        """True if ``color`` has no legal move but is not in check."""
        if self.has_legal_move(color):
            return False
        return not self.is_check(color).in_check

    def is_promotion(self, from_square: Square, to_square: Square) -> bool:
        """True if moving from ``from_square`` to ``to_square`` promotes a pawn of the side to move."""
        if self.piece_at(*from_square) != make_piece(self._current, PieceType.PAWN):
            return False
        return to_square[0] == last_row(self._current)

    # ------------------------------------------------------------------
    # Move application
    # ------------------------------------------------------------------

    def do(self, move: Move) -> "GameState":
        """
        Apply ``move`` and return the resulting state.

        The receiver is never modified. Rows the move does not touch are
        shared with the returned state. Moving from an empty square, or onto
        an off-board square, returns the receiver itself.
        """
        from_row, from_col = move.from_square
        to_row, to_col = move.to_square
        piece = self.piece_at(from_row, from_col)
        if piece == EMPTY or not on_board(to_row, to_col):
            return self

        rows = list(self._rows)
        castling = dict(self._castling)
        color = get_color(piece)
        piece_type = get_piece_type(piece)

        if piece_type == PieceType.KING and abs(to_col - from_col) > 1:
            back_rank = list(rows[from_row])
            back_rank[from_col] = EMPTY
            back_rank[to_col] = piece
            if to_col > from_col:
                rook_from, rook_to = KING_SIDE_ROOK_COLUMN, 5
            else:
                rook_from, rook_to = QUEEN_SIDE_ROOK_COLUMN, 3
            back_rank[rook_to] = back_rank[rook_from]
            back_rank[rook_from] = EMPTY
            rows[from_row] = tuple(back_rank)
            castling[color] = NO_CASTLING
        else:
            placed = piece
            if self.is_promotion(move.from_square, move.to_square):
                promotion = move.promotion if move.promotion in PROMOTION_TYPES else PieceType.QUEEN
                placed = make_piece(self._current, promotion)

            source = list(rows[from_row])
            source[from_col] = EMPTY
            if to_row == from_row:
                source[to_col] = placed
                rows[from_row] = tuple(source)
            else:
                rows[from_row] = tuple(source)
                target = list(rows[to_row])
                target[to_col] = placed
                rows[to_row] = tuple(target)
            castling[color] = _revoke_rights(castling[color], piece_type, move.from_square, color)

        return GameState._derive(tuple(rows), other_color(self._current), castling)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            self._rows == other._rows
            and self._current == other._current
            and self._castling == other._castling
        )

    def __hash__(self) -> int:
        return hash(
            (
                self._rows,
                int(self._current),
                self._castling[Color.WHITE],
                self._castling[Color.BLACK],
            )
        )

    def __repr__(self) -> str:
        return (
            f"GameState(current={self.current.name}, "
            f"white={self._castling[Color.WHITE]}, black={self._castling[Color.BLACK]})"
        )

    def __str__(self) -> str:
        lines = []
        for row in reversed(self._rows):
            lines.append(" ".join(piece_symbol(piece) for piece in row))
        return "\n".join(lines)


def _revoke_rights(
    rights: CastlingRights, piece_type: int, from_square: Square, color: int
) -> CastlingRights:
    """Castling rights left after ``piece_type`` moves away from ``from_square``."""
    if piece_type == PieceType.KING:
        return NO_CASTLING
    if piece_type == PieceType.ROOK and from_square[0] == home_row(color):
        if from_square[1] == QUEEN_SIDE_ROOK_COLUMN and rights.queen_side:
            return replace(rights, queen_side=False)
        if from_square[1] == KING_SIDE_ROOK_COLUMN and rights.king_side:
            return replace(rights, king_side=False)
    return rights
