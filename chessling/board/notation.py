"""
Notation Interop

Conversions between chessling values and standard chess notation, backed by
python-chess:

    - Square names:  (row, col) ↔ "e4"
    - FEN:           GameState ↔ FEN string
    - UCI moves:     Move ↔ "e2e4" / "e7e8q"

Row r maps to rank r + 1 and column c to file "a" + c, so python-chess's
square index is ``chess.square(col, row)``.

FEN limitations:
    - The en passant field is ignored on import and written as "-".
    - Halfmove/fullmove counters are not tracked and written as "0 1".
    - Castling flags are carried as-is (K/Q/k/q), without python-chess's
      rook-presence cleaning, so rights survive a round trip unchanged.
"""

from typing import Dict

import chess

from chessling.board.pieces import EMPTY, Color, PieceType, get_color, get_piece_type, make_piece
from chessling.board.state import CastlingRights, GameState, Move, Square

# Piece type mapping
TO_CHESS_TYPE: Dict[int, int] = {
    PieceType.PAWN: chess.PAWN,
    PieceType.KNIGHT: chess.KNIGHT,
    PieceType.BISHOP: chess.BISHOP,
    PieceType.ROOK: chess.ROOK,
    PieceType.QUEEN: chess.QUEEN,
    PieceType.KING: chess.KING,
}
FROM_CHESS_TYPE: Dict[int, int] = {v: k for k, v in TO_CHESS_TYPE.items()}


def square_index(square: Square) -> int:
    """python-chess square index (0=A1, 63=H8) of (row, col)."""
    row, col = square
    return chess.square(col, row)


def index_to_square(index: int) -> Square:
    """(row, col) of a python-chess square index."""
    return chess.square_rank(index), chess.square_file(index)


def square_name(square: Square) -> str:
    """Algebraic name of (row, col), e.g. (3, 4) → "e4"."""
    return chess.square_name(square_index(square))


def parse_square(name: str) -> Square:
    """
    (row, col) of an algebraic square name.

    Raises:
        ValueError: If the name is not a valid square
    """
    return index_to_square(chess.parse_square(name))


def state_from_fen(fen: str) -> GameState:
    """
    Build a GameState from a FEN string.

    Raises:
        ValueError: If python-chess rejects the FEN
    """
    board = chess.Board(fen)

    rows = [[EMPTY] * 8 for _ in range(8)]
    for index, piece in board.piece_map().items():
        row, col = index_to_square(index)
        color = Color.WHITE if piece.color == chess.WHITE else Color.BLACK
        rows[row][col] = make_piece(color, FROM_CHESS_TYPE[piece.piece_type])

    fields = fen.split()
    flags = fields[2] if len(fields) > 2 else "-"
    castling = {
        Color.WHITE: CastlingRights(king_side="K" in flags, queen_side="Q" in flags),
        Color.BLACK: CastlingRights(king_side="k" in flags, queen_side="q" in flags),
    }
    current = Color.WHITE if board.turn == chess.WHITE else Color.BLACK
    return GameState(rows, current, castling)


def state_to_board(state: GameState) -> chess.Board:
    """
    python-chess Board with the same pieces and side to move.

    Castling rights are set from ``state`` but python-chess may drop any
    right whose king or rook is not on its original square.
    """
    board = chess.Board(None)
    for square, piece in state.iter_pieces():
        chess_piece = chess.Piece(
            TO_CHESS_TYPE[get_piece_type(piece)], get_color(piece) == Color.WHITE
        )
        board.set_piece_at(square_index(square), chess_piece)
    board.turn = state.current == Color.WHITE
    board.set_castling_fen(_castling_flags(state))
    return board


def _castling_flags(state: GameState) -> str:
    white = state.castling_rights(Color.WHITE)
    black = state.castling_rights(Color.BLACK)
    flags = (
        ("K" if white.king_side else "")
        + ("Q" if white.queen_side else "")
        + ("k" if black.king_side else "")
        + ("q" if black.queen_side else "")
    )
    return flags or "-"


def state_to_fen(state: GameState) -> str:
    """FEN string of a GameState (no en passant, counters "0 1")."""
    placement = state_to_board(state).board_fen()
    side = "w" if state.current == Color.WHITE else "b"
    return f"{placement} {side} {_castling_flags(state)} - 0 1"


def move_to_uci(move: Move) -> str:
    """UCI string of a move; the promotion letter is only added when set."""
    promotion = TO_CHESS_TYPE.get(move.promotion)
    return chess.Move(
        square_index(move.from_square), square_index(move.to_square), promotion=promotion
    ).uci()


def move_from_uci(text: str) -> Move:
    """
    Parse a UCI move string.

    Raises:
        ValueError: If the text is not a UCI move or is the null move "0000"
    """
    chess_move = chess.Move.from_uci(text)
    if not chess_move:
        raise ValueError("Null move has no chessling equivalent")
    promotion = FROM_CHESS_TYPE.get(chess_move.promotion, PieceType.NONE)
    return Move(
        index_to_square(chess_move.from_square),
        index_to_square(chess_move.to_square),
        PieceType(promotion),
    )
