"""
Material Evaluation

The evaluator used by the alpha-beta search: signed material plus a pawn
advancement bonus.

Evaluation Components:
    - Material: P=10, N=30, B=30, R=50, Q=90, K=0
    - Pawn advancement: +row for White pawns, +(7 - row) for Black pawns,
      i.e. the number of ranks a pawn stands away from its own back rank
    - Missing king: -1000 without a White king, +1000 without a Black king
"""

from chessling.board.pieces import EMPTY, Color, Piece, PieceType, get_color, get_piece_type
from chessling.board.state import GameState
from chessling.evaluation.base import Evaluator, king_capture_score

PIECE_VALUES = {
    PieceType.PAWN: 10,
    PieceType.KNIGHT: 30,
    PieceType.BISHOP: 30,
    PieceType.ROOK: 50,
    PieceType.QUEEN: 90,
    PieceType.KING: 0,
}


class MaterialEvaluator(Evaluator):
    """Material count with pawn advancement, from White's perspective."""

    def evaluate(self, state: GameState) -> int:
        score = 0
        white_king = False
        black_king = False

        for row_index, row in enumerate(state.rows):
            for piece in row:
                if piece == EMPTY:
                    continue
                if piece == Piece.WHITE_KING:
                    white_king = True
                    continue
                if piece == Piece.BLACK_KING:
                    black_king = True
                    continue

                value = PIECE_VALUES[get_piece_type(piece)]
                if get_color(piece) == Color.WHITE:
                    if piece == Piece.WHITE_PAWN:
                        value += row_index
                    score += value
                else:
                    if piece == Piece.BLACK_PAWN:
                        value += 7 - row_index
                    score -= value

        terminal = king_capture_score(white_king, black_king)
        if terminal is not None:
            return terminal
        return score


_DEFAULT_EVALUATOR = MaterialEvaluator()


def evaluate(state: GameState) -> int:
    """Score ``state`` with a shared MaterialEvaluator."""
    return _DEFAULT_EVALUATOR.evaluate(state)
