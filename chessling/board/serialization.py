"""
GameState / Move Serialization

Plain-dict codec used at the search worker boundary. The dicts contain only
ints, bools, lists and strings, so they pickle into worker processes and
dump to JSON unchanged.

Formats:
    GameState → {
        "board": [[int] * 8] * 8,           row 0 = White's back rank
        "current": int,                      Color value of the side to move
        "castling": {
            "white": {"king_side": bool, "queen_side": bool},
            "black": {"king_side": bool, "queen_side": bool},
        },
    }

    Move → {"from_row", "from_col", "to_row", "to_col", "promotion"}
"""

from typing import Any, Dict, Mapping

from chessling.board.pieces import Color, PieceType
from chessling.board.state import CastlingRights, GameState, Move

_COLOR_KEYS = {Color.WHITE: "white", Color.BLACK: "black"}


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """Serialize a GameState."""
    castling = {}
    for color, key in _COLOR_KEYS.items():
        rights = state.castling_rights(color)
        castling[key] = {"king_side": rights.king_side, "queen_side": rights.queen_side}
    return {
        "board": [list(row) for row in state.rows],
        "current": int(state.current),
        "castling": castling,
    }


def state_from_dict(data: Mapping[str, Any]) -> GameState:
    """
    Rebuild a GameState from ``state_to_dict`` output.

    Raises:
        ValueError: If a key is missing or the board/side to move is invalid
    """
    try:
        board = data["board"]
        current = data["current"]
        castling = {
            color: CastlingRights(
                king_side=bool(data["castling"][key]["king_side"]),
                queen_side=bool(data["castling"][key]["queen_side"]),
            )
            for color, key in _COLOR_KEYS.items()
        }
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed game state payload: {e}") from e

    try:
        return GameState(board, current, castling)
    except TypeError as e:
        raise ValueError(f"Malformed game state payload: {e}") from e


def move_to_dict(move: Move) -> Dict[str, int]:
    """Serialize a Move."""
    return {
        "from_row": move.from_square[0],
        "from_col": move.from_square[1],
        "to_row": move.to_square[0],
        "to_col": move.to_square[1],
        "promotion": int(move.promotion),
    }


def move_from_dict(data: Mapping[str, Any]) -> Move:
    """
    Rebuild a Move from ``move_to_dict`` output.

    A missing ``promotion`` key means no promotion.

    Raises:
        ValueError: If a coordinate is missing or the promotion type is unknown
    """
    try:
        from_square = (int(data["from_row"]), int(data["from_col"]))
        to_square = (int(data["to_row"]), int(data["to_col"]))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed move payload: {e}") from e

    promotion = data.get("promotion", PieceType.NONE)
    try:
        promotion = PieceType(promotion)
    except ValueError as e:
        raise ValueError(f"Unknown promotion type: {promotion!r}") from e

    return Move(from_square, to_square, promotion)
