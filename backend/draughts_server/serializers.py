from __future__ import annotations

from collections import Counter
from typing import Any, Optional

from draughts.config import RuleOptions
from draughts.game import Game
from draughts.move import Coordinate, Move, MoveResult
from draughts.pieces import Piece


def _coord_tuple_to_dict(coord: Optional[Coordinate]) -> Optional[dict[str, int]]:
    if coord is None:
        return None
    col, row = coord
    return {"col": col, "row": row}


def serialize_piece(piece: Piece) -> dict[str, Any]:
    return {
        "id": piece.id,
        "col": piece.col,
        "row": piece.row,
        "color": piece.color.value,
        "isKing": piece.is_king,
    }


def serialize_move(move: Move) -> dict[str, Any]:
    return {
        "start": _coord_tuple_to_dict(move.start),
        "end": _coord_tuple_to_dict(move.end),
        "capture": _coord_tuple_to_dict(move.midpoint),
        "isCapture": move.is_jump,
    }


def serialize_rules(options: RuleOptions) -> dict[str, Any]:
    return {"mandatoryCapture": options.mandatory_capture}


def serialize_result(result: MoveResult) -> dict[str, Any]:
    captured = None
    if result.captured is not None:
        # The captured piece is already off the board; report where it stood.
        captured = {
            "id": result.captured.id,
            "color": result.captured.color.value,
            **_coord_tuple_to_dict(result.move.midpoint),
        }
    return {
        "outcome": result.outcome.value,
        "reason": result.reason.value if result.reason else None,
        "move": serialize_move(result.move),
        "captured": captured,
        "promoted": result.promoted,
    }


def serialize_game(game: Game) -> dict[str, Any]:
    pieces = [serialize_piece(piece) for piece in game.board.getAllPieces()]
    total_counts = Counter(piece["color"] for piece in pieces)
    king_counts = Counter(piece["color"] for piece in pieces if piece["isKing"])

    forced = sorted(game.forced_captures(), key=lambda piece: piece.position)
    winner = game.winner()

    last_record = game.move_history[-1] if game.move_history else None
    last_move = serialize_move(last_record.move) if last_record else None

    return {
        "turn": game.current_player.value,
        "phase": game.phase.value,
        "winner": winner.value if winner else None,
        "pieces": pieces,
        "pieceCounts": {
            color: {
                "total": total_counts.get(color, 0),
                "kings": king_counts.get(color, 0),
            }
            for color in ("white", "black")
        },
        "forcedCaptures": [_coord_tuple_to_dict(piece.position) for piece in forced],
        "mandatoryCapture": bool(forced) and game.options.mandatory_capture,
        "moveCount": len(game.move_history),
        "lastMove": last_move,
        "rules": serialize_rules(game.options),
    }
