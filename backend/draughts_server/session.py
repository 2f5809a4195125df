from __future__ import annotations

from threading import Lock
from typing import Any, Optional

from loguru import logger

from draughts.config import RuleOptions
from draughts.game import Game
from draughts.pieces import Piece

from .schemas import ConfigRequest, MoveRequest, ResetRequest, RulesPayload
from .serializers import serialize_game, serialize_move, serialize_result, serialize_rules


_RULE_FIELDS = {"mandatoryCapture": "mandatory_capture"}


def _options_from_payload(current: RuleOptions, payload: Optional[RulesPayload]) -> RuleOptions:
    if payload is None:
        return current
    merged = current.as_dict()
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            merged[_RULE_FIELDS[key]] = value
    return RuleOptions.from_dict(merged)


class GameSession:
    """Thread-safe orchestrator around a single Game instance."""

    def __init__(self, options: Optional[RuleOptions] = None) -> None:
        self.lock = Lock()
        self.game = Game(options)

    # public API ---------------------------------------------------------

    def serialize(self) -> dict[str, Any]:
        with self.lock:
            return self._serialize_locked()

    def reset(self, payload: Optional[ResetRequest] = None) -> dict[str, Any]:
        with self.lock:
            options = _options_from_payload(self.game.options, payload.rules if payload else None)
            self.game.reset(options)
            return self._serialize_locked()

    def configure_rules(self, payload: ConfigRequest) -> dict[str, Any]:
        with self.lock:
            options = _options_from_payload(self.game.options, payload.rules)
            if options != self.game.options:
                logger.info("Rules changed to {}", serialize_rules(options))
                self.game.reset(options)
            return self._serialize_locked()

    def get_valid_moves(self, col: int, row: int) -> dict[str, Any]:
        with self.lock:
            piece = self._require_piece(col, row)
            if piece.color != self.game.current_player:
                raise ValueError("It is not this piece's turn.")
            moves = self.game.getValidMoves().get(piece, [])
            return {
                "piece": {"col": col, "row": row},
                "moves": [serialize_move(move) for move in moves],
            }

    def get_forced_captures(self) -> dict[str, Any]:
        with self.lock:
            forced = sorted(self.game.forced_captures(), key=lambda piece: piece.position)
            return {
                "turn": self.game.current_player.value,
                "pieces": [{"col": piece.col, "row": piece.row, "id": piece.id} for piece in forced],
            }

    def make_move(self, payload: MoveRequest) -> dict[str, Any]:
        with self.lock:
            if self.game.winner() is not None:
                raise RuntimeError("The game is over; reset to play again.")
            start = (payload.start.col, payload.start.row)
            end = (payload.end.col, payload.end.row)
            result = self.game.play(start, end)
            response = serialize_result(result)
            response["board"] = self._serialize_locked()
            return response

    # helpers ------------------------------------------------------------

    def _serialize_locked(self) -> dict[str, Any]:
        return serialize_game(self.game)

    def _require_piece(self, col: int, row: int) -> Piece:
        piece = self.game.board.select_piece(col, row)
        if piece is None:
            raise ValueError(f"No piece at col {col}, row {row}.")
        return piece
