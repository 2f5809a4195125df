from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from .board import Board
from .config import RuleOptions
from .move import UNREADABLE, Coordinate, Move, MoveResult, RejectReason, as_coordinate
from .pieces import Color, Piece


class TurnPhase(str, Enum):
    AWAITING_SELECTION = "awaiting_selection"
    PIECE_SELECTED = "piece_selected"
    TURN_ENDED = "turn_ended"


@dataclass
class MoveRecord:
    color: Color
    move: Move
    captured: Optional[Piece]
    promoted: bool


class Game:
    """Turn controller around a single Board.

    A turn runs ``select`` -> ``release`` -> ``end_turn``. ``release`` either
    rejects (back to awaiting a selection, same player) or accepts and parks
    the game in ``TURN_ENDED`` so the presentation layer can catch up before
    ``end_turn`` hands the board to the opponent. Putting a piece back on its
    own cell is accepted without ending the turn.
    """

    def __init__(self, options: Optional[RuleOptions] = None):
        self.options = options or RuleOptions()
        self.board = Board()
        self.phase = TurnPhase.AWAITING_SELECTION
        self.selected: Optional[Piece] = None
        self.move_history: list[MoveRecord] = []

    @property
    def current_player(self) -> Color:
        return self.board.active_color

    def reset(self, options: Optional[RuleOptions] = None) -> None:
        if options is not None:
            self.options = options
        self.board.initialize()
        self.phase = TurnPhase.AWAITING_SELECTION
        self.selected = None
        self.move_history.clear()
        logger.info("New game (mandatory capture: {})", self.options.mandatory_capture)

    def load(self, board: Board) -> None:
        """Continue from an arbitrary position instead of the opening."""
        self.board = board
        self.phase = TurnPhase.AWAITING_SELECTION
        self.selected = None
        self.move_history.clear()

    # selection ----------------------------------------------------------

    def select(self, col: int, row: int) -> Optional[Piece]:
        if self.phase is TurnPhase.TURN_ENDED:
            raise RuntimeError("Turn has ended; call end_turn() before selecting.")
        piece = self.board.select_piece(col, row)
        if piece is None or piece.color != self.current_player:
            self.selected = None
            self.phase = TurnPhase.AWAITING_SELECTION
            return None
        self.selected = piece
        self.phase = TurnPhase.PIECE_SELECTED
        return piece

    def release(self, col: int, row: int) -> MoveResult:
        target = as_coordinate((col, row)) or UNREADABLE
        if self.phase is not TurnPhase.PIECE_SELECTED or self.selected is None:
            return MoveResult.reject(Move(target, target), RejectReason.NO_PIECE_SELECTED)

        start = self.selected.position
        self.selected = None
        self.phase = TurnPhase.AWAITING_SELECTION

        if self._violates_mandatory_capture(start, target):
            result = MoveResult.reject(Move(start, target), RejectReason.CAPTURE_REQUIRED)
            logger.debug("Rejected {} ({})", result.move, result.reason.value)
            return result

        result = self.board.attempt_move(start, target)
        if not result or result.move.is_noop:
            return result

        self.move_history.append(
            MoveRecord(
                color=self.current_player,
                move=result.move,
                captured=result.captured,
                promoted=result.promoted,
            )
        )
        self.phase = TurnPhase.TURN_ENDED
        return result

    def end_turn(self) -> Color:
        if self.phase is not TurnPhase.TURN_ENDED:
            raise RuntimeError("No completed move to end the turn with.")
        self.phase = TurnPhase.AWAITING_SELECTION
        return self.board.end_turn()

    def play(self, start: Coordinate, end: Coordinate) -> MoveResult:
        """Select, release and (when the move counts) end the turn in one call."""
        start, end = as_coordinate(start), as_coordinate(end)
        if start is None or end is None:
            move = Move(start or UNREADABLE, end or UNREADABLE)
            return MoveResult.reject(move, RejectReason.OUT_OF_BOUNDS)
        if self.select(*start) is None:
            return MoveResult.reject(Move(start, end), self._selection_failure(start))
        result = self.release(*end)
        if self.phase is TurnPhase.TURN_ENDED:
            self.end_turn()
        return result

    # rules --------------------------------------------------------------

    def forced_captures(self) -> set[Piece]:
        return self.board.get_forced_captures(self.current_player)

    def getValidMoves(self) -> dict[Piece, list[Move]]:
        moves_map = self.board.legal_moves(self.current_player)
        if not self.options.mandatory_capture:
            return moves_map
        captures = {
            piece: [move for move in moves if move.is_jump]
            for piece, moves in moves_map.items()
        }
        captures = {piece: moves for piece, moves in captures.items() if moves}
        return captures if captures else moves_map

    def winner(self) -> Optional[Color]:
        """A side wins once the opponent is out of pieces, or out of moves on its turn."""
        color = self.current_player
        if self.board.count(color.opponent) == 0 and self.board.count(color) > 0:
            return color
        if self.phase is TurnPhase.TURN_ENDED:
            return None
        if self.board.count(color) == 0 or not self.board.legal_moves(color):
            return color.opponent
        return None

    def _violates_mandatory_capture(self, start: Coordinate, end: Coordinate) -> bool:
        if not self.options.mandatory_capture or start == end:
            return False
        forced = self.forced_captures()
        if not forced:
            return False
        evaluation = self.board.evaluate_move(start, end)
        return bool(evaluation) and not evaluation.is_capture

    def _selection_failure(self, start: Coordinate) -> RejectReason:
        col, row = start
        if not self.board._is_within_bounds(col, row):
            return RejectReason.OUT_OF_BOUNDS
        if self.board.getPiece(col, row) is None:
            return RejectReason.NO_PIECE_SELECTED
        return RejectReason.WRONG_TURN
