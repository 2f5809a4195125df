"""English draughts rules engine package."""

from .board import BOARD_SIZE, Board
from .config import RuleOptions
from .game import Game, MoveRecord, TurnPhase
from .move import Coordinate, Move, MoveOutcome, MoveResult, RejectReason
from .pieces import Color, Piece

__all__ = [
    "BOARD_SIZE",
    "Board",
    "Game",
    "MoveRecord",
    "TurnPhase",
    "RuleOptions",
    "Move",
    "Coordinate",
    "MoveOutcome",
    "MoveResult",
    "RejectReason",
    "Color",
    "Piece",
]
