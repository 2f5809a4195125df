from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .pieces import Piece

# (column, row); White starts on rows 0-2, Black on rows 5-7.
Coordinate = tuple[int, int]
# Stands in for a coordinate that could not be read at all.
UNREADABLE: Coordinate = (-1, -1)


def as_coordinate(value: Any) -> Optional[Coordinate]:
    """Return ``value`` as an ``(int, int)`` pair, or ``None`` if it is not one.

    Whole-valued floats such as ``(1.0, 3.0)`` are accepted; bools, fractions,
    ``None`` and sequences of the wrong length are not.
    """
    try:
        col, row = value
    except (TypeError, ValueError):
        return None
    parts = []
    for part in (col, row):
        if isinstance(part, bool):
            return None
        if isinstance(part, int):
            parts.append(part)
        elif isinstance(part, float) and part.is_integer():
            parts.append(int(part))
        else:
            return None
    return (parts[0], parts[1])


@dataclass(frozen=True, slots=True)
class Move:
    start: Coordinate
    end: Coordinate

    @property
    def dx(self) -> int:
        return abs(self.start[0] - self.end[0])

    @property
    def dy(self) -> int:
        return self.end[1] - self.start[1]

    @property
    def is_noop(self) -> bool:
        return self.start == self.end

    @property
    def is_jump(self) -> bool:
        return self.dx == 2 and abs(self.dy) == 2

    @property
    def midpoint(self) -> Optional[Coordinate]:
        if not self.is_jump:
            return None
        return ((self.start[0] + self.end[0]) // 2, (self.start[1] + self.end[1]) // 2)

    def __str__(self) -> str:
        connector = " x " if self.is_jump else " - "
        return f"{self.start[0]},{self.start[1]}{connector}{self.end[0]},{self.end[1]}"


class MoveOutcome(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class RejectReason(str, Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    NO_PIECE_SELECTED = "no_piece_selected"
    DESTINATION_OCCUPIED = "destination_occupied"
    ILLEGAL_GEOMETRY = "illegal_geometry"
    BLOCKED_JUMP = "blocked_jump"
    WRONG_TURN = "wrong_turn"
    CAPTURE_REQUIRED = "capture_required"


@dataclass(frozen=True, slots=True)
class MoveResult:
    outcome: MoveOutcome
    move: Move
    reason: Optional[RejectReason] = None
    captured: Optional["Piece"] = None
    promoted: bool = False

    @classmethod
    def accept(cls, move: Move, captured: Optional["Piece"] = None) -> "MoveResult":
        return cls(MoveOutcome.ACCEPTED, move, captured=captured)

    @classmethod
    def reject(cls, move: Move, reason: RejectReason) -> "MoveResult":
        return cls(MoveOutcome.REJECTED, move, reason=reason)

    @property
    def accepted(self) -> bool:
        return self.outcome is MoveOutcome.ACCEPTED

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def __bool__(self) -> bool:
        return self.accepted
