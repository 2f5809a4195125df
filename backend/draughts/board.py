from __future__ import annotations

from dataclasses import replace
from typing import Optional

from loguru import logger

from .move import UNREADABLE, Coordinate, Move, MoveResult, RejectReason, as_coordinate
from .pieces import Color, Piece


BOARD_SIZE = 8
START_ROWS = {Color.WHITE: range(0, 3), Color.BLACK: range(5, 8)}

BoardStatePiece = tuple[int, int, str, bool, int]
BoardState = tuple[str, tuple[BoardStatePiece, ...]]


class Board:
    """English draughts position: an 8x8 grid of optional pieces and the side to move.

    The grid is indexed ``board[row][col]`` while every public coordinate is a
    ``(col, row)`` pair. The grid is the single source of truth; a piece's
    ``col``/``row`` attributes mirror the cell that holds it.
    """

    def __init__(self) -> None:
        self.board: list[list[Optional[Piece]]] = []
        self.active_color = Color.WHITE
        self.initialize()

    @classmethod
    def empty(cls, *, active_color: Color = Color.WHITE) -> "Board":
        board = cls.__new__(cls)
        board.board = [[None for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]
        board.active_color = active_color
        return board

    def initialize(self) -> None:
        """Drop every piece and lay out the standard opening, White to move."""
        for piece in self.getAllPieces():
            piece.move(-1, -1)
        self.board = [[None for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]
        for color, rows in START_ROWS.items():
            for row in rows:
                first_col = 0 if row % 2 == 0 else 1
                for col in range(first_col, BOARD_SIZE, 2):
                    self.board[row][col] = Piece(color, col, row)
        self.active_color = Color.WHITE

    def place(self, piece: Piece) -> Piece:
        """Put a piece on its recorded cell. Used to build arbitrary positions."""
        if not self._is_within_bounds(piece.col, piece.row):
            raise ValueError(f"Cannot place {piece!r} outside the board.")
        if self.board[piece.row][piece.col] is not None:
            raise ValueError(f"Cell {piece.position} is already occupied.")
        self.board[piece.row][piece.col] = piece
        return piece

    def to_state(self) -> BoardState:
        pieces: list[BoardStatePiece] = []
        for piece in self.getAllPieces():
            pieces.append((piece.col, piece.row, piece.color.value, piece.is_king, piece.id))
        return (self.active_color.value, tuple(pieces))

    @classmethod
    def from_state(cls, state: BoardState) -> "Board":
        color_value, pieces = state
        board = cls.empty(active_color=Color(color_value))
        for col, row, piece_color, is_king, identifier in pieces:
            piece = Piece(Color(piece_color), col, row, identifier=identifier)
            piece.is_king = is_king
            board.place(piece)
        return board

    # queries ------------------------------------------------------------

    def getPiece(self, col: int, row: int) -> Optional[Piece]:
        if self._is_within_bounds(col, row):
            return self.board[row][col]
        return None

    def select_piece(self, col: int, row: int) -> Optional[Piece]:
        return self.getPiece(col, row)

    def getAllPieces(self) -> list[Piece]:
        pieces: list[Piece] = []
        for row in self.board:
            for piece in row:
                if piece is not None:
                    pieces.append(piece)
        return pieces

    def count(self, color: Color) -> int:
        return sum(1 for piece in self.getAllPieces() if piece.color == color)

    def evaluate_move(self, start: Coordinate, end: Coordinate) -> MoveResult:
        """Decide whether moving the piece on ``start`` to ``end`` is legal.

        Pure: the board is never modified. An accepted jump carries the piece
        it would capture in ``MoveResult.captured``.
        """
        start, end = as_coordinate(start), as_coordinate(end)
        move = Move(start or UNREADABLE, end or UNREADABLE)
        if not self._is_within_bounds(*move.start) or not self._is_within_bounds(*move.end):
            return MoveResult.reject(move, RejectReason.OUT_OF_BOUNDS)

        piece = self.getPiece(*move.start)
        if piece is None:
            return MoveResult.reject(move, RejectReason.NO_PIECE_SELECTED)

        if move.is_noop:
            return MoveResult.accept(move)

        if self.getPiece(*move.end) is not None:
            return MoveResult.reject(move, RejectReason.DESTINATION_OCCUPIED)

        dx, dy = move.dx, move.dy
        if dx != abs(dy) or dx not in (1, 2) or not piece.allows_row_delta(dy):
            return MoveResult.reject(move, RejectReason.ILLEGAL_GEOMETRY)

        if dx == 1:
            return MoveResult.accept(move)

        between = self.getPiece(*move.midpoint)
        if between is None or between.color == piece.color:
            return MoveResult.reject(move, RejectReason.BLOCKED_JUMP)
        return MoveResult.accept(move, captured=between)

    def moves_for(self, piece: Piece) -> list[Move]:
        if self.getPiece(piece.col, piece.row) is not piece:
            return []
        moves: list[Move] = []
        for dc, dr in piece.directions:
            for distance in (1, 2):
                end = (piece.col + dc * distance, piece.row + dr * distance)
                result = self.evaluate_move(piece.position, end)
                if result:
                    moves.append(result.move)
        return moves

    def legal_moves(self, color: Color) -> dict[Piece, list[Move]]:
        moves_map: dict[Piece, list[Move]] = {}
        for piece in self.getAllPieces():
            if piece.color != color:
                continue
            moves = self.moves_for(piece)
            if moves:
                moves_map[piece] = moves
        return moves_map

    def can_capture(self, piece: Piece) -> bool:
        for dc, dr in piece.directions:
            mid = self.getPiece(piece.col + dc, piece.row + dr)
            end_col, end_row = piece.col + 2 * dc, piece.row + 2 * dr
            if (
                mid is not None
                and mid.color != piece.color
                and self._is_within_bounds(end_col, end_row)
                and self.getPiece(end_col, end_row) is None
            ):
                return True
        return False

    def get_forced_captures(self, color: Color) -> set[Piece]:
        return {
            piece
            for piece in self.getAllPieces()
            if piece.color == color and self.can_capture(piece)
        }

    # commands -----------------------------------------------------------

    def attempt_move(self, start: Coordinate, end: Coordinate) -> MoveResult:
        result = self.evaluate_move(start, end)
        if not result:
            logger.debug("Rejected {} ({})", result.move, result.reason.value)
            return result
        if result.move.is_noop:
            return result

        piece = self.getPiece(*result.move.start)
        if result.captured is not None:
            self._remove_piece(result.captured)
        self._relocate(piece, *result.move.end)
        if self.check_for_promotion(piece):
            result = replace(result, promoted=True)
        logger.info(
            "{} {}{}{}",
            piece.color.value,
            result.move,
            f" capturing on {result.move.midpoint}" if result.captured is not None else "",
            " and is crowned" if result.promoted else "",
        )
        return result

    def check_for_promotion(self, piece: Piece) -> bool:
        if piece.is_king or piece.row != piece.color.promotion_row:
            return False
        piece.king()
        return True

    def end_turn(self) -> Color:
        self.active_color = self.active_color.opponent
        return self.active_color

    # helpers ------------------------------------------------------------

    def _relocate(self, piece: Piece, col: int, row: int) -> None:
        if self.board[piece.row][piece.col] is not piece:
            raise RuntimeError(f"{piece!r} is not on its recorded cell.")
        self.board[piece.row][piece.col] = None
        self.board[row][col] = piece
        piece.move(col, row)

    def _remove_piece(self, piece: Piece) -> None:
        if self.getPiece(piece.col, piece.row) is not piece:
            raise RuntimeError(f"{piece!r} is not on its recorded cell.")
        self.board[piece.row][piece.col] = None
        piece.move(-1, -1)

    def _is_within_bounds(self, col: int, row: int) -> bool:
        if type(col) is not int or type(row) is not int:
            return False
        return 0 <= col < BOARD_SIZE and 0 <= row < BOARD_SIZE

    def __str__(self) -> str:
        lines = []
        for row in reversed(range(BOARD_SIZE)):
            line = ""
            for col in range(BOARD_SIZE):
                piece = self.board[row][col]
                if piece is None:
                    line += ". "
                    continue
                symbol = "w" if piece.color == Color.WHITE else "b"
                line += (symbol.upper() if piece.is_king else symbol) + " "
            lines.append(line.rstrip())
        return "\n".join(lines)
