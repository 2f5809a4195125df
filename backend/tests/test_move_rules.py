from __future__ import annotations

import random
import sys
import unittest
from pathlib import Path


BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


from draughts.board import BOARD_SIZE, Board  # noqa: E402
from draughts.move import MoveOutcome, RejectReason  # noqa: E402
from draughts.pieces import Color, Piece  # noqa: E402


def _board_with(*pieces: Piece) -> Board:
    board = Board.empty()
    for piece in pieces:
        board.place(piece)
    return board


def _king(color: Color, col: int, row: int) -> Piece:
    piece = Piece(color, col, row)
    piece.king()
    return piece


class AttemptMoveTests(unittest.TestCase):
    def test_simple_move(self) -> None:
        board = Board()
        piece = board.getPiece(0, 2)

        result = board.attempt_move((0, 2), (1, 3))

        self.assertEqual(result.outcome, MoveOutcome.ACCEPTED)
        self.assertIsNone(result.captured)
        self.assertIs(board.getPiece(1, 3), piece)
        self.assertIsNone(board.getPiece(0, 2))
        self.assertEqual(piece.position, (1, 3))

    def test_noop_move_is_accepted_without_change(self) -> None:
        board = Board()
        state = board.to_state()

        result = board.attempt_move((2, 2), (2, 2))

        self.assertTrue(result)
        self.assertTrue(result.move.is_noop)
        self.assertEqual(board.to_state(), state)

    def test_occupied_destination_is_vetoed(self) -> None:
        white = _king(Color.WHITE, 2, 2)
        board = _board_with(white, Piece(Color.WHITE, 3, 3), Piece(Color.BLACK, 1, 1))
        state = board.to_state()

        for end in ((3, 3), (1, 1)):
            result = board.attempt_move((2, 2), end)
            self.assertEqual(result.reason, RejectReason.DESTINATION_OCCUPIED)
        self.assertEqual(board.to_state(), state)

    def test_capture(self) -> None:
        white = Piece(Color.WHITE, 2, 2)
        black = Piece(Color.BLACK, 3, 3)
        board = _board_with(white, black)

        result = board.attempt_move((2, 2), (4, 4))

        self.assertTrue(result)
        self.assertIs(result.captured, black)
        self.assertIs(board.getPiece(4, 4), white)
        self.assertIsNone(board.getPiece(3, 3))
        self.assertIsNone(board.getPiece(2, 2))
        self.assertNotIn(black, board.getAllPieces())

    def test_black_capture_downwards(self) -> None:
        black = Piece(Color.BLACK, 5, 5)
        board = _board_with(black, Piece(Color.WHITE, 4, 4))

        result = board.attempt_move((5, 5), (3, 3))

        self.assertTrue(result)
        self.assertEqual(board.count(Color.WHITE), 0)
        self.assertIs(board.getPiece(3, 3), black)

    def test_jump_over_own_piece_is_blocked(self) -> None:
        board = _board_with(Piece(Color.WHITE, 2, 2), Piece(Color.WHITE, 3, 3))
        state = board.to_state()

        result = board.attempt_move((2, 2), (4, 4))

        self.assertEqual(result.outcome, MoveOutcome.REJECTED)
        self.assertEqual(result.reason, RejectReason.BLOCKED_JUMP)
        self.assertEqual(board.to_state(), state)

    def test_jump_over_empty_cell_is_blocked(self) -> None:
        board = _board_with(Piece(Color.WHITE, 2, 2))

        result = board.attempt_move((2, 2), (4, 4))

        self.assertEqual(result.reason, RejectReason.BLOCKED_JUMP)
        self.assertIsNotNone(board.getPiece(2, 2))

    def test_backward_move_needs_a_king(self) -> None:
        man = Piece(Color.WHITE, 3, 3)
        board = _board_with(man)
        result = board.attempt_move((3, 3), (2, 2))
        self.assertEqual(result.reason, RejectReason.ILLEGAL_GEOMETRY)
        self.assertIs(board.getPiece(3, 3), man)

        black_man = Piece(Color.BLACK, 3, 3)
        board = _board_with(black_man)
        self.assertEqual(board.attempt_move((3, 3), (4, 4)).reason, RejectReason.ILLEGAL_GEOMETRY)

        king = _king(Color.WHITE, 3, 3)
        board = _board_with(king)
        self.assertTrue(board.attempt_move((3, 3), (2, 2)))
        self.assertIs(board.getPiece(2, 2), king)

    def test_king_captures_backwards(self) -> None:
        king = _king(Color.BLACK, 4, 4)
        board = _board_with(king, Piece(Color.WHITE, 5, 5))

        result = board.attempt_move((4, 4), (6, 6))

        self.assertTrue(result)
        self.assertEqual(board.count(Color.WHITE), 0)
        self.assertTrue(king.is_king)

    def test_illegal_geometry(self) -> None:
        board = _board_with(_king(Color.WHITE, 3, 3))
        for end in ((3, 4), (4, 3), (5, 4), (6, 6), (0, 0), (3, 5)):
            with self.subTest(end=end):
                result = board.attempt_move((3, 3), end)
                self.assertEqual(result.reason, RejectReason.ILLEGAL_GEOMETRY)

    def test_out_of_bounds_and_missing_piece(self) -> None:
        board = Board()
        state = board.to_state()

        self.assertEqual(board.attempt_move((0, 2), (-1, 3)).reason, RejectReason.OUT_OF_BOUNDS)
        self.assertEqual(board.attempt_move((6, 2), (8, 3)).reason, RejectReason.OUT_OF_BOUNDS)
        self.assertEqual(board.attempt_move((-1, -1), (0, 0)).reason, RejectReason.OUT_OF_BOUNDS)
        self.assertEqual(board.attempt_move((1, 3), (2, 4)).reason, RejectReason.NO_PIECE_SELECTED)
        self.assertEqual(board.to_state(), state)

    def test_evaluate_move_does_not_mutate(self) -> None:
        white = Piece(Color.WHITE, 2, 2)
        black = Piece(Color.BLACK, 3, 3)
        board = _board_with(white, black)
        state = board.to_state()

        result = board.evaluate_move((2, 2), (4, 4))

        self.assertTrue(result)
        self.assertIs(result.captured, black)
        self.assertEqual(board.to_state(), state)


class PromotionTests(unittest.TestCase):
    def test_white_promotes_on_row_seven(self) -> None:
        man = Piece(Color.WHITE, 2, 6)
        board = _board_with(man)

        result = board.attempt_move((2, 6), (3, 7))

        self.assertTrue(result.promoted)
        self.assertTrue(man.is_king)

    def test_black_promotes_on_row_zero_by_capture(self) -> None:
        man = Piece(Color.BLACK, 3, 2)
        board = _board_with(man, Piece(Color.WHITE, 2, 1))

        result = board.attempt_move((3, 2), (1, 0))

        self.assertTrue(result.promoted)
        self.assertTrue(result.is_capture)
        self.assertTrue(man.is_king)

    def test_king_stays_king(self) -> None:
        king = _king(Color.WHITE, 4, 6)
        board = _board_with(king)

        self.assertFalse(board.attempt_move((4, 6), (5, 7)).promoted)
        self.assertTrue(board.attempt_move((5, 7), (4, 6)))
        self.assertTrue(king.is_king)

    def test_check_for_promotion_ignores_other_rows(self) -> None:
        board = Board.empty()
        white = board.place(Piece(Color.WHITE, 1, 5))
        black = board.place(Piece(Color.BLACK, 2, 7))

        self.assertFalse(board.check_for_promotion(white))
        self.assertFalse(board.check_for_promotion(black))
        self.assertFalse(white.is_king or black.is_king)


class ForcedCaptureTests(unittest.TestCase):
    def test_no_forced_captures_at_opening(self) -> None:
        board = Board()
        self.assertEqual(board.get_forced_captures(Color.WHITE), set())
        self.assertEqual(board.get_forced_captures(Color.BLACK), set())

    def test_single_forced_piece(self) -> None:
        hunter = Piece(Color.WHITE, 2, 2)
        board = _board_with(
            hunter,
            Piece(Color.WHITE, 6, 2),
            Piece(Color.BLACK, 3, 3),
            Piece(Color.BLACK, 0, 6),
        )

        self.assertEqual(board.get_forced_captures(Color.WHITE), {hunter})

    def test_landing_cell_must_be_free_and_on_board(self) -> None:
        board = _board_with(
            Piece(Color.WHITE, 2, 2),
            Piece(Color.BLACK, 3, 3),
            Piece(Color.BLACK, 4, 4),
            Piece(Color.WHITE, 6, 5),
            Piece(Color.BLACK, 7, 6),
        )
        self.assertEqual(board.get_forced_captures(Color.WHITE), set())

    def test_men_only_capture_forwards(self) -> None:
        man = Piece(Color.WHITE, 3, 3)
        board = _board_with(man, Piece(Color.BLACK, 2, 2))
        self.assertEqual(board.get_forced_captures(Color.WHITE), set())

        man.king()
        self.assertEqual(board.get_forced_captures(Color.WHITE), {man})

    def test_forced_set_matches_accepted_jumps(self) -> None:
        board = _board_with(
            Piece(Color.BLACK, 4, 4),
            Piece(Color.WHITE, 3, 3),
            Piece(Color.WHITE, 5, 3),
            Piece(Color.WHITE, 1, 1),
        )
        forced = board.get_forced_captures(Color.BLACK)
        jumpers = {
            piece
            for piece, moves in board.legal_moves(Color.BLACK).items()
            if any(move.is_jump for move in moves)
        }
        self.assertEqual(forced, jumpers)
        self.assertEqual(len(forced), 1)


class OccupancyInvariantTests(unittest.TestCase):
    def _assert_consistent(self, board: Board) -> None:
        seen: set[int] = set()
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = board.board[row][col]
                if piece is None:
                    continue
                self.assertNotIn(piece.id, seen)
                seen.add(piece.id)
                self.assertEqual(piece.position, (col, row))

    def test_random_playouts_keep_grid_consistent(self) -> None:
        rng = random.Random(20241129)
        for _ in range(5):
            board = Board()
            for _ in range(120):
                moves_map = board.legal_moves(board.active_color)
                if not moves_map:
                    break
                moves = [move for options in moves_map.values() for move in options]
                move = rng.choice(moves)
                self.assertTrue(board.attempt_move(move.start, move.end))
                self._assert_consistent(board)
                board.end_turn()

    def test_random_garbage_never_raises(self) -> None:
        rng = random.Random(7)
        board = Board()
        for _ in range(500):
            start = (rng.randint(-2, 9), rng.randint(-2, 9))
            end = (rng.randint(-2, 9), rng.randint(-2, 9))
            result = board.attempt_move(start, end)
            self.assertIn(result.outcome, (MoveOutcome.ACCEPTED, MoveOutcome.REJECTED))
            self._assert_consistent(board)

    def test_malformed_coordinates_are_rejected(self) -> None:
        board = Board()
        state = board.to_state()
        malformed = [None, (1,), (1, 3, 0), (0.5, 3), (1, "3"), "13", (True, 3), 7]

        for bad in malformed:
            with self.subTest(end=bad):
                result = board.attempt_move((0, 2), bad)
                self.assertEqual(result.reason, RejectReason.OUT_OF_BOUNDS)
            with self.subTest(start=bad):
                result = board.attempt_move(bad, (1, 3))
                self.assertEqual(result.reason, RejectReason.OUT_OF_BOUNDS)
        self.assertEqual(board.to_state(), state)

        self.assertIsNone(board.select_piece(0.5, 2))
        self.assertIsNone(board.getPiece(None, 2))

    def test_whole_valued_floats_are_read_as_cells(self) -> None:
        board = Board()
        piece = board.getPiece(0, 2)

        result = board.attempt_move((0.0, 2.0), (1.0, 3.0))

        self.assertTrue(result)
        self.assertEqual(result.move.end, (1, 3))
        self.assertIs(board.getPiece(1, 3), piece)
        self.assertEqual(piece.position, (1, 3))
        self._assert_consistent(board)


if __name__ == "__main__":
    unittest.main()
