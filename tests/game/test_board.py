"""Tests for Nonaga board state."""

from __future__ import annotations

import pytest

from nonaga.engine.errors import InvalidSetupError
from nonaga.game.board import (
    STANDARD_PIECES,
    STANDARD_TILES,
    BoardState,
    build_board,
    standard_board,
)
from nonaga.game.connectivity import is_connected
from nonaga.game.types import Color, Hex


def _pieces(red, black) -> dict:
    return {"red": red, "black": black}


class TestStandardLayout:
    def test_nineteen_tiles(self) -> None:
        assert len(STANDARD_TILES) == 19

    def test_radius_two_hexagon(self) -> None:
        expected = {
            Hex(q, r)
            for q in range(-2, 3)
            for r in range(-2, 3)
            if abs(q + r) <= 2
        }
        assert STANDARD_TILES == expected

    def test_connected(self) -> None:
        assert is_connected(STANDARD_TILES)

    def test_three_pieces_each(self) -> None:
        assert len(STANDARD_PIECES[Color.RED]) == 3
        assert len(STANDARD_PIECES[Color.BLACK]) == 3

    def test_pieces_on_distinct_tiles(self) -> None:
        positions = [p for ps in STANDARD_PIECES.values() for p in ps]
        assert len(set(positions)) == 6
        assert all(p in STANDARD_TILES for p in positions)


class TestLookups:
    def test_owner_at(self) -> None:
        board = standard_board()
        assert board.owner_at(Hex(2, -2)) is Color.RED
        assert board.owner_at(Hex(0, -2)) is Color.BLACK
        assert board.owner_at(Hex(0, 0)) is None
        assert board.owner_at(Hex(9, 9)) is None

    def test_owner_at_plain_tuple(self) -> None:
        board = standard_board()
        assert board.owner_at((-1, 2)) is Color.RED

    def test_occupied(self) -> None:
        board = standard_board()
        assert board.occupied == frozenset(
            p for ps in STANDARD_PIECES.values() for p in ps
        )
        assert board.is_occupied(Hex(2, 0))
        assert not board.is_occupied(Hex(1, 1))

    def test_has_tile(self) -> None:
        board = standard_board()
        assert board.has_tile(Hex(0, 0))
        assert not board.has_tile(Hex(3, 0))

    def test_equality_ignores_cached_lookups(self) -> None:
        assert standard_board() == standard_board()


class TestRelocatePiece:
    def test_returns_new_board(self) -> None:
        board = standard_board()
        moved = board.relocate_piece(Color.RED, Hex(2, -2), Hex(2, -1))
        assert moved is not board
        assert board.owner_at(Hex(2, -2)) is Color.RED
        assert moved.owner_at(Hex(2, -2)) is None
        assert moved.owner_at(Hex(2, -1)) is Color.RED

    def test_keeps_piece_order(self) -> None:
        board = standard_board()
        moved = board.relocate_piece(Color.RED, Hex(-1, 2), Hex(0, 2))
        assert moved.pieces[Color.RED] == (Hex(2, -2), Hex(0, 2), Hex(-1, -1))
        assert moved.pieces[Color.BLACK] == board.pieces[Color.BLACK]

    def test_wrong_owner_rejected(self) -> None:
        board = standard_board()
        with pytest.raises(ValueError, match="No black piece"):
            board.relocate_piece(Color.BLACK, Hex(2, -2), Hex(2, -1))

    def test_off_board_rejected(self) -> None:
        board = standard_board()
        with pytest.raises(ValueError, match="no tile"):
            board.relocate_piece(Color.RED, Hex(2, -2), Hex(3, -3))

    def test_occupied_destination_rejected(self) -> None:
        board = standard_board()
        with pytest.raises(ValueError, match="occupied"):
            board.relocate_piece(Color.RED, Hex(2, -2), Hex(2, 0))


class TestRelocateTile:
    def test_moves_tile(self) -> None:
        board = standard_board()
        moved = board.relocate_tile(Hex(1, 1), Hex(3, -1))
        assert Hex(1, 1) not in moved.tiles
        assert Hex(3, -1) in moved.tiles
        assert len(moved.tiles) == 19
        assert moved.pieces == board.pieces
        assert Hex(1, 1) in board.tiles

    def test_put_back_in_place(self) -> None:
        board = standard_board()
        assert board.relocate_tile(Hex(1, 1), Hex(1, 1)) == board

    def test_missing_tile_rejected(self) -> None:
        board = standard_board()
        with pytest.raises(ValueError, match="No tile"):
            board.relocate_tile(Hex(3, 0), Hex(3, -1))

    def test_tile_under_piece_rejected(self) -> None:
        board = standard_board()
        with pytest.raises(ValueError, match="under a piece"):
            board.relocate_tile(Hex(2, -2), Hex(3, -1))

    def test_destination_taken_rejected(self) -> None:
        board = standard_board()
        with pytest.raises(ValueError, match="already holds"):
            board.relocate_tile(Hex(1, 1), Hex(0, 0))


class TestBuildBoard:
    def test_standard(self) -> None:
        board = build_board(STANDARD_TILES, STANDARD_PIECES)
        assert isinstance(board, BoardState)
        assert board.tiles == STANDARD_TILES

    def test_accepts_lists_and_string_keys(self) -> None:
        board = build_board(
            [list(t) for t in STANDARD_TILES],
            _pieces([[2, -2], [-1, 2], [-1, -1]], [[2, 0], [-2, 2], [0, -2]]),
        )
        assert board == standard_board()

    def test_duplicate_tiles_rejected(self) -> None:
        tiles = list(STANDARD_TILES) + [Hex(0, 0)]
        with pytest.raises(InvalidSetupError, match="Duplicate"):
            build_board(tiles, STANDARD_PIECES)

    def test_too_few_tiles_rejected(self) -> None:
        with pytest.raises(InvalidSetupError, match="at least 3"):
            build_board([(0, 0), (1, 0)], STANDARD_PIECES)

    def test_disconnected_rejected(self) -> None:
        tiles = set(STANDARD_TILES) | {Hex(5, 5)}
        with pytest.raises(InvalidSetupError, match="not connected"):
            build_board(tiles, STANDARD_PIECES)

    def test_wrong_piece_count_rejected(self) -> None:
        pieces = _pieces([(2, -2), (-1, 2)], [(2, 0), (-2, 2), (0, -2)])
        with pytest.raises(InvalidSetupError, match="must have 3 pieces"):
            build_board(STANDARD_TILES, pieces)

    def test_piece_off_tiles_rejected(self) -> None:
        pieces = _pieces([(2, -2), (-1, 2), (4, 4)], [(2, 0), (-2, 2), (0, -2)])
        with pytest.raises(InvalidSetupError, match="not on a tile"):
            build_board(STANDARD_TILES, pieces)

    def test_shared_coordinate_rejected(self) -> None:
        pieces = _pieces([(2, -2), (-1, 2), (0, 0)], [(2, 0), (-2, 2), (0, 0)])
        with pytest.raises(InvalidSetupError, match="share"):
            build_board(STANDARD_TILES, pieces)

    def test_unknown_color_rejected(self) -> None:
        pieces = {
            "red": [(2, -2), (-1, 2), (-1, -1)],
            "blue": [(2, 0), (-2, 2), (0, -2)],
        }
        with pytest.raises(InvalidSetupError) as exc:
            build_board(STANDARD_TILES, pieces)
        assert any("blue" in p for p in exc.value.problems)
        assert any("Missing pieces for black" in p for p in exc.value.problems)

    def test_malformed_coordinate_rejected(self) -> None:
        with pytest.raises(InvalidSetupError, match="Malformed"):
            build_board([(0, 0), (1, 0), "x"], STANDARD_PIECES)

    def test_reports_every_problem(self) -> None:
        pieces = _pieces([(2, -2)], [(9, 9), (-2, 2), (0, -2)])
        with pytest.raises(InvalidSetupError) as exc:
            build_board(STANDARD_TILES, pieces)
        assert len(exc.value.problems) == 2


class TestImmutability:
    def test_pieces_are_read_only(self) -> None:
        board = standard_board()
        with pytest.raises(TypeError):
            board.pieces[Color.RED] = (Hex(0, 0), Hex(1, 0), Hex(0, 1))
        assert board.owner_at(Hex(2, -2)) is Color.RED

    def test_caller_dict_is_copied(self) -> None:
        pieces = {Color.RED: STANDARD_PIECES[Color.RED], Color.BLACK: STANDARD_PIECES[Color.BLACK]}
        board = BoardState(tiles=STANDARD_TILES, pieces=pieces)
        pieces[Color.BLACK] = (Hex(0, 0), Hex(1, 0), Hex(0, 1))
        assert board.pieces[Color.BLACK] == (Hex(2, 0), Hex(-2, 2), Hex(0, -2))
        assert board.owner_at(Hex(0, 0)) is None

    def test_tile_move_does_not_share_pieces(self) -> None:
        board = standard_board().relocate_piece(Color.RED, Hex(2, -2), Hex(2, -1))
        placed = board.relocate_tile(Hex(1, 1), Hex(3, -1))
        assert placed.pieces == board.pieces
        assert placed.pieces is not board.pieces
        with pytest.raises(TypeError):
            placed.pieces[Color.BLACK] = (Hex(0, 0), Hex(1, 0), Hex(0, 1))
        assert board.pieces[Color.BLACK] == STANDARD_PIECES[Color.BLACK]

    def test_hashable(self) -> None:
        assert hash(standard_board()) == hash(standard_board())
        moved = standard_board().relocate_piece(Color.RED, Hex(2, -2), Hex(2, -1))
        assert len({standard_board(), standard_board(), moved}) == 2
