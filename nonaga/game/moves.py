"""Move generation: piece slides and tile relocations."""

from __future__ import annotations

from nonaga.game.board import BoardState
from nonaga.game.connectivity import would_disconnect
from nonaga.game.types import HEX_DIRECTIONS, Hex, neighbors

# A relocated tile must touch this many remaining tiles
MIN_PLACEMENT_CONTACTS = 2


def legal_piece_moves(board: BoardState, piece_pos: Hex) -> frozenset[Hex]:
    """Return the cells a piece at *piece_pos* can slide to.

    A piece travels in a straight line and stops on the last open tile before
    the board edge or another piece. Intermediate cells are not stops.
    """
    moves: set[Hex] = set()

    for direction in HEX_DIRECTIONS:
        current = Hex(*piece_pos)
        farthest: Hex | None = None

        while True:
            nxt = current.step(direction)
            if not board.has_tile(nxt) or board.is_occupied(nxt):
                break
            farthest = nxt
            current = nxt

        if farthest is not None:
            moves.add(farthest)

    return frozenset(moves)


def is_edge_tile(board: BoardState, pos: Hex) -> bool:
    """A tile with at least one neighbouring cell outside the layout."""
    return any(not board.has_tile(nb) for nb in neighbors(pos))


def selectable_tiles(board: BoardState, last_moved_tile: Hex | None) -> frozenset[Hex]:
    """Tiles the active player may pick up this turn.

    Empty edge tiles, other than the one moved on the previous turn, whose
    removal keeps the layout in one piece.
    """
    return frozenset(
        tile
        for tile in board.tiles
        if not board.is_occupied(tile)
        and tile != last_moved_tile
        and is_edge_tile(board, tile)
        and not would_disconnect(board.tiles, tile)
    )


def legal_tile_placements(board: BoardState, tile_being_moved: Hex) -> frozenset[Hex]:
    """Empty cells touching at least two of the tiles left after lifting *tile_being_moved*."""
    remaining = board.tiles - {tile_being_moved}

    candidates: set[Hex] = set()
    for tile in remaining:
        for nb in neighbors(tile):
            if nb not in remaining:
                candidates.add(nb)

    placements: set[Hex] = set()
    for cell in candidates:
        contacts = sum(1 for nb in neighbors(cell) if nb in remaining)
        if contacts >= MIN_PLACEMENT_CONTACTS:
            placements.add(cell)

    return frozenset(placements)
