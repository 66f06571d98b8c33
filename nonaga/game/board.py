"""Board state for Nonaga.

The board is a set of tile coordinates plus three pieces per colour. A
BoardState is immutable: the two relocation primitives return a new value,
and the derived lookups (occupied cells, owner map) are computed once when
the value is built.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from nonaga.engine.errors import InvalidSetupError
from nonaga.game.connectivity import is_connected
from nonaga.game.types import Color, Hex, to_hex

PIECES_PER_PLAYER = 3
MIN_TILES = 3

# Hexagon of radius 2 around the origin: centre, ring 1, ring 2
STANDARD_TILES: frozenset[Hex] = frozenset({
    Hex(0, 0),
    Hex(1, -1), Hex(1, 0), Hex(0, 1), Hex(-1, 1), Hex(-1, 0), Hex(0, -1),
    Hex(2, -2), Hex(2, -1), Hex(2, 0), Hex(1, 1), Hex(0, 2), Hex(-1, 2),
    Hex(-2, 2), Hex(-2, 1), Hex(-2, 0), Hex(-1, -1), Hex(0, -2), Hex(1, -2),
})

# Alternating corners of the outer ring
STANDARD_PIECES: Mapping[Color, tuple[Hex, ...]] = MappingProxyType({
    Color.RED: (Hex(2, -2), Hex(-1, 2), Hex(-1, -1)),
    Color.BLACK: (Hex(2, 0), Hex(-2, 2), Hex(0, -2)),
})


@dataclass(frozen=True)
class BoardState:
    tiles: frozenset[Hex]
    # Read-only view over a private copy, excluded from the hash
    pieces: Mapping[Color, tuple[Hex, ...]] = field(hash=False)

    occupied: frozenset[Hex] = field(init=False, repr=False, compare=False)
    _owners: Mapping[Hex, Color] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tiles", frozenset(self.tiles))
        pieces = {color: tuple(positions) for color, positions in self.pieces.items()}
        object.__setattr__(self, "pieces", MappingProxyType(pieces))
        owners = {pos: color for color, positions in self.pieces.items() for pos in positions}
        object.__setattr__(self, "_owners", MappingProxyType(owners))
        object.__setattr__(self, "occupied", frozenset(owners))

    def has_tile(self, pos: tuple[int, int]) -> bool:
        return pos in self.tiles

    def owner_at(self, pos: tuple[int, int]) -> Color | None:
        return self._owners.get(pos)

    def is_occupied(self, pos: tuple[int, int]) -> bool:
        return pos in self._owners

    def relocate_tile(self, source: Hex, destination: Hex) -> BoardState:
        """Move the tile at *source* to *destination*.

        *destination* must be empty, or *source* itself (the tile is put back
        where it was lifted from).
        """
        if source not in self.tiles:
            raise ValueError(f"No tile at {source}")
        if self.is_occupied(source):
            raise ValueError(f"Tile at {source} is under a piece")
        if destination != source and destination in self.tiles:
            raise ValueError(f"Cell {destination} already holds a tile")

        tiles = (self.tiles - {source}) | {to_hex(destination)}
        return BoardState(tiles=tiles, pieces=self.pieces)

    def relocate_piece(self, color: Color, source: Hex, destination: Hex) -> BoardState:
        """Move *color*'s piece from *source* to *destination*."""
        if self.owner_at(source) is not color:
            raise ValueError(f"No {color.value} piece at {source}")
        if destination not in self.tiles:
            raise ValueError(f"Cell {destination} has no tile")
        if self.is_occupied(destination):
            raise ValueError(f"Tile at {destination} is already occupied")

        # Keep piece order stable so equal positions compare equal
        moved = tuple(to_hex(destination) if p == source else p for p in self.pieces[color])
        pieces = dict(self.pieces)
        pieces[color] = moved
        return BoardState(tiles=self.tiles, pieces=pieces)


def build_board(
    tiles: Iterable[tuple[int, int]],
    pieces: Mapping[str, Iterable[tuple[int, int]]],
) -> BoardState:
    """Validate a starting layout and return its BoardState.

    Raises InvalidSetupError listing every problem found.
    """
    problems: list[str] = []

    try:
        tile_list = [to_hex(t) for t in tiles]
        piece_lists = {color: [to_hex(p) for p in positions] for color, positions in pieces.items()}
    except (TypeError, ValueError) as e:
        raise InvalidSetupError(f"Malformed coordinate: {e}") from e

    tile_set = frozenset(tile_list)
    if len(tile_set) != len(tile_list):
        problems.append("Duplicate tile coordinates")
    if len(tile_set) < MIN_TILES:
        problems.append(f"Need at least {MIN_TILES} tiles, got {len(tile_set)}")
    elif not is_connected(tile_set):
        problems.append("Tile layout is not connected")

    board_pieces: dict[Color, tuple[Hex, ...]] = {}
    for key, positions in piece_lists.items():
        try:
            color = Color(key)
        except ValueError:
            problems.append(f"Unknown colour: {key!r}")
            continue
        if len(positions) != PIECES_PER_PLAYER:
            problems.append(
                f"{color.value} must have {PIECES_PER_PLAYER} pieces, got {len(positions)}"
            )
        for pos in positions:
            if pos not in tile_set:
                problems.append(f"{color.value} piece at {tuple(pos)} is not on a tile")
        board_pieces[color] = tuple(positions)

    for color in Color:
        if color not in board_pieces:
            problems.append(f"Missing pieces for {color.value}")

    seen: set[Hex] = set()
    for positions in board_pieces.values():
        for pos in positions:
            if pos in seen:
                problems.append(f"Two pieces share {tuple(pos)}")
            seen.add(pos)

    if problems:
        raise InvalidSetupError("; ".join(problems), problems)

    return BoardState(
        tiles=tile_set,
        pieces={color: board_pieces[color] for color in Color},
    )


def standard_board() -> BoardState:
    return build_board(STANDARD_TILES, STANDARD_PIECES)
