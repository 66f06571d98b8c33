"""Domain types and hex geometry for Nonaga."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import NamedTuple


class Hex(NamedTuple):
    """Axial coordinate of a hex cell."""

    q: int
    r: int

    def step(self, direction: tuple[int, int]) -> Hex:
        return Hex(self.q + direction[0], self.r + direction[1])


class Color(str, Enum):
    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self is Color.RED else Color.RED


class TurnPhase(str, Enum):
    SELECT_PIECE = "select_piece"  # move one of your pieces
    SELECT_TILE = "select_tile"    # then relocate an edge tile


# Axial hex directions: the 6 unit steps around (q, r)
HEX_DIRECTIONS: tuple[Hex, ...] = (
    Hex(1, -1), Hex(1, 0), Hex(0, 1),
    Hex(-1, 1), Hex(-1, 0), Hex(0, -1),
)


def neighbors(pos: tuple[int, int]) -> Iterator[Hex]:
    """Yield the 6 axial neighbours of *pos*, whether or not they hold a tile."""
    q, r = pos
    for dq, dr in HEX_DIRECTIONS:
        yield Hex(q + dq, r + dr)


def are_adjacent(a: tuple[int, int], b: tuple[int, int]) -> bool:
    return (a[0] - b[0], a[1] - b[1]) in HEX_DIRECTIONS


def to_hex(value: object) -> Hex:
    """Coerce a ``(q, r)`` pair (tuple, list or Hex) into a Hex.

    Raises ValueError for anything that is not a pair of ints.
    """
    if isinstance(value, Hex):
        return value
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise ValueError(f"Expected a (q, r) pair, got {value!r}")
    q, r = value
    if isinstance(q, bool) or isinstance(r, bool) or not isinstance(q, int) or not isinstance(r, int):
        raise ValueError(f"Hex coordinates must be integers, got {value!r}")
    return Hex(q, r)
