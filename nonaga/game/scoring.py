"""Win detection for Nonaga."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

from nonaga.game.types import Hex, are_adjacent

# Triangle (3 pairs), straight line and V shape (2 pairs) all win
WINNING_PAIR_COUNT = 2


def adjacent_pair_count(positions: Sequence[Hex]) -> int:
    """Count the unordered pairs of *positions* that are hex neighbours."""
    return sum(1 for a, b in combinations(positions, 2) if are_adjacent(a, b))


def has_won(positions: Sequence[Hex]) -> bool:
    """True if a player's three pieces are connected.

    With only three pieces, two adjacent pairs always share a piece, so
    ``>= 2`` means the pieces form a single chain.
    """
    if len(positions) != 3:
        raise ValueError(f"Win check needs exactly 3 positions, got {len(positions)}")
    return adjacent_pair_count(positions) >= WINNING_PAIR_COUNT
