"""Connectivity of the tile layout under hex adjacency."""

from __future__ import annotations

from collections import deque
from collections.abc import Set

from nonaga.game.types import Hex, neighbors


def is_connected(tiles: Set[Hex]) -> bool:
    """True if *tiles* forms a single component. An empty set is not connected."""
    if not tiles:
        return False

    start = next(iter(tiles))
    visited: set[Hex] = {start}
    queue: deque[Hex] = deque([start])

    while queue:
        current = queue.popleft()
        for nb in neighbors(current):
            if nb in tiles and nb not in visited:
                visited.add(nb)
                queue.append(nb)

    return len(visited) == len(tiles)


def would_disconnect(tiles: Set[Hex], tile: Hex) -> bool:
    """Would removing *tile* split the layout (or leave nothing behind)?

    Not cached: the layout changes shape every turn.
    """
    return not is_connected(frozenset(tiles) - {tile})
