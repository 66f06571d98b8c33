from __future__ import annotations

import pytest

from nonaga.engine.models import Player, PlayerId
from nonaga.game.plugin import NonagaPlugin


@pytest.fixture
def players() -> list[Player]:
    return [
        Player(player_id=PlayerId("p1"), display_name="Alice", seat_index=0),
        Player(player_id=PlayerId("p2"), display_name="Bob", seat_index=1),
    ]


@pytest.fixture
def plugin() -> NonagaPlugin:
    return NonagaPlugin()
