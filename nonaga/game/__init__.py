from nonaga.game.board import STANDARD_PIECES, STANDARD_TILES, BoardState
from nonaga.game.codec import state_from_dict, state_to_dict
from nonaga.game.controller import (
    MoveRecord,
    TurnState,
    current_legal_destinations,
    current_phase,
    current_player,
    handle_coordinate_input,
    initialize,
    reset,
    selectable_sources,
    winner,
)
from nonaga.game.types import Color, Hex, TurnPhase

__all__ = [
    "STANDARD_PIECES",
    "STANDARD_TILES",
    "BoardState",
    "Color",
    "Hex",
    "MoveRecord",
    "TurnPhase",
    "TurnState",
    "current_legal_destinations",
    "current_phase",
    "current_player",
    "handle_coordinate_input",
    "initialize",
    "reset",
    "selectable_sources",
    "state_from_dict",
    "state_to_dict",
    "winner",
]
