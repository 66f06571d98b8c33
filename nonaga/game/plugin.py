"""NonagaPlugin: implements the GamePlugin protocol for Nonaga.

Each engine action is a complete move, ``{"from": [q, r], "to": [q, r]}``:
a piece slide in the ``move_piece`` phase and a tile relocation in the
``move_tile`` phase. The plugin replays the two coordinates through the
turn controller, so the rules live in exactly one place.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from nonaga.config import settings
from nonaga.engine.errors import GameNotActiveError, InvalidActionError, InvalidSetupError
from nonaga.engine.models import (
    Action,
    Event,
    ExpectedAction,
    GameConfig,
    GameResult,
    Phase,
    Player,
    PlayerId,
    TransitionResult,
)
from nonaga.game.codec import state_from_dict, state_to_dict
from nonaga.game.controller import (
    TurnState,
    handle_coordinate_input,
    initialize,
    selectable_sources,
)
from nonaga.game.moves import legal_piece_moves, legal_tile_placements, selectable_tiles
from nonaga.game.types import Color, TurnPhase, to_hex

logger = logging.getLogger(__name__)

MOVE_PIECE = "move_piece"
MOVE_TILE = "move_tile"
GAME_OVER = "game_over"

PHASE_NAMES: dict[TurnPhase, str] = {
    TurnPhase.SELECT_PIECE: MOVE_PIECE,
    TurnPhase.SELECT_TILE: MOVE_TILE,
}

# Seat 0 always plays red
SEAT_COLORS: tuple[Color, Color] = (Color.RED, Color.BLACK)


def _make_phase(turn_phase: TurnPhase, player_id: PlayerId, color: Color) -> Phase:
    name = PHASE_NAMES[turn_phase]
    return Phase(
        name=name,
        expected_actions=[ExpectedAction(player_id=player_id, action_type=name)],
        metadata={"color": color.value},
    )


class NonagaPlugin:
    """Nonaga: slide a piece, then move a tile. Connect your three pieces to win."""

    game_id: ClassVar[str] = "nonaga"
    display_name: ClassVar[str] = "Nonaga"
    min_players: ClassVar[int] = 2
    max_players: ClassVar[int] = 2
    description: ClassVar[str] = (
        "Slide a piece, then relocate an edge tile of the shifting hex board. "
        "First to bring all three pieces together wins."
    )
    config_schema: ClassVar[dict] = {
        "type": "object",
        "properties": {
            "starting_player": {"type": "string", "enum": [c.value for c in Color]},
        },
    }

    # ── Lifecycle ──

    def create_initial_state(
        self,
        players: list[Player],
        config: GameConfig,
    ) -> tuple[dict, Phase, list[Event]]:
        errors = self.validate_config(config.options)
        if errors:
            raise InvalidSetupError("; ".join(errors), errors)

        starting = config.options.get("starting_player", settings.starting_player)
        state = initialize(starting_player=starting)

        seats = sorted(players, key=lambda p: p.seat_index)
        colors = {p.player_id: color.value for p, color in zip(seats, SEAT_COLORS)}
        game_data: dict = {
            "state": state_to_dict(state),
            "colors": colors,
        }

        first_pid = self._player_for(game_data, state.player)
        events = [
            Event(event_type="game_started", payload={
                "players": [p.player_id for p in seats],
                "colors": colors,
                "starting_player": state.player.value,
            }),
        ]
        logger.info(f"Nonaga game started, {state.player.value} ({first_pid}) moves first")

        return game_data, _make_phase(state.phase, first_pid, state.player), events

    def validate_config(self, options: dict) -> list[str]:
        errors: list[str] = []
        for key in options:
            if key not in self.config_schema["properties"]:
                errors.append(f"Unknown option: {key}")
        starting = options.get("starting_player")
        if starting is not None and starting not in [c.value for c in Color]:
            errors.append(f"starting_player must be 'red' or 'black', got {starting!r}")
        return errors

    # ── Core game loop ──

    def get_valid_actions(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId,
    ) -> list[dict]:
        state = state_from_dict(game_data["state"])
        if state.winner is not None or phase.name != PHASE_NAMES[state.phase]:
            return []
        if game_data["colors"].get(player_id) != state.player.value:
            return []

        board = state.board
        actions: list[dict] = []
        if state.phase is TurnPhase.SELECT_PIECE:
            for piece in board.pieces[state.player]:
                for dest in sorted(legal_piece_moves(board, piece)):
                    actions.append({"from": list(piece), "to": list(dest)})
        else:
            for tile in sorted(selectable_tiles(board, state.last_moved_tile)):
                for dest in sorted(legal_tile_placements(board, tile)):
                    actions.append({"from": list(tile), "to": list(dest)})
        return actions

    def validate_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
    ) -> str | None:
        payload = action.payload
        if payload.get("from") is None or payload.get("to") is None:
            return "Missing from or to in payload"
        try:
            source = to_hex(payload["from"])
            destination = to_hex(payload["to"])
        except ValueError as e:
            return str(e)

        state = state_from_dict(game_data["state"])
        if state.winner is not None:
            return "Game is already over"
        if game_data["colors"].get(action.player_id) != state.player.value:
            return "Not your turn"

        expected = PHASE_NAMES[state.phase]
        if action.action_type != expected or phase.name != expected:
            return f"Expected a {expected} action"

        board = state.board
        if state.phase is TurnPhase.SELECT_PIECE:
            if board.owner_at(source) is not state.player:
                return f"No {state.player.value} piece at {list(source)}"
            if destination not in legal_piece_moves(board, source):
                return f"Piece at {list(source)} cannot slide to {list(destination)}"
        else:
            if source not in selectable_tiles(board, state.last_moved_tile):
                return f"Tile at {list(source)} cannot be moved"
            if destination not in legal_tile_placements(board, source):
                return f"Tile cannot be placed at {list(destination)}"

        return None

    def apply_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
        players: list[Player],
    ) -> TransitionResult:
        state = state_from_dict(game_data["state"])
        if state.winner is not None:
            raise GameNotActiveError("Game is already over")

        error = self.validate_action(game_data, phase, action)
        if error is not None:
            logger.warning(f"Rejected {action.action_type} from {action.player_id}: {error}")
            raise InvalidActionError(error, action)

        source = to_hex(action.payload["from"])
        destination = to_hex(action.payload["to"])
        mover = state.player
        after = handle_coordinate_input(handle_coordinate_input(state, source), destination)

        new_data = {**game_data, "state": state_to_dict(after)}
        event_type = "piece_moved" if state.phase is TurnPhase.SELECT_PIECE else "tile_moved"
        events = [
            Event(
                event_type=event_type,
                player_id=action.player_id,
                payload={
                    "color": mover.value,
                    "from": list(source),
                    "to": list(destination),
                },
            ),
        ]

        if after.winner is not None:
            return self._end_game(new_data, events, after, players)

        next_pid = self._player_for(new_data, after.player)
        return TransitionResult(
            game_data=new_data,
            events=events,
            next_phase=_make_phase(after.phase, next_pid, after.player),
            scores={p.player_id: 0.0 for p in players},
            game_over=None,
        )

    # ── View filtering ──

    def get_player_view(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId | None,
        players: list[Player],
    ) -> dict:
        # No hidden info, return everything
        state = state_from_dict(game_data["state"])
        return {
            "state": game_data["state"],
            "colors": game_data["colors"],
            "viewer_color": game_data["colors"].get(player_id) if player_id else None,
            "selectable": [list(h) for h in sorted(selectable_sources(state))],
        }

    # ── Private helpers ──

    def _player_for(self, game_data: dict, color: Color) -> PlayerId:
        for pid, value in game_data["colors"].items():
            if value == color.value:
                return PlayerId(pid)
        raise KeyError(f"No player plays {color.value}")

    def _end_game(
        self,
        game_data: dict,
        events: list[Event],
        state: TurnState,
        players: list[Player],
    ) -> TransitionResult:
        winner_pid = self._player_for(game_data, state.winner)
        scores = {p.player_id: (1.0 if p.player_id == winner_pid else 0.0) for p in players}

        events.append(Event(
            event_type="game_ended",
            payload={
                "winner": winner_pid,
                "color": state.winner.value,
                "pieces": [list(p) for p in state.board.pieces[state.winner]],
            },
        ))

        return TransitionResult(
            game_data=game_data,
            events=events,
            next_phase=Phase(name=GAME_OVER, auto_resolve=False),
            scores=scores,
            game_over=GameResult(
                winners=[winner_pid],
                final_scores=scores,
                reason="pieces_connected",
                details={"moves": len(state.history)},
            ),
        )
