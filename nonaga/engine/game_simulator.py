"""Synchronous game simulator: applies actions and advances through auto-resolve phases.

Lets tests and scripts play complete games against a plugin without any
session or transport layer.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field

from nonaga.config import settings
from nonaga.engine.errors import GameNotActiveError, InvalidActionError
from nonaga.engine.models import (
    Action,
    Event,
    GameConfig,
    GameResult,
    Phase,
    Player,
    PlayerId,
)
from nonaga.engine.protocol import GamePlugin

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """Mutable game state for synchronous simulation."""

    game_data: dict
    phase: Phase
    players: list[Player]
    scores: dict[str, float] = field(default_factory=dict)
    game_over: GameResult | None = None
    events: list[Event] = field(default_factory=list)


def start_simulation(
    plugin: GamePlugin,
    players: list[Player],
    config: GameConfig,
) -> SimulationState:
    game_data, phase, events = plugin.create_initial_state(players, config)
    return SimulationState(
        game_data=game_data,
        phase=phase,
        players=players,
        scores={p.player_id: 0.0 for p in players},
        events=list(events),
    )


def apply_action_and_resolve(
    plugin: GamePlugin,
    state: SimulationState,
    action: Action,
) -> None:
    """Validate and apply an action, then auto-resolve subsequent auto-resolve phases.

    Mutates *state* in place.  After return, ``state.phase`` is either a
    non-auto-resolve phase (player needs to act) or ``state.game_over`` is set.
    Raises GameNotActiveError after game over and InvalidActionError for an
    action the plugin rejects.
    """
    if state.game_over is not None:
        raise GameNotActiveError("Game is already over")

    error = plugin.validate_action(state.game_data, state.phase, action)
    if error is not None:
        raise InvalidActionError(error, action)

    _apply(plugin, state, action)

    if state.game_over:
        return

    # Auto-resolve loop
    max_auto = settings.max_auto_resolve_steps
    while state.phase.auto_resolve and not state.game_over and max_auto > 0:
        max_auto -= 1

        pid = _phase_player_id(state.phase, state.players)
        synthetic = Action(action_type=state.phase.name, player_id=pid)
        _apply(plugin, state, synthetic)

    if state.phase.auto_resolve and not state.game_over:
        logger.warning(
            f"Stopped auto-resolving after {settings.max_auto_resolve_steps} steps "
            f"in phase {state.phase.name}"
        )


def clone_state(state: SimulationState) -> SimulationState:
    """Deep-copy a simulation state.

    ``players`` is shared (immutable during a game).
    """
    return SimulationState(
        game_data=copy.deepcopy(state.game_data),
        phase=state.phase.model_copy(deep=True),
        players=state.players,  # shared, never mutated
        scores=dict(state.scores),
        game_over=state.game_over,
        events=list(state.events),
    )


def _apply(plugin: GamePlugin, state: SimulationState, action: Action) -> None:
    result = plugin.apply_action(
        state.game_data, state.phase, action, state.players
    )
    state.game_data = result.game_data
    state.phase = result.next_phase
    state.scores = result.scores or state.scores
    state.game_over = result.game_over
    state.events.extend(result.events)


def _phase_player_id(phase: Phase, players: list[Player]) -> PlayerId:
    """The phase's expected player, or the first seat when it names none."""
    if phase.expected_actions and phase.expected_actions[0].player_id is not None:
        return phase.expected_actions[0].player_id
    return players[0].player_id
