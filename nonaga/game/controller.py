"""Turn controller: the Nonaga interaction state machine.

A turn has two phases. In SELECT_PIECE the active player picks one of their
pieces and then one of its slide destinations; in SELECT_TILE they pick a
movable edge tile and then a placement for it. Every input is a single board
coordinate fed to handle_coordinate_input(), which returns the next state.
Inputs that do not fit the current phase are ignored: the same state object
comes back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Literal

from nonaga.config import settings
from nonaga.engine.errors import InvalidSetupError
from nonaga.game.board import STANDARD_PIECES, STANDARD_TILES, BoardState, build_board
from nonaga.game.moves import (
    legal_piece_moves,
    legal_tile_placements,
    selectable_tiles,
)
from nonaga.game.scoring import has_won
from nonaga.game.types import Color, Hex, TurnPhase, to_hex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveRecord:
    player: Color
    kind: Literal["piece", "tile"]
    source: Hex
    destination: Hex


@dataclass(frozen=True)
class TurnState:
    board: BoardState
    player: Color
    phase: TurnPhase = TurnPhase.SELECT_PIECE
    selected_piece: Hex | None = None
    selected_tile: Hex | None = None
    legal_destinations: frozenset[Hex] = frozenset()
    last_moved_tile: Hex | None = None
    winner: Color | None = None
    history: tuple[MoveRecord, ...] = ()

    # Setup the game started from, used by reset()
    initial_board: BoardState | None = field(default=None, repr=False)
    starting_player: Color | None = field(default=None, repr=False)


def initialize(
    tiles: Iterable[tuple[int, int]] | None = None,
    pieces: Mapping[str, Iterable[tuple[int, int]]] | None = None,
    starting_player: str | None = None,
) -> TurnState:
    """Create the opening state, optionally from a custom layout.

    Raises InvalidSetupError when the layout is unusable.
    """
    board = build_board(
        STANDARD_TILES if tiles is None else tiles,
        STANDARD_PIECES if pieces is None else pieces,
    )

    try:
        first = Color(starting_player if starting_player is not None else settings.starting_player)
    except ValueError as e:
        raise InvalidSetupError(f"Unknown starting player: {starting_player!r}") from e

    logger.debug(f"Initialized game: {len(board.tiles)} tiles, {first.value} to move")
    return TurnState(
        board=board,
        player=first,
        initial_board=board,
        starting_player=first,
    )


def reset(state: TurnState) -> TurnState:
    """Return the opening state of the game *state* belongs to."""
    board = state.initial_board or state.board
    first = state.starting_player or state.player
    return TurnState(board=board, player=first, initial_board=board, starting_player=first)


def handle_coordinate_input(state: TurnState, coord: tuple[int, int]) -> TurnState:
    """Feed one board coordinate to the state machine and return the next state.

    *coord* must be a pair of ints. Any such pair is either applied or ignored;
    anything else is a caller bug and raises ValueError.
    """
    pos = to_hex(coord)
    if state.winner is not None:
        return state

    if state.phase is TurnPhase.SELECT_PIECE:
        return _handle_piece_input(state, pos)
    return _handle_tile_input(state, pos)


# ── Read-only queries ──

def current_legal_destinations(state: TurnState) -> frozenset[Hex]:
    return state.legal_destinations


def current_phase(state: TurnState) -> TurnPhase:
    return state.phase


def current_player(state: TurnState) -> Color:
    return state.player


def winner(state: TurnState) -> Color | None:
    return state.winner


def selectable_sources(state: TurnState) -> frozenset[Hex]:
    """Coordinates that would start a move right now.

    Own pieces that can slide somewhere in SELECT_PIECE, movable tiles with
    at least one placement in SELECT_TILE, nothing once the game is over.
    """
    if state.winner is not None:
        return frozenset()

    board = state.board
    if state.phase is TurnPhase.SELECT_PIECE:
        return frozenset(
            pos for pos in board.pieces[state.player] if legal_piece_moves(board, pos)
        )
    return frozenset(
        tile
        for tile in selectable_tiles(board, state.last_moved_tile)
        if legal_tile_placements(board, tile)
    )


# ── Transitions ──

def _handle_piece_input(state: TurnState, pos: Hex) -> TurnState:
    if state.selected_piece is not None and pos in state.legal_destinations:
        return _move_piece(state, state.selected_piece, pos)

    if state.board.owner_at(pos) is state.player:
        return replace(
            state,
            selected_piece=pos,
            legal_destinations=legal_piece_moves(state.board, pos),
        )

    return state


def _move_piece(state: TurnState, source: Hex, destination: Hex) -> TurnState:
    mover = state.player
    board = state.board.relocate_piece(mover, source, destination)
    history = state.history + (MoveRecord(mover, "piece", source, destination),)
    logger.debug(f"{mover.value} slid {tuple(source)} -> {tuple(destination)}")

    if has_won(board.pieces[mover]):
        logger.info(f"{mover.value} wins after {len(history)} moves")
        return replace(
            state,
            board=board,
            selected_piece=None,
            legal_destinations=frozenset(),
            winner=mover,
            history=history,
        )

    return replace(
        state,
        board=board,
        phase=TurnPhase.SELECT_TILE,
        selected_piece=None,
        legal_destinations=frozenset(),
        history=history,
    )


def _handle_tile_input(state: TurnState, pos: Hex) -> TurnState:
    if state.selected_tile is not None and pos in state.legal_destinations:
        return _move_tile(state, state.selected_tile, pos)

    if pos in selectable_tiles(state.board, state.last_moved_tile):
        return replace(
            state,
            selected_tile=pos,
            legal_destinations=legal_tile_placements(state.board, pos),
        )

    return state


def _move_tile(state: TurnState, source: Hex, destination: Hex) -> TurnState:
    mover = state.player
    board = state.board.relocate_tile(source, destination)
    logger.debug(f"{mover.value} moved tile {tuple(source)} -> {tuple(destination)}")

    return replace(
        state,
        board=board,
        player=mover.opponent,
        phase=TurnPhase.SELECT_PIECE,
        selected_tile=None,
        legal_destinations=frozenset(),
        last_moved_tile=destination,
        history=state.history + (MoveRecord(mover, "tile", source, destination),),
    )
