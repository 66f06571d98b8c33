"""Lossless dict encoding of a TurnState.

The output is JSON-safe: coordinates become ``[q, r]`` lists and enums their
string values. ``state_from_dict(state_to_dict(s)) == s`` for every state.
"""

from __future__ import annotations

from nonaga.engine.errors import InvalidSetupError
from nonaga.game.board import BoardState, build_board
from nonaga.game.controller import MoveRecord, TurnState
from nonaga.game.types import Color, Hex, TurnPhase, to_hex


def state_to_dict(state: TurnState) -> dict:
    data = {
        **_board_to_dict(state.board),
        "player": state.player.value,
        "phase": state.phase.value,
        "selected_piece": _opt_hex(state.selected_piece),
        "selected_tile": _opt_hex(state.selected_tile),
        "legal_destinations": _hex_list(state.legal_destinations),
        "last_moved_tile": _opt_hex(state.last_moved_tile),
        "winner": state.winner.value if state.winner is not None else None,
        "history": [
            {
                "player": rec.player.value,
                "kind": rec.kind,
                "source": list(rec.source),
                "destination": list(rec.destination),
            }
            for rec in state.history
        ],
        "initial": None,
    }
    if state.initial_board is not None:
        data["initial"] = {
            **_board_to_dict(state.initial_board),
            "starting_player": state.starting_player.value if state.starting_player else None,
        }
    return data


def state_from_dict(data: dict) -> TurnState:
    """Rebuild a TurnState. Raises InvalidSetupError on malformed data."""
    try:
        board = build_board(data["tiles"], data["pieces"])
        initial = data.get("initial")
        initial_board: BoardState | None = None
        starting_player: Color | None = None
        if initial is not None:
            initial_board = build_board(initial["tiles"], initial["pieces"])
            if initial.get("starting_player") is not None:
                starting_player = Color(initial["starting_player"])

        history = tuple(
            MoveRecord(
                player=Color(rec["player"]),
                kind=_record_kind(rec["kind"]),
                source=to_hex(rec["source"]),
                destination=to_hex(rec["destination"]),
            )
            for rec in data.get("history", [])
        )

        return TurnState(
            board=board,
            player=Color(data["player"]),
            phase=TurnPhase(data["phase"]),
            selected_piece=_parse_opt_hex(data.get("selected_piece")),
            selected_tile=_parse_opt_hex(data.get("selected_tile")),
            legal_destinations=frozenset(to_hex(h) for h in data.get("legal_destinations", [])),
            last_moved_tile=_parse_opt_hex(data.get("last_moved_tile")),
            winner=Color(data["winner"]) if data.get("winner") is not None else None,
            history=history,
            initial_board=initial_board,
            starting_player=starting_player,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidSetupError(f"Malformed game state: {e}") from e


def _board_to_dict(board: BoardState) -> dict:
    return {
        "tiles": _hex_list(board.tiles),
        "pieces": {
            color.value: [list(p) for p in positions]
            for color, positions in board.pieces.items()
        },
    }


def _hex_list(hexes) -> list[list[int]]:
    return [list(h) for h in sorted(hexes)]


def _opt_hex(pos: Hex | None) -> list[int] | None:
    return list(pos) if pos is not None else None


def _parse_opt_hex(value) -> Hex | None:
    return to_hex(value) if value is not None else None


def _record_kind(kind: str) -> str:
    if kind not in ("piece", "tile"):
        raise ValueError(f"Unknown move kind: {kind!r}")
    return kind
