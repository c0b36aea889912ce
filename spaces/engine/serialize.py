"""Outils de sérialisation des plateaux et résultats de manche.

- Snapshot JSON-friendly (listes/dicts primitifs)
- Restauration complète d'un Board, métadonnées comprises (contrairement au
  codec minimal qui ne conserve que les coups)
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from spaces.engine.board import Board, CellContent, Move, MoveType, Position
from spaces.engine.simulation import RoundResult

SCHEMA_VERSION = "0.1.0"


def board_to_snapshot(board: Board) -> Dict[str, Any]:
    """Convertit un Board en snapshot JSON-friendly."""

    return {
        "schema_version": SCHEMA_VERSION,
        "id": board.id,
        "name": board.name,
        "board_size": board.size,
        "grid": [[cell.value for cell in row] for row in board.grid],
        "moves": [_serialize_move(move) for move in board.moves],
        "thumbnail": board.thumbnail,
        "created_at": board.created_at,
    }


def snapshot_to_board(snapshot: Mapping[str, Any]) -> Board:
    """Reconstruit un Board à partir d'un snapshot."""

    version = snapshot.get("schema_version")
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema_version: {version!r}")

    return Board(
        id=str(snapshot["id"]),
        name=str(snapshot["name"]),
        size=int(snapshot["board_size"]),
        grid=tuple(
            tuple(CellContent(cell) for cell in row) for row in snapshot["grid"]
        ),
        moves=tuple(_deserialize_move(data) for data in snapshot.get("moves", [])),
        thumbnail=str(snapshot.get("thumbnail", "")),
        created_at=int(snapshot.get("created_at", 0)),
    )


def round_result_to_snapshot(result: RoundResult) -> Dict[str, Any]:
    """Convertit un RoundResult en snapshot JSON-friendly (historique de partie)."""

    details = result.details
    return {
        "schema_version": SCHEMA_VERSION,
        "round": result.round,
        "winner": result.winner,
        "player_board": board_to_snapshot(result.player_board),
        "opponent_board": board_to_snapshot(result.opponent_board),
        "player_final_position": _serialize_position(result.player_final_position),
        "opponent_final_position": _serialize_position(result.opponent_final_position),
        "player_points": result.player_points,
        "opponent_points": result.opponent_points,
        "player_outcome": result.player_outcome,
        "player_visual_outcome": result.player_visual_outcome,
        "opponent_visual_outcome": result.opponent_visual_outcome,
        "collision": result.collision,
        "simulation_details": {
            "player_moves": details.player_moves,
            "opponent_moves": details.opponent_moves,
            "player_hit_trap": details.player_hit_trap,
            "opponent_hit_trap": details.opponent_hit_trap,
            "player_last_step": details.player_last_step,
            "opponent_last_step": details.opponent_last_step,
            "player_trap_position": _serialize_optional_position(details.player_trap_position),
            "opponent_trap_position": _serialize_optional_position(
                details.opponent_trap_position
            ),
        },
    }


def _serialize_move(move: Move) -> Dict[str, Any]:
    return {
        "position": _serialize_position(move.position),
        "type": move.type.value,
        "order": move.order,
    }


def _deserialize_move(data: Mapping[str, Any]) -> Move:
    return Move(
        position=_deserialize_position(data["position"]),
        type=MoveType(data["type"]),
        order=int(data["order"]),
    )


def _serialize_position(position: Position) -> Dict[str, int]:
    return {"row": position.row, "col": position.col}


def _serialize_optional_position(position: Position | None) -> Dict[str, int] | None:
    if position is None:
        return None
    return _serialize_position(position)


def _deserialize_position(data: Mapping[str, Any]) -> Position:
    return Position(row=int(data["row"]), col=int(data["col"]))


__all__ = [
    "SCHEMA_VERSION",
    "board_to_snapshot",
    "snapshot_to_board",
    "round_result_to_snapshot",
]
