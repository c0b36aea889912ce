"""Modèle de données partagé: positions, coups et plateaux.

Un plateau décrit le chemin complet d'un joueur pour une manche: une grille
N×N et la liste ordonnée des coups qui l'a produite. La grille n'est qu'un
rendu de la liste de coups (`render_grid`).

Convention de coordonnées: chaque joueur écrit son plateau dans son propre
repère, objectif en haut (ligne 0 puis sortie sur `GOAL_ROW`). Le simulateur
ramène le plateau adverse dans le repère commun avec `rotate`.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from spaces.engine.rules import GOAL_ROW


class CellContent(Enum):
    """Contenu d'une case de la grille."""

    EMPTY = "empty"
    PIECE = "piece"
    TRAP = "trap"


class MoveType(Enum):
    """Type d'un coup de la liste (`FINAL` n'apparaît jamais dans la grille)."""

    PIECE = "piece"
    TRAP = "trap"
    FINAL = "final"


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @property
    def is_goal(self) -> bool:
        return self.row == GOAL_ROW


@dataclass(frozen=True)
class Move:
    """Coup d'un plateau.

    Args:
        position: case visée (ou position virtuelle d'objectif pour `FINAL`)
        type: nature du coup
        order: rang du coup dans la liste (1..N)
    """

    position: Position
    type: MoveType
    order: int


Grid = Tuple[Tuple[CellContent, ...], ...]

DEFAULT_BOARD_NAME = "Untitled Board"


def rotate(position: Position, size: int) -> Position:
    """Rotation de 180° d'une position dans une grille `size`×`size`.

    Seule conversion entre le repère d'un joueur et celui de son adversaire.
    La position virtuelle d'objectif (`GOAL_ROW`) devient la ligne `size`.
    """

    return Position(row=size - 1 - position.row, col=size - 1 - position.col)


def empty_grid(size: int) -> Grid:
    return tuple(tuple(CellContent.EMPTY for _ in range(size)) for _ in range(size))


def render_grid(moves: Iterable[Move], size: int) -> Grid:
    """Construit la grille correspondant à une liste de coups.

    Chaque coup `PIECE` marque sa case, chaque coup `TRAP` la sienne; un piège
    recouvre un pion sur la même case. Les coups `FINAL` et les positions
    d'objectif ne sont jamais peints.

    Raises:
        ValueError: si un coup hors objectif sort de la grille.
    """

    cells: List[List[CellContent]] = [
        [CellContent.EMPTY for _ in range(size)] for _ in range(size)
    ]
    for move in moves:
        if move.type is MoveType.FINAL or move.position.is_goal:
            continue
        row, col = move.position.row, move.position.col
        if not (0 <= row < size and 0 <= col < size):
            raise ValueError(
                f"Coup {move.order} hors grille ({row}, {col}) pour une taille {size}"
            )
        if move.type is MoveType.TRAP:
            cells[row][col] = CellContent.TRAP
        elif cells[row][col] is not CellContent.TRAP:
            cells[row][col] = CellContent.PIECE
    return tuple(tuple(row) for row in cells)


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Board:
    """Plateau immuable d'un joueur pour une manche."""

    id: str
    name: str
    size: int
    grid: Grid
    moves: Tuple[Move, ...]
    thumbnail: str = ""
    created_at: int = 0

    @classmethod
    def from_moves(
        cls,
        moves: Iterable[Move],
        size: int,
        *,
        board_id: str | None = None,
        name: str = DEFAULT_BOARD_NAME,
        thumbnail: str = "",
        created_at: int | None = None,
    ) -> "Board":
        """Crée un plateau dont la grille est rendue depuis `moves`."""

        move_list = tuple(moves)
        return cls(
            id=board_id if board_id is not None else str(uuid.uuid4()),
            name=name,
            size=size,
            grid=render_grid(move_list, size),
            moves=move_list,
            thumbnail=thumbnail,
            created_at=created_at if created_at is not None else current_timestamp_ms(),
        )

    def cell(self, position: Position) -> CellContent:
        """Contenu de la case `position`.

        Raises:
            ValueError: position d'objectif ou hors grille.
        """

        if not (0 <= position.row < self.size and 0 <= position.col < self.size):
            raise ValueError(
                f"Position ({position.row}, {position.col}) hors grille pour une taille {self.size}"
            )
        return self.grid[position.row][position.col]

    def count_cells(self, content: CellContent) -> int:
        return sum(1 for row in self.grid for cell in row if cell == content)

    @property
    def has_final_move(self) -> bool:
        return any(move.type is MoveType.FINAL for move in self.moves)


__all__ = [
    "CellContent",
    "MoveType",
    "Position",
    "Move",
    "Grid",
    "Board",
    "rotate",
    "empty_grid",
    "render_grid",
]
