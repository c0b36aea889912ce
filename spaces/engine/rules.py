"""Règles et constantes de la variante Spaces.

Ce module expose le contrat minimal partagé par le validateur, le simulateur
et le codec:
- bornes de taille de plateau (`MIN_BOARD_SIZE`, `MAX_BOARD_SIZE`)
- limites de contenu d'un plateau (`MAX_TRAPS`, `MIN_MOVES`, `MAX_MOVES`)
- ligne virtuelle de l'objectif (`GOAL_ROW`)
- format de partie (`TOTAL_ROUNDS`, `DECK_SIZE`)
"""

from __future__ import annotations

from dataclasses import dataclass

# Taille de plateau (grille N×N)
MIN_BOARD_SIZE: int = 2
MAX_BOARD_SIZE: int = 99

# Contenu d'un plateau
MAX_TRAPS: int = 3
MIN_MOVES: int = 2
MAX_MOVES: int = 8

# Ligne virtuelle hors grille marquant la sortie du pion
GOAL_ROW: int = -1

# Format de partie
TOTAL_ROUNDS: int = 5
DECK_SIZE: int = 10


def is_valid_board_size(size: object) -> bool:
    """Indique si `size` est une taille de plateau acceptée."""

    return (
        isinstance(size, int)
        and not isinstance(size, bool)
        and MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE
    )


@dataclass(frozen=True)
class RuleSet:
    """Paramètres de validation d'un plateau.

    Les valeurs par défaut reprennent les constantes historiques du jeu. La
    limite de pièges peut suivre la taille du plateau (`size - 1`) via
    `size_relative_traps`.
    """

    max_traps: int = MAX_TRAPS
    size_relative_traps: bool = False
    min_moves: int = MIN_MOVES
    max_moves: int = MAX_MOVES

    def trap_limit(self, size: int) -> int:
        """Nombre maximal de pièges autorisés pour un plateau de taille `size`."""

        if self.size_relative_traps:
            return max(size - 1, 0)
        return self.max_traps


DEFAULT_RULES = RuleSet()

__all__ = [
    "MIN_BOARD_SIZE",
    "MAX_BOARD_SIZE",
    "MAX_TRAPS",
    "MIN_MOVES",
    "MAX_MOVES",
    "GOAL_ROW",
    "TOTAL_ROUNDS",
    "DECK_SIZE",
    "RuleSet",
    "DEFAULT_RULES",
    "is_valid_board_size",
]
