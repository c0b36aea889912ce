"""Validation des plateaux.

Le validateur ne lève jamais d'exception: il collecte toutes les règles
violées afin qu'un éditeur puisse les afficher simultanément.

Règles:
- exactement 1 pion dans la grille (0 si la liste contient un coup final)
- au plus `RuleSet.trap_limit(size)` pièges
- entre `min_moves` et `max_moves` coups
- la longueur de la liste couvre chaque pion, piège et coup final
- les rangs forment 1..N sans doublon
- chaque coup correspond à la case de la grille qu'il référence
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from spaces.engine.board import Board, CellContent, Move, MoveType
from spaces.engine.rules import DEFAULT_RULES, GOAL_ROW, RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationError:
    """Règle violée.

    Args:
        field: partie du plateau concernée (`grid`, `piece`, `trap`, `moves`)
        message: description lisible de la violation
    """

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Tuple[ValidationError, ...] = ()


def validate_board(board: Board, *, rules: RuleSet = DEFAULT_RULES) -> ValidationResult:
    """Valide un plateau complet et renvoie toutes les violations."""

    errors: List[ValidationError] = []

    errors.extend(_check_grid_shape(board))

    piece_count = board.count_cells(CellContent.PIECE)
    trap_count = board.count_cells(CellContent.TRAP)
    has_final = board.has_final_move

    expected_pieces = 0 if has_final else 1
    if piece_count != expected_pieces:
        if has_final:
            message = (
                "Un plateau avec coup final doit avoir 0 pion dans la grille "
                f"(trouvé {piece_count})"
            )
        else:
            message = f"Le plateau doit avoir exactement 1 pion (trouvé {piece_count})"
        errors.append(ValidationError("piece", message))

    trap_limit = rules.trap_limit(board.size)
    if trap_count > trap_limit:
        errors.append(
            ValidationError(
                "trap",
                f"Le plateau peut avoir au maximum {trap_limit} pièges (trouvé {trap_count})",
            )
        )

    move_count = len(board.moves)
    if move_count < rules.min_moves:
        errors.append(
            ValidationError(
                "moves",
                f"Le plateau doit avoir au moins {rules.min_moves} coups (trouvé {move_count})",
            )
        )
    if move_count > rules.max_moves:
        errors.append(
            ValidationError(
                "moves",
                f"Le plateau peut avoir au maximum {rules.max_moves} coups (trouvé {move_count})",
            )
        )

    final_count = sum(1 for move in board.moves if move.type is MoveType.FINAL)
    total_items = piece_count + trap_count + final_count
    if move_count != total_items:
        errors.append(
            ValidationError(
                "moves",
                f"La longueur de la liste ({move_count}) doit égaler pions + pièges "
                f"+ coups finaux ({total_items})",
            )
        )

    errors.extend(_check_orders(board.moves))
    errors.extend(_check_moves_match_grid(board))

    if errors:
        logger.debug("Plateau %s invalide: %d violation(s)", board.id, len(errors))
    return ValidationResult(valid=not errors, errors=tuple(errors))


def _check_grid_shape(board: Board) -> List[ValidationError]:
    if len(board.grid) != board.size or any(len(row) != board.size for row in board.grid):
        return [
            ValidationError(
                "grid",
                f"La grille doit mesurer {board.size}×{board.size}",
            )
        ]
    return []


def _check_orders(moves: Sequence[Move]) -> List[ValidationError]:
    """Vérifie que les rangs sont exactement 1..N, sans doublon."""

    errors: List[ValidationError] = []
    if not moves:
        return errors

    orders = [move.order for move in moves]
    if len(set(orders)) != len(orders):
        errors.append(
            ValidationError("moves", "Les rangs des coups doivent être uniques (doublon trouvé)")
        )

    for index, actual in enumerate(sorted(orders), start=1):
        if actual != index:
            errors.append(
                ValidationError(
                    "moves",
                    f"Les rangs doivent être consécutifs 1..{len(moves)} "
                    f"(trouvé {actual} en position {index})",
                )
            )
            # Seule la première divergence est signalée.
            break
    return errors


def _check_moves_match_grid(board: Board) -> List[ValidationError]:
    errors: List[ValidationError] = []
    rows = len(board.grid)

    for move in board.moves:
        row, col = move.position.row, move.position.col

        if move.type is MoveType.FINAL:
            if row != GOAL_ROW:
                errors.append(
                    ValidationError(
                        "moves",
                        f"Le coup final (rang {move.order}) doit viser la ligne d'objectif "
                        f"{GOAL_ROW}, trouvé ligne {row}",
                    )
                )
            elif not 0 <= col < board.size:
                errors.append(
                    ValidationError(
                        "moves",
                        f"Le coup final (rang {move.order}) a une colonne invalide {col}",
                    )
                )
            continue

        if not 0 <= row < rows:
            errors.append(
                ValidationError("moves", f"Le coup {move.order} a une ligne invalide {row}")
            )
            continue

        grid_row = board.grid[row]
        if not 0 <= col < len(grid_row):
            errors.append(
                ValidationError("moves", f"Le coup {move.order} a une colonne invalide {col}")
            )
            continue

        expected = CellContent.PIECE if move.type is MoveType.PIECE else CellContent.TRAP
        found = grid_row[col]
        if found != expected:
            found_label = found.value if isinstance(found, CellContent) else repr(found)
            errors.append(
                ValidationError(
                    "moves",
                    f"Le coup {move.order} en ({row}, {col}) attend {expected.value} "
                    f"mais trouve {found_label}",
                )
            )
    return errors


# -- Vérifications rapides (retour booléen) --


def is_valid_board(board: Board, *, rules: RuleSet = DEFAULT_RULES) -> bool:
    return validate_board(board, rules=rules).valid


def has_exactly_one_piece(board: Board) -> bool:
    return board.count_cells(CellContent.PIECE) == 1


def has_too_many_traps(board: Board, *, rules: RuleSet = DEFAULT_RULES) -> bool:
    return board.count_cells(CellContent.TRAP) > rules.trap_limit(board.size)


def has_valid_move_count(board: Board, *, rules: RuleSet = DEFAULT_RULES) -> bool:
    return rules.min_moves <= len(board.moves) <= rules.max_moves


def has_consecutive_orders(board: Board) -> bool:
    return not _check_orders(board.moves)


def is_board_playable(board: Board) -> bool:
    """Contrôle minimal côté simulateur.

    Au moins un coup, coups finaux sur la ligne d'objectif, autres coups dans
    la grille et sur une case non vide.
    """

    if not board.moves:
        return False

    size = len(board.grid)
    for move in board.moves:
        row, col = move.position.row, move.position.col
        if move.type is MoveType.FINAL:
            if row != GOAL_ROW:
                return False
            continue
        if not (0 <= row < size and 0 <= col < len(board.grid[row])):
            return False
        if board.grid[row][col] == CellContent.EMPTY:
            return False
    return True


__all__ = [
    "ValidationError",
    "ValidationResult",
    "validate_board",
    "is_valid_board",
    "has_exactly_one_piece",
    "has_too_many_traps",
    "has_valid_move_count",
    "has_consecutive_orders",
    "is_board_playable",
]
