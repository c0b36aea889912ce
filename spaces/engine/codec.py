"""Codec texte minimal pour partager un plateau.

Format: ``"<taille>|<jeton><jeton>..."``

- ``taille``: décimal, entre `MIN_BOARD_SIZE` et `MAX_BOARD_SIZE`
- jeton classique: index aplati ``ligne * taille + colonne`` complété de zéros
  à la largeur de ``taille² - 1``, suivi du code de type (``p`` pion, ``t``
  piège)
- jeton d'objectif: ``G``, la colonne en décimal (inférieure à ``taille``,
  au plus autant de chiffres que ``taille - 1``), puis ``f``

Les jetons suivent l'ordre des coups; le décodage reconstruit les rangs à
partir de la position des jetons. Seuls la liste de coups et la grille sont
conservés: le décodage crée un nouvel identifiant, le nom "Shared Board" et
l'horodatage courant.

Ce module est la seule frontière d'entrée non fiable du moteur. Il garantit
une syntaxe correcte, pas la légalité du plateau: l'appelant doit valider le
résultat avec `spaces.engine.validation.validate_board`.
"""

from __future__ import annotations

import logging
import uuid
from typing import List

from spaces.engine.board import Board, Move, MoveType, Position, current_timestamp_ms, render_grid
from spaces.engine.rules import GOAL_ROW, MAX_BOARD_SIZE, MIN_BOARD_SIZE, is_valid_board_size

logger = logging.getLogger(__name__)

SEPARATOR = "|"
GOAL_PREFIX = "G"
GOAL_SUFFIX = "f"
SHARED_BOARD_NAME = "Shared Board"

_TYPE_CODES = {MoveType.PIECE: "p", MoveType.TRAP: "t"}
_CODE_TYPES = {code: move_type for move_type, code in _TYPE_CODES.items()}


class BoardEncodingError(ValueError):
    """Plateau impossible à encoder."""


class BoardCodecError(ValueError):
    """Chaîne encodée rejetée. `kind` identifie la classe de malformation."""

    kind = "BadFormat"


class BadFormatError(BoardCodecError):
    kind = "BadFormat"


class BadSizeError(BoardCodecError):
    kind = "BadSize"


class BadMoveTypeError(BoardCodecError):
    kind = "BadMoveType"


class BadGoalTokenError(BoardCodecError):
    kind = "BadGoalToken"


class BadGoalColumnError(BoardCodecError):
    kind = "BadGoalColumn"


class BadPositionError(BoardCodecError):
    kind = "BadPosition"


class TruncatedPositionError(BoardCodecError):
    kind = "TruncatedPosition"


def position_width(size: int) -> int:
    """Nombre de chiffres nécessaires pour l'index aplati maximal."""

    return len(str(size * size - 1))


def _is_digits(text: str) -> bool:
    return bool(text) and all("0" <= char <= "9" for char in text)


def validate_board_for_encoding(board: Board) -> bool:
    """Vérifie qu'un plateau peut être encodé sans perte.

    Raises:
        BoardEncodingError: liste vide, taille hors bornes, rangs décalés ou
            position non représentable.
    """

    if not board.moves:
        raise BoardEncodingError("Le plateau doit contenir au moins un coup")
    if not is_valid_board_size(board.size):
        raise BoardEncodingError(
            f"La taille du plateau doit être comprise entre {MIN_BOARD_SIZE} et "
            f"{MAX_BOARD_SIZE} (reçu {board.size})"
        )
    for index, move in enumerate(board.moves):
        if move is None:
            raise BoardEncodingError(f"Le coup d'index {index} est indéfini")
        if move.order != index + 1:
            raise BoardEncodingError(
                f"Décalage de rang: index {index} porte le rang {move.order}"
            )
        row, col = move.position.row, move.position.col
        if move.type is MoveType.FINAL:
            if row != GOAL_ROW or not 0 <= col < board.size:
                raise BoardEncodingError(
                    f"Coup final {move.order} hors de la ligne d'objectif ({row}, {col})"
                )
        elif not (0 <= row < board.size and 0 <= col < board.size):
            raise BoardEncodingError(f"Coup {move.order} hors grille ({row}, {col})")
    return True


def encode_board(board: Board) -> str:
    """Encode un plateau en chaîne compacte."""

    validate_board_for_encoding(board)
    width = position_width(board.size)
    tokens: List[str] = []
    for move in board.moves:
        if move.type is MoveType.FINAL:
            tokens.append(f"{GOAL_PREFIX}{move.position.col}{GOAL_SUFFIX}")
        else:
            index = move.position.row * board.size + move.position.col
            tokens.append(f"{index:0{width}d}{_TYPE_CODES[move.type]}")
    return f"{board.size}{SEPARATOR}{''.join(tokens)}"


def decode_board(encoded: str) -> Board:
    """Décode une chaîne produite par `encode_board`.

    Raises:
        BoardCodecError: sous-classe correspondant à la malformation rencontrée.
    """

    try:
        return _decode(encoded)
    except BoardCodecError as exc:
        logger.debug("Plateau encodé rejeté (%s): %s", exc.kind, exc)
        raise


def _decode(encoded: str) -> Board:
    if not isinstance(encoded, str) or SEPARATOR not in encoded:
        raise BadFormatError("Format de plateau encodé invalide")

    size_text, body = encoded.split(SEPARATOR, 1)
    if not _is_digits(size_text):
        raise BadSizeError(f"Taille de plateau invalide: {size_text!r}")
    size = int(size_text)
    if not is_valid_board_size(size):
        raise BadSizeError(f"Taille de plateau invalide: {size}")

    width = position_width(size)
    moves: List[Move] = []
    index = 0
    while index < len(body):
        order = len(moves) + 1
        if body[index] == GOAL_PREFIX:
            move, index = _decode_goal(body, index, order, size)
        else:
            move, index = _decode_cell(body, index, order, size, width)
        moves.append(move)

    return Board(
        id=str(uuid.uuid4()),
        name=SHARED_BOARD_NAME,
        size=size,
        grid=render_grid(moves, size),
        moves=tuple(moves),
        thumbnail="",
        created_at=current_timestamp_ms(),
    )


def _decode_goal(body: str, start: int, order: int, size: int) -> tuple[Move, int]:
    if len(body) - start < 3:
        raise BadGoalTokenError(f"Jeton d'objectif invalide à l'index {start}")

    cursor = start + 1
    while cursor < len(body) and "0" <= body[cursor] <= "9":
        cursor += 1
    if cursor == start + 1:
        raise BadGoalColumnError(
            f"Colonne d'objectif invalide à l'index {start}: {body[cursor]!r}"
        )
    if cursor - start - 1 > len(str(size - 1)):
        raise BadGoalColumnError(f"Colonne d'objectif trop longue à l'index {start}")
    if cursor >= len(body) or body[cursor] != GOAL_SUFFIX:
        raise BadGoalTokenError(f"Jeton d'objectif non terminé à l'index {start}")

    column = int(body[start + 1:cursor])
    if column >= size:
        raise BadGoalColumnError(f"Colonne d'objectif {column} hors grille pour une taille {size}")
    move = Move(position=Position(row=GOAL_ROW, col=column), type=MoveType.FINAL, order=order)
    return move, cursor + 1


def _decode_cell(body: str, start: int, order: int, size: int, width: int) -> tuple[Move, int]:
    if len(body) - start < width + 1:
        raise TruncatedPositionError(f"Position tronquée à l'index {start}")

    digits = body[start:start + width]
    if not _is_digits(digits):
        raise BadPositionError(f"Valeur de position invalide à l'index {start}: {digits!r}")
    flat = int(digits)
    if flat >= size * size:
        raise BadPositionError(f"Position {flat} hors grille pour une taille {size}")

    code = body[start + width]
    move_type = _CODE_TYPES.get(code)
    if move_type is None:
        raise BadMoveTypeError(f"Type de coup invalide à l'index {start + width}: {code!r}")

    row, col = divmod(flat, size)
    move = Move(position=Position(row=row, col=col), type=move_type, order=order)
    return move, start + width + 1


__all__ = [
    "BoardEncodingError",
    "BoardCodecError",
    "BadFormatError",
    "BadSizeError",
    "BadMoveTypeError",
    "BadGoalTokenError",
    "BadGoalColumnError",
    "BadPositionError",
    "TruncatedPositionError",
    "encode_board",
    "decode_board",
    "validate_board_for_encoding",
    "position_width",
]
