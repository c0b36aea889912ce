"""Engine package exposing rules, board model, validation, simulation and codec."""

from . import rules  # re-export for convenience
from .board import Board, CellContent, Move, MoveType, Position, render_grid, rotate
from .codec import decode_board, encode_board
from .simulation import RoundResult, simulate_round
from .validation import ValidationResult, validate_board

__all__ = [
    "rules",
    "Board",
    "CellContent",
    "Move",
    "MoveType",
    "Position",
    "render_grid",
    "rotate",
    "validate_board",
    "ValidationResult",
    "simulate_round",
    "RoundResult",
    "encode_board",
    "decode_board",
]
