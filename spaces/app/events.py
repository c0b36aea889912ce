"""Évènements publiés par la couche application (`spaces.app`)."""

from __future__ import annotations

from dataclasses import dataclass

from spaces.engine.board import Board
from spaces.engine.simulation import RoundResult, Side, Winner


@dataclass(frozen=True)
class MatchStartedEvent:
    """Émis lorsqu'une nouvelle partie est initialisée."""

    player_name: str
    opponent_name: str
    board_size: int
    total_rounds: int


@dataclass(frozen=True)
class BoardSelectedEvent:
    """Émis quand un joueur a choisi un plateau valide pour la manche courante."""

    round: int
    side: Side
    board: Board


@dataclass(frozen=True)
class RoundCompletedEvent:
    """Émis après la simulation d'une manche."""

    result: RoundResult
    player_score: int
    opponent_score: int


@dataclass(frozen=True)
class MatchEndedEvent:
    """Émis après la dernière manche."""

    winner: Winner
    player_score: int
    opponent_score: int
