"""Simulateur de manche.

Les deux joueurs déroulent leur liste de coups pas à pas, simultanément:
- +1 point par déplacement vers son propre objectif
- +1 point en atteignant l'objectif (coup final)
- -1 point (minimum 0) pour chacun en cas de collision, la manche s'arrête
- -1 point (minimum 0) en tombant sur un piège adverse, seul ce joueur s'arrête
- la manche s'arrête dès qu'un joueur atteint son objectif

Le plateau adverse est ramené dans le repère du joueur par `rotate`; toutes
les comparaisons de positions se font dans ce repère commun. Le simulateur
suppose des plateaux déjà validés et ne lève jamais d'exception sur des listes
de coups courtes ou vides.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Literal, Sequence

from spaces.engine.board import Board, Move, MoveType, Position, rotate
from spaces.engine.rules import DECK_SIZE

logger = logging.getLogger(__name__)

Side = Literal["player", "opponent"]
Winner = Literal["player", "opponent", "tie"]
PlayerOutcome = Literal["won", "lost", "tie"]
VisualOutcome = Literal["goal", "trapped", "forward", "stuck"]


@dataclass(frozen=True)
class SimulationDetails:
    """Détails de déroulement d'une manche."""

    player_moves: int
    opponent_moves: int
    player_hit_trap: bool
    opponent_hit_trap: bool
    player_last_step: int = -1
    opponent_last_step: int = -1
    player_trap_position: Position | None = None
    opponent_trap_position: Position | None = None


@dataclass(frozen=True)
class RoundResult:
    """Résultat immuable d'une manche, positions exprimées dans le repère commun."""

    round: int
    winner: Winner
    player_board: Board
    opponent_board: Board
    player_final_position: Position
    opponent_final_position: Position
    player_points: int
    opponent_points: int
    player_outcome: PlayerOutcome
    player_visual_outcome: VisualOutcome
    opponent_visual_outcome: VisualOutcome
    collision: bool
    details: SimulationDetails

    def points(self, side: Side) -> int:
        return self.player_points if side == "player" else self.opponent_points


@dataclass
class _SideState:
    """État d'un joueur pendant une simulation (local à un appel)."""

    # -1: l'objectif est vers les lignes basses (joueur), +1 sinon (adversaire)
    goal_direction: int
    position: Position | None = None
    score: int = 0
    ended: bool = False
    goal_reached: bool = False
    hit_trap: bool = False
    moves: int = 0
    last_step: int = -1
    trap_position: Position | None = None
    traps: Dict[Position, int] = field(default_factory=dict)

    def penalize(self) -> None:
        if self.score > 0:
            self.score -= 1

    def is_forward(self, target: Position) -> bool:
        if self.position is None:
            return False
        return (target.row - self.position.row) * self.goal_direction > 0


def _play_step(
    side: _SideState,
    moves: Sequence[Move],
    step: int,
    size: int,
    *,
    rotated: bool,
) -> None:
    """Joue le coup `step` d'un joueur, s'il est encore en jeu."""

    if side.ended:
        return
    if step >= len(moves):
        # Liste épuisée: la manche de ce joueur est terminée.
        side.ended = True
        return

    move = moves[step]
    position = rotate(move.position, size) if rotated else move.position

    if move.type is MoveType.PIECE:
        if side.is_forward(position):
            side.score += 1
        side.position = position
        side.moves += 1
    elif move.type is MoveType.TRAP:
        side.traps[position] = step
    elif move.type is MoveType.FINAL:
        side.goal_reached = True
        side.position = position
        side.score += 1
        side.ended = True
    side.last_step = step


def _check_trap(side: _SideState, opposing_traps: Dict[Position, int], step: int) -> None:
    if side.ended or side.position is None:
        return
    trap_step = opposing_traps.get(side.position)
    if trap_step is not None and trap_step <= step:
        side.penalize()
        side.hit_trap = True
        side.trap_position = side.position
        side.ended = True


def _visual_outcome(side: _SideState, other: _SideState) -> VisualOutcome:
    if side.goal_reached:
        return "goal"
    if side.hit_trap:
        return "trapped"
    if other.goal_reached:
        return "stuck"
    if side.moves > 0:
        return "forward"
    return "stuck"


def simulate_round(round_number: int, player_board: Board, opponent_board: Board) -> RoundResult:
    """Simule une manche complète entre deux plateaux supposés valides.

    Args:
        round_number: numéro de la manche (reporté tel quel dans le résultat)
        player_board: plateau du joueur, dans son propre repère
        opponent_board: plateau adverse, dans le repère de l'adversaire

    Returns:
        Le résultat de la manche, positions finales dans le repère du joueur.
    """

    size = player_board.size
    logger.debug(
        "Manche %d: %s contre %s", round_number, player_board.name, opponent_board.name
    )

    player = _SideState(goal_direction=-1)
    opponent = _SideState(goal_direction=1)
    player_moves = player_board.moves
    opponent_moves = opponent_board.moves

    for step in range(max(len(player_moves), len(opponent_moves))):
        _play_step(player, player_moves, step, size, rotated=False)
        _play_step(opponent, opponent_moves, step, size, rotated=True)

        if (
            not player.goal_reached
            and not opponent.goal_reached
            and player.position is not None
            and player.position == opponent.position
        ):
            player.penalize()
            opponent.penalize()
            logger.debug("Collision en %s au pas %d", player.position, step)
            break

        _check_trap(player, opponent.traps, step)
        _check_trap(opponent, player.traps, step)

        if player.ended and opponent.ended:
            break
        # Arrêt au premier objectif atteint, même si l'autre liste n'est pas finie.
        if player.goal_reached or opponent.goal_reached:
            break

    winner: Winner
    if player.score > opponent.score:
        winner = "player"
    elif opponent.score > player.score:
        winner = "opponent"
    else:
        winner = "tie"
    player_outcome: PlayerOutcome = {"player": "won", "opponent": "lost", "tie": "tie"}[winner]

    final_player = player.position or Position(row=size - 1, col=0)
    final_opponent = opponent.position or Position(row=0, col=size - 1)

    logger.debug(
        "Résultat manche %d: %s | joueur %d pts | adversaire %d pts",
        round_number,
        winner,
        player.score,
        opponent.score,
    )

    return RoundResult(
        round=round_number,
        winner=winner,
        player_board=player_board,
        opponent_board=opponent_board,
        player_final_position=final_player,
        opponent_final_position=final_opponent,
        player_points=player.score,
        opponent_points=opponent.score,
        player_outcome=player_outcome,
        player_visual_outcome=_visual_outcome(player, opponent),
        opponent_visual_outcome=_visual_outcome(opponent, player),
        collision=final_player == final_opponent,
        details=SimulationDetails(
            player_moves=player.moves,
            opponent_moves=opponent.moves,
            player_hit_trap=player.hit_trap,
            opponent_hit_trap=opponent.hit_trap,
            player_last_step=player.last_step,
            opponent_last_step=opponent.last_step,
            player_trap_position=player.trap_position,
            opponent_trap_position=opponent.trap_position,
        ),
    )


def simulate_all_rounds(
    player_boards: Sequence[Board],
    opponent_boards: Sequence[Board],
) -> list[RoundResult]:
    """Mode deck: simule les `DECK_SIZE` manches d'un coup."""

    if len(player_boards) != DECK_SIZE or len(opponent_boards) != DECK_SIZE:
        raise ValueError(
            f"Les deux decks doivent contenir exactement {DECK_SIZE} plateaux "
            f"(reçu {len(player_boards)} et {len(opponent_boards)})"
        )

    results = [
        simulate_round(round_number, player_board, opponent_board)
        for round_number, (player_board, opponent_board) in enumerate(
            zip(player_boards, opponent_boards), start=1
        )
    ]
    logger.debug(
        "Deck terminé: joueur %d - adversaire %d",
        total_points(results, "player"),
        total_points(results, "opponent"),
    )
    return results


def board_score(board: Board) -> int:
    """Score obtenu par un plateau joué sans opposition (utilisé en cas de forfait)."""

    score = 0
    current_row: int | None = None
    for move in board.moves:
        if move.type is MoveType.PIECE:
            if current_row is not None and move.position.row < current_row:
                score += 1
            current_row = move.position.row
        elif move.type is MoveType.FINAL:
            score += 1
    return score


def total_points(results: Sequence[RoundResult], side: Side) -> int:
    return sum(result.points(side) for result in results)


def match_winner(results: Sequence[RoundResult]) -> Winner:
    player_total = total_points(results, "player")
    opponent_total = total_points(results, "opponent")
    if player_total > opponent_total:
        return "player"
    if opponent_total > player_total:
        return "opponent"
    return "tie"


__all__ = [
    "Side",
    "Winner",
    "SimulationDetails",
    "RoundResult",
    "simulate_round",
    "simulate_all_rounds",
    "board_score",
    "total_points",
    "match_winner",
]
