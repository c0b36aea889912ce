"""Service d'orchestration d'une partie Spaces en plusieurs manches."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from spaces.app.event_bus import EventBus
from spaces.app.events import (
    BoardSelectedEvent,
    MatchEndedEvent,
    MatchStartedEvent,
    RoundCompletedEvent,
)
from spaces.engine.board import Board
from spaces.engine.codec import decode_board
from spaces.engine.rules import DEFAULT_RULES, TOTAL_ROUNDS, RuleSet, is_valid_board_size
from spaces.engine.simulation import (
    RoundResult,
    Side,
    Winner,
    match_winner,
    simulate_round,
    total_points,
)
from spaces.engine.validation import ValidationResult, validate_board

logger = logging.getLogger(__name__)

SIDES: tuple[Side, ...] = ("player", "opponent")


class InvalidBoardError(ValueError):
    """Plateau refusé par le validateur. `result` liste toutes les violations."""

    def __init__(self, result: ValidationResult) -> None:
        messages = "; ".join(error.message for error in result.errors)
        super().__init__(f"Plateau invalide: {messages}")
        self.result = result


@dataclass
class MatchState:
    """État d'une partie. L'historique des manches est la seule source de vérité."""

    player_name: str
    opponent_name: str
    board_size: int
    total_rounds: int
    history: List[RoundResult] = field(default_factory=list)
    pending: Dict[Side, Board] = field(default_factory=dict)

    @property
    def current_round(self) -> int:
        return min(len(self.history) + 1, self.total_rounds)

    @property
    def is_over(self) -> bool:
        return len(self.history) >= self.total_rounds

    @property
    def player_score(self) -> int:
        return total_points(self.history, "player")

    @property
    def opponent_score(self) -> int:
        return total_points(self.history, "opponent")

    @property
    def winner(self) -> Winner:
        return match_winner(self.history)


class MatchService:
    """Wrappe `MatchState` et publie les évènements nécessaires à l'interface."""

    def __init__(self, *, event_bus: EventBus | None = None, rules: RuleSet = DEFAULT_RULES) -> None:
        self._event_bus = event_bus or EventBus()
        self._rules = rules
        self._state: MatchState | None = None

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def state(self) -> MatchState:
        """État courant de la partie (erreur si aucune partie lancée)."""

        if self._state is None:
            raise RuntimeError("Aucune partie initialisée. Utiliser start_new_match().")
        return self._state

    def start_new_match(
        self,
        player_name: str,
        opponent_name: str,
        *,
        board_size: int = 2,
        total_rounds: int = TOTAL_ROUNDS,
    ) -> MatchState:
        """Initialise une nouvelle partie et publie l'évènement associé."""

        if not is_valid_board_size(board_size):
            raise ValueError(f"Taille de plateau invalide: {board_size}")
        if total_rounds <= 0:
            raise ValueError(f"total_rounds doit être strictement positif (reçu: {total_rounds})")

        self._state = MatchState(
            player_name=player_name,
            opponent_name=opponent_name,
            board_size=board_size,
            total_rounds=total_rounds,
        )
        logger.info(
            "Nouvelle partie %s contre %s (%d×%d, %d manches)",
            player_name,
            opponent_name,
            board_size,
            board_size,
            total_rounds,
        )
        self._event_bus.publish(
            MatchStartedEvent(
                player_name=player_name,
                opponent_name=opponent_name,
                board_size=board_size,
                total_rounds=total_rounds,
            )
        )
        return self._state

    def first_mover(self, round_number: int) -> Side:
        """Manches impaires: le créateur de la partie (joueur) commence."""

        return "player" if round_number % 2 == 1 else "opponent"

    def select_board(self, side: Side, board: Board) -> RoundResult | None:
        """Valide et enregistre le plateau d'un joueur pour la manche courante.

        Dès que les deux plateaux sont présents, la manche est simulée une seule
        fois et son résultat est renvoyé; sinon renvoie None.
        """

        state = self.state
        if side not in SIDES:
            raise ValueError(f"Camp inconnu: {side!r}")
        if state.is_over:
            raise RuntimeError("La partie est terminée")
        if side in state.pending:
            raise ValueError(f"Plateau déjà choisi pour {side} à la manche {state.current_round}")
        if board.size != state.board_size:
            raise ValueError(
                f"Taille de plateau {board.size} incompatible avec la partie ({state.board_size})"
            )

        validation = validate_board(board, rules=self._rules)
        if not validation.valid:
            raise InvalidBoardError(validation)

        round_number = state.current_round
        state.pending[side] = board
        self._event_bus.publish(BoardSelectedEvent(round=round_number, side=side, board=board))

        if len(state.pending) < len(SIDES):
            return None
        return self._complete_round(round_number)

    def select_encoded_board(self, side: Side, encoded: str) -> RoundResult | None:
        """Décode un plateau partagé puis le soumet comme `select_board`."""

        return self.select_board(side, decode_board(encoded))

    def _complete_round(self, round_number: int) -> RoundResult:
        state = self.state
        result = simulate_round(round_number, state.pending["player"], state.pending["opponent"])
        state.history.append(result)
        state.pending.clear()

        logger.info(
            "Manche %d terminée: %s (%d-%d)",
            round_number,
            result.winner,
            result.player_points,
            result.opponent_points,
        )
        self._event_bus.publish(
            RoundCompletedEvent(
                result=result,
                player_score=state.player_score,
                opponent_score=state.opponent_score,
            )
        )

        if state.is_over:
            logger.info("Partie terminée: %s", state.winner)
            self._event_bus.publish(
                MatchEndedEvent(
                    winner=state.winner,
                    player_score=state.player_score,
                    opponent_score=state.opponent_score,
                )
            )
        return result


__all__ = ["InvalidBoardError", "MatchState", "MatchService"]
