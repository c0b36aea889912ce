"""Confrontations parallèles entre plateaux d'une bibliothèque.

Chaque couple ordonné (i, j), i ≠ j, est simulé avec le plateau i côté joueur
et le plateau j côté adversaire. Les couples sont répartis entre N workers
indépendants (thread ou process) et les résultats agrégés dans des matrices
numpy indexées par plateau:

- ``wins[i, j]``: victoires du plateau i contre le plateau j, tous camps confondus
- ``points[i, j]``: points marqués par le plateau i contre le plateau j

`simulate_round` étant pure et sans état partagé, aucun verrou n'est requis.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Literal, Sequence, Tuple

import numpy as np

from spaces.engine.board import Board
from spaces.engine.simulation import Winner, simulate_round

logger = logging.getLogger(__name__)

ExecutorKind = Literal["thread", "process"]
Pairing = Tuple[int, int]


@dataclass(frozen=True)
class PairingOutcome:
    """Résultat d'une confrontation joueur (i) contre adversaire (j)."""

    player_index: int
    opponent_index: int
    player_points: int
    opponent_points: int
    winner: Winner


@dataclass(frozen=True)
class WorkerSummary:
    """Agrège les confrontations traitées par un worker."""

    worker_id: int
    outcomes: Tuple[PairingOutcome, ...]
    duration_seconds: float = field(default=0.0, compare=False)

    @property
    def pairings(self) -> int:
        return len(self.outcomes)


@dataclass(frozen=True)
class MatchupSummary:
    """Résumé global renvoyé par `ParallelMatchupRunner.run()`."""

    board_ids: Tuple[str, ...]
    wins: np.ndarray = field(compare=False)
    points: np.ndarray = field(compare=False)
    worker_summaries: Tuple[WorkerSummary, ...] = ()
    duration_seconds: float = field(default=0.0, compare=False)

    @property
    def total_pairings(self) -> int:
        return sum(worker.pairings for worker in self.worker_summaries)

    def win_rates(self) -> np.ndarray:
        """Taux de victoire de chaque plateau sur l'ensemble de ses confrontations."""

        games_per_board = 2 * (len(self.board_ids) - 1)
        return self.wins.sum(axis=1) / float(games_per_board)


def _validate_positive(name: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"{name} doit être strictement positif (reçu: {value})")


def build_pairings(board_count: int) -> Tuple[Pairing, ...]:
    return tuple(
        (i, j) for i in range(board_count) for j in range(board_count) if i != j
    )


def _distribute_pairings(
    pairings: Sequence[Pairing], num_workers: int
) -> Tuple[Tuple[int, Tuple[Pairing, ...]], ...]:
    """Répartit les confrontations en blocs contigus entre les workers."""

    base = len(pairings) // num_workers
    remainder = len(pairings) % num_workers
    cursor = 0
    assignments = []

    for worker_id in range(num_workers):
        count = base + (1 if worker_id < remainder else 0)
        assignments.append((worker_id, tuple(pairings[cursor:cursor + count])))
        cursor += count

    return tuple(assignments)


def _run_worker(
    worker_id: int,
    boards: Tuple[Board, ...],
    pairings: Tuple[Pairing, ...],
) -> WorkerSummary:
    """Simule les confrontations attribuées à un worker."""

    start = time.perf_counter()
    outcomes = []
    for round_number, (i, j) in enumerate(pairings, start=1):
        result = simulate_round(round_number, boards[i], boards[j])
        outcomes.append(
            PairingOutcome(
                player_index=i,
                opponent_index=j,
                player_points=result.player_points,
                opponent_points=result.opponent_points,
                winner=result.winner,
            )
        )
    return WorkerSummary(
        worker_id=worker_id,
        outcomes=tuple(outcomes),
        duration_seconds=time.perf_counter() - start,
    )


def _aggregate(
    board_count: int, worker_summaries: Sequence[WorkerSummary]
) -> Tuple[np.ndarray, np.ndarray]:
    wins = np.zeros((board_count, board_count), dtype=np.int64)
    points = np.zeros((board_count, board_count), dtype=np.int64)

    for worker in worker_summaries:
        for outcome in worker.outcomes:
            i, j = outcome.player_index, outcome.opponent_index
            points[i, j] += outcome.player_points
            points[j, i] += outcome.opponent_points
            if outcome.winner == "player":
                wins[i, j] += 1
            elif outcome.winner == "opponent":
                wins[j, i] += 1

    return wins, points


class ParallelMatchupRunner:
    """Orchestre les confrontations de tous les plateaux d'une bibliothèque."""

    def __init__(
        self,
        boards: Sequence[Board],
        *,
        num_workers: int,
        executor_kind: ExecutorKind = "process",
    ) -> None:
        _validate_positive("num_workers", num_workers)
        if len(boards) < 2:
            raise ValueError(f"Au moins 2 plateaux sont nécessaires (reçu: {len(boards)})")
        sizes = {board.size for board in boards}
        if len(sizes) != 1:
            raise ValueError(f"Tous les plateaux doivent avoir la même taille (reçu: {sorted(sizes)})")
        if executor_kind not in ("thread", "process"):
            raise ValueError("executor_kind doit valoir 'thread' ou 'process'")

        self._boards = tuple(boards)
        self._num_workers = num_workers
        self._executor_kind = executor_kind

    def run(self) -> MatchupSummary:
        """Exécute toutes les confrontations et renvoie un résumé agrégé."""

        assignments = _distribute_pairings(build_pairings(len(self._boards)), self._num_workers)
        start = time.perf_counter()

        if self._num_workers == 1:
            worker_id, pairings = assignments[0]
            worker_summaries = [_run_worker(worker_id, self._boards, pairings)]
        else:
            executor_cls = ThreadPoolExecutor if self._executor_kind == "thread" else ProcessPoolExecutor
            with executor_cls(max_workers=self._num_workers) as executor:
                futures = [
                    executor.submit(_run_worker, worker_id, self._boards, pairings)
                    for worker_id, pairings in assignments
                ]
                worker_summaries = [future.result() for future in futures]

        wins, points = _aggregate(len(self._boards), worker_summaries)
        duration = time.perf_counter() - start
        logger.info(
            "%d confrontations simulées sur %d worker(s) en %.3fs",
            sum(worker.pairings for worker in worker_summaries),
            self._num_workers,
            duration,
        )
        return MatchupSummary(
            board_ids=tuple(board.id for board in self._boards),
            wins=wins,
            points=points,
            worker_summaries=tuple(worker_summaries),
            duration_seconds=duration,
        )


__all__ = [
    "PairingOutcome",
    "WorkerSummary",
    "MatchupSummary",
    "ParallelMatchupRunner",
    "build_pairings",
]
