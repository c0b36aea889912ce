"""Tests pour les confrontations parallèles entre plateaux.

Ces tests valident que toutes les confrontations d'une bibliothèque peuvent
être simulées en parallèle tout en conservant des matrices agrégées
déterministes, identiques à une exécution séquentielle.
"""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from spaces.sim.parallel import (
    MatchupSummary,
    ParallelMatchupRunner,
    WorkerSummary,
    build_pairings,
)

from .board_factories import make_board, piece


def _library():
    return [
        make_board(2, piece(1, 0, 1), piece(0, 0, 2), name="climber"),
        make_board(2, piece(1, 1, 1), name="sitter"),
        make_board(2, name="empty"),
    ]


def test_build_pairings_covers_every_ordered_pair():
    pairings = build_pairings(3)
    assert len(pairings) == 6
    assert all(i != j for i, j in pairings)
    assert len(set(pairings)) == 6


def test_runner_distributes_pairings_evenly():
    """Les confrontations doivent être réparties équitablement entre les workers."""

    summary = ParallelMatchupRunner(_library(), num_workers=3, executor_kind="thread").run()

    assert dataclasses.is_dataclass(summary)
    assert isinstance(summary, MatchupSummary)
    assert summary.total_pairings == 6
    assert len(summary.worker_summaries) == 3
    assert sorted(worker.pairings for worker in summary.worker_summaries) == [2, 2, 2]
    for worker in summary.worker_summaries:
        assert isinstance(worker, WorkerSummary)
        assert worker.duration_seconds >= 0.0


def test_matrices_aggregate_both_sides():
    summary = ParallelMatchupRunner(_library(), num_workers=2, executor_kind="thread").run()

    assert summary.board_ids == ("board-climber", "board-sitter", "board-empty")
    # Le grimpeur bat le plateau vide en tant que joueur puis en tant qu'adversaire
    assert summary.wins[0, 2] == 2
    assert summary.points[0, 2] == 2
    assert summary.wins[2, 0] == 0
    assert np.all(np.diag(summary.wins) == 0)
    assert np.all(np.diag(summary.points) == 0)


def test_parallel_matches_sequential_run():
    """Le nombre de workers ne doit pas influencer les matrices agrégées."""

    sequential = ParallelMatchupRunner(_library(), num_workers=1).run()
    threaded = ParallelMatchupRunner(_library(), num_workers=4, executor_kind="thread").run()

    np.testing.assert_array_equal(sequential.wins, threaded.wins)
    np.testing.assert_array_equal(sequential.points, threaded.points)
    assert sequential.total_pairings == threaded.total_pairings == 6


def test_win_rates():
    summary = ParallelMatchupRunner(_library(), num_workers=1).run()
    rates = summary.win_rates()

    assert rates.shape == (3,)
    assert rates[0] == pytest.approx(summary.wins[0].sum() / 4)
    assert np.all((rates >= 0.0) & (rates <= 1.0))


@pytest.mark.parametrize(
    "boards, kwargs",
    [
        (_library(), {"num_workers": 0}),
        (_library()[:1], {"num_workers": 1}),
        (_library() + [make_board(3)], {"num_workers": 1}),
        (_library(), {"num_workers": 1, "executor_kind": "fiber"}),
    ],
)
def test_runner_rejects_bad_configuration(boards, kwargs):
    with pytest.raises(ValueError):
        ParallelMatchupRunner(boards, **kwargs)
