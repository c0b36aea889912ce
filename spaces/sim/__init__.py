"""Simulation de masse: confrontations parallèles entre plateaux."""

from .parallel import MatchupSummary, PairingOutcome, ParallelMatchupRunner, WorkerSummary

__all__ = [
    "ParallelMatchupRunner",
    "MatchupSummary",
    "PairingOutcome",
    "WorkerSummary",
]
