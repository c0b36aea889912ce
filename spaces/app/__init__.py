"""Services d'application pour orchestrer une partie Spaces."""

from .event_bus import EventBus
from .events import BoardSelectedEvent, MatchEndedEvent, MatchStartedEvent, RoundCompletedEvent
from .match_service import InvalidBoardError, MatchService, MatchState

__all__ = [
    "EventBus",
    "MatchService",
    "MatchState",
    "InvalidBoardError",
    "MatchStartedEvent",
    "BoardSelectedEvent",
    "RoundCompletedEvent",
    "MatchEndedEvent",
]
