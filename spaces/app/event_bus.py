"""Bus d'évènements synchrone de la couche application."""

from __future__ import annotations

import logging
from typing import Callable, List, Tuple, Type

logger = logging.getLogger(__name__)

Subscriber = Callable[[object], None]


class EventBus:
    """Diffuse les évènements de partie aux abonnés.

    Un abonné peut se limiter à une classe d'évènement (`event_type`); il ne
    reçoit alors que les instances de cette classe. Les abonnés sont appelés
    immédiatement, dans l'ordre d'enregistrement. Une exception levée par un
    abonné interrompt la diffusion et remonte à l'appelant de `publish`.
    """

    __slots__ = ("_subscriptions",)

    def __init__(self) -> None:
        self._subscriptions: List[Tuple[Type[object] | None, Subscriber]] = []

    def subscribe(
        self,
        callback: Subscriber,
        *,
        event_type: Type[object] | None = None,
    ) -> Callable[[], None]:
        """Enregistre un abonné et retourne sa fonction de désinscription."""

        subscription = (event_type, callback)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, event: object) -> int:
        """Diffuse `event` et renvoie le nombre d'abonnés notifiés."""

        notified = 0
        # Copie: un abonné peut se désinscrire pendant la diffusion.
        for event_type, callback in list(self._subscriptions):
            if event_type is not None and not isinstance(event, event_type):
                continue
            callback(event)
            notified += 1
        logger.debug("%s diffusé à %d abonné(s)", type(event).__name__, notified)
        return notified
