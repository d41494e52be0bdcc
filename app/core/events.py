# app/core/events.py

"""
Payment completion notifications.

The payment step publishes one event per successful checkout; wizard
controllers subscribe while they are alive and unsubscribe on teardown.
Subscribers are awaited in subscription order.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable
from uuid import UUID

from loguru import logger


@dataclass(frozen=True)
class PaymentCompleted:
    application_id: UUID
    payment_id: UUID
    method: str
    occurred_at: datetime = field(default_factory=datetime.utcnow)


PaymentListener = Callable[[PaymentCompleted], Awaitable[None]]


class Subscription:
    def __init__(self, bus: "PaymentCompletionBus", listener: PaymentListener):
        self._bus = bus
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._bus._remove(self._listener)
            self.active = False


class PaymentCompletionBus:
    def __init__(self):
        self._listeners: list[PaymentListener] = []

    def subscribe(self, listener: PaymentListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove(self, listener: PaymentListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, event: PaymentCompleted) -> None:
        logger.info(
            f"Payment completed for application {event.application_id} "
            f"via {event.method}; notifying {len(self._listeners)} listener(s)"
        )
        # copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            await listener(event)


payment_events = PaymentCompletionBus()
