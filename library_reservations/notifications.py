from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from .booking import Reservation


class ReservationEventKind(str, Enum):
    NEW_RESERVATION = "new_reservation"
    RESERVATION_CANCELLED = "reservation_cancelled"


@dataclass(frozen=True)
class ReservationEvent:
    kind: ReservationEventKind
    reservation: Reservation
    occurred_at: datetime


Observer = Callable[[ReservationEvent], None]


class NotificationChannel:
    """Synchronous fan-out of reservation events.

    Observers run on the publishing thread in subscription order. An observer
    that raises stops the remaining ones and the error reaches the publisher's caller.
    """

    def __init__(self) -> None:
        self._observers: dict[ReservationEventKind, list[Observer]] = {kind: [] for kind in ReservationEventKind}

    def subscribe(self, kind: ReservationEventKind, observer: Observer) -> Callable[[], None]:
        self._observers[ReservationEventKind(kind)].append(observer)

        def unsubscribe() -> None:
            self.unsubscribe(kind, observer)

        return unsubscribe

    def unsubscribe(self, kind: ReservationEventKind, observer: Observer) -> bool:
        observers = self._observers[ReservationEventKind(kind)]
        if observer not in observers:
            return False
        observers.remove(observer)
        return True

    def observer_count(self, kind: ReservationEventKind) -> int:
        return len(self._observers[ReservationEventKind(kind)])

    def publish(self, event: ReservationEvent) -> None:
        # Snapshot so an observer may unsubscribe itself mid-dispatch.
        for observer in list(self._observers[event.kind]):
            observer(event)
