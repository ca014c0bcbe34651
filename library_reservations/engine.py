from __future__ import annotations

from datetime import datetime
from threading import RLock
from typing import Callable, Iterator

from .booking import INVERTED_PERIOD_MESSAGE, Reservation, can_reserve
from .catalog import Catalog
from .errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
)
from .items import ReservableItem
from .ledger import ReservationLedger
from .notifications import NotificationChannel, Observer, ReservationEvent, ReservationEventKind
from .users import UserRegistry


class ReservationEngine:
    """Coordinates the catalog, the user registry and the reservation ledger.

    ``create_reservation`` and ``cancel_reservation`` run their whole
    check-then-mutate sequence under one lock, so at most one active
    reservation can exist per item even with concurrent callers. Events are
    published after the lock is released, once the mutation is committed.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        ledger: ReservationLedger | None = None,
        users: UserRegistry | None = None,
        channel: NotificationChannel | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self.catalog = catalog or Catalog()
        self.ledger = ledger or ReservationLedger()
        self.users = users or UserRegistry()
        self.channel = channel or NotificationChannel()
        self._clock: Callable[[], datetime] = now_provider or datetime.now
        self._lock = RLock()

    def next_item_id(self) -> int:
        with self._lock:
            return self.catalog.next_id()

    def add_item(self, item: ReservableItem | None) -> None:
        with self._lock:
            self.catalog.add(item)

    def register_user(self, email: str | None) -> None:
        with self._lock:
            self.users.register(email)

    def is_user_registered(self, email: str | None) -> bool:
        return self.users.is_registered(email)

    def list_available_items(self) -> Iterator[ReservableItem]:
        return self.catalog.list_available()

    def list_all_items(self) -> tuple[ReservableItem, ...]:
        return self.catalog.list_all()

    def get_item(self, item_id: int) -> ReservableItem | None:
        return self.catalog.find_by_id(item_id)

    def get_reservation(self, reservation_id: int) -> Reservation | None:
        return self.ledger.find_by_id(reservation_id)

    def all_reservations(self) -> tuple[Reservation, ...]:
        return self.ledger.all_reservations()

    def reservations_for_user(self, email: str | None) -> Iterator[Reservation]:
        if not email or not email.strip():
            raise InvalidArgumentError("User email cannot be null or empty.")
        return self.ledger.active_for_user(email)

    def subscribe(self, kind: ReservationEventKind, observer: Observer) -> Callable[[], None]:
        return self.channel.subscribe(kind, observer)

    def create_reservation(self, item_id: int, email: str | None, start: datetime, end: datetime) -> Reservation:
        with self._lock:
            if not email or not email.strip():
                raise InvalidArgumentError("User email cannot be null or empty.")
            if not self.users.is_registered(email):
                raise PreconditionFailedError(f"User '{email}' is not registered.")

            item = self.catalog.find_by_id(item_id)
            if item is None:
                raise NotFoundError(f"Item with ID {item_id} not found.")
            if not item.is_available:
                raise PreconditionFailedError(f"Item '{item.title}' is not available for reservation.")
            if start >= end:
                raise InvalidArgumentError(INVERTED_PERIOD_MESSAGE)

            # Only reachable when an item was made available again outside the engine.
            if not can_reserve(start, end, self.ledger.active_for_item(item_id)):
                raise ConflictError(f"The item '{item.title}' is already reserved for the requested period.")

            reservation = Reservation(
                reservation_id=self.ledger.next_id(),
                item=item,
                user_email=email,
                start=start,
                end=end,
            )
            self.ledger.append(reservation)
            self.catalog.set_availability(item.id, False)

        self.channel.publish(ReservationEvent(ReservationEventKind.NEW_RESERVATION, reservation, self._clock()))
        return reservation

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        with self._lock:
            reservation = self.ledger.find_by_id(reservation_id)
            if reservation is None:
                raise NotFoundError(f"Reservation with ID {reservation_id} not found.")

            reservation.cancel()
            self.catalog.set_availability(reservation.item.id, True)

        self.channel.publish(
            ReservationEvent(ReservationEventKind.RESERVATION_CANCELLED, reservation, self._clock())
        )
        return reservation
