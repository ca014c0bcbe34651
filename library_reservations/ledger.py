from __future__ import annotations

from itertools import count
from typing import Iterator

from .booking import Reservation
from .errors import InvalidArgumentError


class ReservationLedger:
    """Append-only reservation history.

    Ids come from a counter owned by the ledger instance, so two engines never share ids.
    Records are never removed; cancellation only flips their ``active`` flag.
    """

    def __init__(self) -> None:
        self._reservations: list[Reservation] = []
        self._ids = count(1)

    def __len__(self) -> int:
        return len(self._reservations)

    def next_id(self) -> int:
        return next(self._ids)

    def append(self, reservation: Reservation | None) -> None:
        if reservation is None:
            raise InvalidArgumentError("Reservation cannot be None.")
        self._reservations.append(reservation)

    def find_by_id(self, reservation_id: int) -> Reservation | None:
        for reservation in self._reservations:
            if reservation.reservation_id == reservation_id:
                return reservation
        return None

    def active_for_user(self, email: str) -> Iterator[Reservation]:
        return (r for r in self._reservations if r.user_email == email and r.active)

    def active_for_item(self, item_id: int) -> Iterator[Reservation]:
        return (r for r in self._reservations if r.item.id == item_id and r.active)

    def all_reservations(self) -> tuple[Reservation, ...]:
        return tuple(self._reservations)
