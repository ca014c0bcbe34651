from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from .errors import InvalidArgumentError, InvalidStateError, PreconditionFailedError
from .items import ReservableItem

INVERTED_PERIOD_MESSAGE = "Start date must be before end date."


@dataclass(eq=False)
class Reservation:
    reservation_id: int
    item: ReservableItem
    user_email: str
    start: datetime
    end: datetime
    active: bool = field(default=True, init=False)

    def __post_init__(self) -> None:
        if self.item is None:
            raise InvalidArgumentError("Reservation item cannot be None.")
        if not self.user_email or not self.user_email.strip():
            raise InvalidArgumentError("User email cannot be null or empty.")
        if self.start >= self.end:
            raise InvalidArgumentError(INVERTED_PERIOD_MESSAGE)
        if not self.item.is_available:
            raise PreconditionFailedError(f"Item '{self.item.title}' is not available for reservation.")

    @property
    def length_in_days(self) -> int:
        return (self.end - self.start).days

    def cancel(self) -> None:
        if not self.active:
            raise InvalidStateError("Cannot cancel an inactive reservation.")
        self.active = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "reservation_id": self.reservation_id,
            "item_id": self.item.id,
            "title": self.item.title,
            "user_email": self.user_email,
            "start": self.start.isoformat(timespec="minutes"),
            "end": self.end.isoformat(timespec="minutes"),
            "active": self.active,
            "length_in_days": self.length_in_days,
        }


def has_time_overlap(new_start: datetime, new_end: datetime, exist_start: datetime, exist_end: datetime) -> bool:
    """Return True when the requested period collides with an existing one.

    Periods are half-open ranges: [start, end)
    so a loan starting on the day another one ends does not overlap.
    """
    if new_start >= new_end:
        raise InvalidArgumentError("new_start must be earlier than new_end.")
    if exist_start >= exist_end:
        raise InvalidArgumentError("exist_start must be earlier than exist_end.")

    return (
        (new_start >= exist_start and new_start < exist_end)
        or (new_end > exist_start and new_end <= exist_end)
        or (new_start <= exist_start and new_end >= exist_end)
    )


def can_reserve(new_start: datetime, new_end: datetime, existing_reservations: Iterable[Reservation]) -> bool:
    """Return True if the requested period does not overlap any existing reservation."""
    if new_start >= new_end:
        raise InvalidArgumentError(INVERTED_PERIOD_MESSAGE)

    for reservation in existing_reservations:
        if has_time_overlap(new_start, new_end, reservation.start, reservation.end):
            return False
    return True
