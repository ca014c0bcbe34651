from __future__ import annotations

import math
from typing import Any, Callable, Iterable

from .booking import Reservation
from .errors import InvalidArgumentError

NOT_AVAILABLE = "N/A"


class ReservationAnalytics:
    """Aggregate figures over the full reservation history, active and cancelled."""

    def __init__(self, history: Callable[[], Iterable[Reservation]]) -> None:
        if history is None:
            raise InvalidArgumentError("A reservation history source is required.")
        self._history = history

    def _reservations(self) -> list[Reservation]:
        return list(self._history())

    def total_loans(self) -> int:
        return len(self._reservations())

    def average_loan_length_days(self) -> float:
        reservations = self._reservations()
        if not reservations:
            return 0.0
        return sum(r.length_in_days for r in reservations) / len(reservations)

    def most_popular_item_title(self) -> str:
        reservations = self._reservations()
        if not reservations:
            return NOT_AVAILABLE

        counts: dict[int, int] = {}
        titles: dict[int, str] = {}
        for reservation in reservations:
            item_id = reservation.item.id
            counts[item_id] = counts.get(item_id, 0) + 1
            titles.setdefault(item_id, reservation.item.title)

        # max() keeps the first maximum, i.e. the item reserved earliest wins ties.
        winner = max(counts, key=lambda item_id: counts[item_id])
        return titles[winner]

    def fulfillment_rate(self) -> float:
        reservations = self._reservations()
        if not reservations:
            return 0.0
        active_count = sum(1 for r in reservations if r.active)
        return active_count / len(reservations) * 100

    def log_popularity_score(self, title: str | None) -> float:
        if not title or not title.strip():
            raise InvalidArgumentError("Title cannot be null or empty.")

        needle = title.casefold()
        count = sum(1 for r in self._reservations() if r.item.title.casefold() == needle)
        if count <= 0:
            return 0.0
        return math.log(count + 1)

    def summary(self) -> dict[str, Any]:
        return {
            "total_loans": self.total_loans(),
            "average_loan_length_days": round(self.average_loan_length_days(), 2),
            "most_popular_item_title": self.most_popular_item_title(),
            "fulfillment_rate": round(self.fulfillment_rate(), 2),
        }
