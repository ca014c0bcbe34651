from __future__ import annotations

from itertools import count
from typing import Iterator

from .errors import InvalidArgumentError
from .items import ReservableItem


class Catalog:
    def __init__(self) -> None:
        self._items: list[ReservableItem] = []
        self._ids = count(1)

    def __len__(self) -> int:
        return len(self._items)

    def next_id(self) -> int:
        return next(self._ids)

    def add(self, item: ReservableItem | None) -> None:
        if item is None:
            raise InvalidArgumentError("Item cannot be None.")
        self._items.append(item)

    def list_available(self) -> Iterator[ReservableItem]:
        return (item for item in self._items if item.is_available)

    def list_all(self) -> tuple[ReservableItem, ...]:
        return tuple(self._items)

    def find_by_id(self, item_id: int) -> ReservableItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def set_availability(self, item_id: int, is_available: bool) -> bool:
        """Toggle an item's flag. Returns False when the id is unknown."""
        item = self.find_by_id(item_id)
        if item is None:
            return False
        item.set_availability(is_available)
        return True
