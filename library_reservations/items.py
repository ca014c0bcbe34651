from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator

from .errors import InvalidArgumentError


class ItemKind(str, Enum):
    PHYSICAL = "physical"
    DIGITAL = "digital"


@dataclass(eq=False)
class ReservableItem:
    """A catalog entry: a physical book or a digital edition of one.

    Digital works carry every physical-work field plus ``file_format``.
    Items compare by identity so reservations always point at the catalog's instance.
    """

    id: int
    title: str
    author: str
    isbn: str
    kind: ItemKind = ItemKind.PHYSICAL
    file_format: str | None = None
    is_available: bool = True

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise InvalidArgumentError("Title cannot be empty.")
        if self.author is None:
            raise InvalidArgumentError("Author is required.")
        if self.isbn is None:
            raise InvalidArgumentError("ISBN is required.")
        try:
            self.kind = ItemKind(self.kind)
        except ValueError as error:
            raise InvalidArgumentError(f"Unknown item kind: {self.kind}") from error
        if self.kind is ItemKind.DIGITAL:
            if not self.file_format or not self.file_format.strip():
                raise InvalidArgumentError("Digital works require a file format.")
        elif self.file_format is not None:
            raise InvalidArgumentError("Physical works do not have a file format.")

    @property
    def is_digital(self) -> bool:
        return self.kind is ItemKind.DIGITAL

    def set_availability(self, is_available: bool) -> None:
        self.is_available = is_available

    def describe(self) -> str:
        if self.kind is ItemKind.DIGITAL:
            return (
                f"[EBook] ID: {self.id}, Title: {self.title}, Author: {self.author}, "
                f"ISBN: {self.isbn}, Format: {self.file_format}, Available: {self.is_available}"
            )
        return (
            f"[Book] ID: {self.id}, Title: {self.title}, Author: {self.author}, "
            f"ISBN: {self.isbn}, Available: {self.is_available}"
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "is_available": self.is_available,
        }
        if self.file_format is not None:
            payload["file_format"] = self.file_format
        return payload


def physical_work(item_id: int, title: str, author: str, isbn: str) -> ReservableItem:
    return ReservableItem(id=item_id, title=title, author=author, isbn=isbn)


def digital_work(item_id: int, title: str, author: str, isbn: str, file_format: str) -> ReservableItem:
    return ReservableItem(
        id=item_id,
        title=title,
        author=author,
        isbn=isbn,
        kind=ItemKind.DIGITAL,
        file_format=file_format,
    )


def available(items: Iterable[ReservableItem]) -> Iterator[ReservableItem]:
    return (item for item in items if item.is_available)


def newest(items: Iterable[ReservableItem], take: int) -> list[ReservableItem]:
    if take <= 0:
        return []
    return sorted(items, key=lambda item: item.id, reverse=True)[:take]


def by_title(items: Iterable[ReservableItem], title_fragment: str | None) -> Iterator[ReservableItem]:
    """Case-insensitive title search; a blank fragment matches everything."""
    if not title_fragment or not title_fragment.strip():
        return iter(items)
    needle = title_fragment.casefold()
    return (item for item in items if needle in item.title.casefold())


def by_author(items: Iterable[ReservableItem], author_fragment: str | None) -> Iterator[ReservableItem]:
    """Case-insensitive author search; a blank fragment matches nothing."""
    if not author_fragment or not author_fragment.strip():
        return iter(())
    needle = author_fragment.casefold()
    return (item for item in items if needle in item.author.casefold())
