from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import holidays as pyholidays
import yaml

from .errors import ConfigurationError, ReservationError
from .items import ItemKind, ReservableItem
from .natural_language import DEFAULT_LOAN_DAYS

if TYPE_CHECKING:
    from .engine import ReservationEngine

DEFAULT_HOLIDAY_COUNTRY = "PL"


@dataclass(frozen=True)
class SeedItem:
    title: str
    author: str
    isbn: str
    file_format: str | None = None

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SeedItem":
        file_format = data.get("file_format")
        return SeedItem(
            title=str(data["title"]),
            author=str(data["author"]),
            isbn=str(data["isbn"]),
            file_format=str(file_format) if file_format is not None else None,
        )

    def build(self, item_id: int) -> ReservableItem:
        kind = ItemKind.DIGITAL if self.file_format is not None else ItemKind.PHYSICAL
        return ReservableItem(
            id=item_id,
            title=self.title,
            author=self.author,
            isbn=self.isbn,
            kind=kind,
            file_format=self.file_format,
        )


@dataclass(frozen=True)
class LibrarySettings:
    default_loan_days: int = DEFAULT_LOAN_DAYS
    holiday_country: str | None = DEFAULT_HOLIDAY_COUNTRY
    event_log_path: Path | None = None
    seed_items: tuple[SeedItem, ...] = field(default_factory=tuple)
    seed_users: tuple[str, ...] = field(default_factory=tuple)


DEFAULT_SETTINGS = LibrarySettings(
    seed_items=(
        SeedItem("Pan Tadeusz", "Adam Mickiewicz", "978-83-123-4567-8"),
        SeedItem("Lalka", "Bolesław Prus", "978-83-234-5678-9"),
        SeedItem("Wiedźmin: Ostatnie życzenie", "Andrzej Sapkowski", "978-83-345-6789-0", "EPUB"),
        SeedItem("Solaris", "Stanisław Lem", "978-83-456-7890-1", "PDF"),
    ),
    seed_users=("jan.kowalski@example.com", "anna.nowak@example.com"),
)


def load_settings(path: str | Path) -> LibrarySettings:
    """Read settings from a YAML mapping; a missing file yields the defaults."""
    settings_path = Path(path)
    try:
        payload = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return LibrarySettings()
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
        raise ConfigurationError(f"Failed to read settings file: {settings_path}") from error

    if payload is None:
        return LibrarySettings()
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Top-level YAML in {settings_path} is not a mapping")

    try:
        return _settings_from_dict(payload, base_dir=settings_path.parent)
    except (KeyError, TypeError, ValueError) as error:
        raise ConfigurationError(f"Invalid settings in {settings_path}: {error}") from error


def _settings_from_dict(data: dict[str, Any], base_dir: Path) -> LibrarySettings:
    default_loan_days = int(data.get("default_loan_days", DEFAULT_LOAN_DAYS))
    if default_loan_days <= 0:
        raise ValueError("default_loan_days must be greater than zero")

    holiday_country = data.get("holiday_country", DEFAULT_HOLIDAY_COUNTRY)
    if holiday_country is not None:
        holiday_country = str(holiday_country).upper()
        try:
            pyholidays.country_holidays(holiday_country)
        except NotImplementedError as error:
            raise ValueError(f"unsupported holiday_country {holiday_country}") from error

    event_log_path = data.get("event_log_path")
    if event_log_path is not None:
        event_log_path = Path(event_log_path)
        if not event_log_path.is_absolute():
            event_log_path = base_dir / event_log_path

    raw_items = data.get("items") or []
    raw_users = data.get("users") or []
    if not isinstance(raw_items, list) or not all(isinstance(row, dict) for row in raw_items):
        raise ValueError("items must be a list of mappings")
    if not isinstance(raw_users, list):
        raise ValueError("users must be a list of emails")

    return LibrarySettings(
        default_loan_days=default_loan_days,
        holiday_country=holiday_country,
        event_log_path=event_log_path,
        seed_items=tuple(SeedItem.from_dict(row) for row in raw_items),
        seed_users=tuple(str(email) for email in raw_users),
    )


def seed_engine(engine: ReservationEngine, settings: LibrarySettings) -> list[ReservableItem]:
    added: list[ReservableItem] = []
    try:
        for seed in settings.seed_items:
            item = seed.build(engine.next_item_id())
            engine.add_item(item)
            added.append(item)
        for email in settings.seed_users:
            engine.register_user(email)
    except ReservationError as error:
        raise ConfigurationError(f"Invalid seed data: {error}") from error
    return added
