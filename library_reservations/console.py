from __future__ import annotations

import argparse
from datetime import datetime
from typing import Callable, Iterable

from .analytics import ReservationAnalytics
from .config import DEFAULT_SETTINGS, LibrarySettings, load_settings, seed_engine
from .engine import ReservationEngine
from .errors import EventLogError, ReservationError
from .event_log import ReservationEventLog
from .items import ReservableItem, by_author, by_title, digital_work, physical_work
from .natural_language import parse_reservation_period
from .notifications import ReservationEvent, ReservationEventKind

MENU = (
    "",
    "=== Library Reservation System ===",
    "1. Add a book",
    "2. Add an e-book",
    "3. Register a user",
    "4. Show available items",
    "5. Search items (title/author)",
    "6. Reserve an item",
    "7. Cancel a reservation",
    "8. My reservations",
    "9. Statistics",
    "0. Exit",
)


class LibraryConsole:
    def __init__(
        self,
        engine: ReservationEngine,
        settings: LibrarySettings | None = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self.engine = engine
        self.settings = settings or LibrarySettings()
        self.analytics = ReservationAnalytics(engine.all_reservations)
        self._input = input_fn
        self._output = output_fn
        self._clock: Callable[[], datetime] = now_provider or datetime.now
        self._actions: dict[str, Callable[[], None]] = {
            "1": self.add_book,
            "2": self.add_ebook,
            "3": self.register_user,
            "4": self.show_available_items,
            "5": self.search_items,
            "6": self.create_reservation,
            "7": self.cancel_reservation,
            "8": self.show_user_reservations,
            "9": self.show_statistics,
        }
        engine.subscribe(ReservationEventKind.NEW_RESERVATION, self._on_new_reservation)
        engine.subscribe(ReservationEventKind.RESERVATION_CANCELLED, self._on_reservation_cancelled)

    def run(self) -> int:
        while True:
            for line in MENU:
                self._output(line)
            try:
                choice = self._input("> ").strip()
            except EOFError:
                return 0

            if choice == "0":
                self._output("Goodbye!")
                return 0

            action = self._actions.get(choice)
            if action is None:
                self._output("Unknown option. Please try again.")
                continue

            try:
                action()
            except (ReservationError, EventLogError) as error:
                self._output(f"[ERROR] {error}")

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _print_items(self, header: str, items: Iterable[ReservableItem], empty_message: str) -> None:
        rows = list(items)
        if not rows:
            self._output(empty_message)
            return
        self._output(header)
        for item in rows:
            self._output(item.describe())

    def add_book(self) -> None:
        title = self._ask("Title: ")
        author = self._ask("Author: ")
        isbn = self._ask("ISBN: ")
        if not title or not author or not isbn:
            self._output("All fields are required.")
            return
        self.engine.add_item(physical_work(self.engine.next_item_id(), title, author, isbn))
        self._output("Book added.")

    def add_ebook(self) -> None:
        title = self._ask("Title: ")
        author = self._ask("Author: ")
        isbn = self._ask("ISBN: ")
        file_format = self._ask("Format (PDF/EPUB/MOBI): ")
        if not title or not author or not isbn or not file_format:
            self._output("All fields are required.")
            return
        self.engine.add_item(digital_work(self.engine.next_item_id(), title, author, isbn, file_format))
        self._output("E-book added.")

    def register_user(self) -> None:
        email = self._ask("User email: ")
        if not email:
            self._output("Email cannot be empty.")
            return
        self.engine.register_user(email)
        self._output(f"User {email} registered.")

    def show_available_items(self) -> None:
        self._print_items("--- Available items ---", self.engine.list_available_items(), "No items available.")

    def search_items(self) -> None:
        self._output("1. Search by title")
        self._output("2. Search by author")
        search_choice = self._ask("> ")
        term = self._ask("Search phrase: ")
        if not term:
            self._output("Search phrase cannot be empty.")
            return

        if search_choice == "1":
            results = by_title(self.engine.list_all_items(), term)
        elif search_choice == "2":
            results = by_author(self.engine.list_all_items(), term)
        else:
            self._output("Invalid choice.")
            return
        self._print_items("--- Search results ---", results, "No matching items found.")

    def create_reservation(self) -> None:
        raw_item_id = self._ask("Item ID to reserve: ")
        if not raw_item_id.isdecimal():
            self._output("Invalid ID.")
            return

        email = self._ask("Your email: ")
        if not email:
            self._output("Email cannot be empty.")
            return

        from_text = self._ask("Start date (YYYY-MM-DD) [Enter = today]: ")
        to_text = self._ask(f"End date (YYYY-MM-DD) [Enter = +{self.settings.default_loan_days} days]: ")
        start, end = parse_reservation_period(
            from_text,
            to_text,
            now=self._clock(),
            default_loan_days=self.settings.default_loan_days,
            holiday_country=self.settings.holiday_country,
        )
        reservation = self.engine.create_reservation(int(raw_item_id), email, start, end)
        self._output(f"Reservation created! ID: {reservation.reservation_id}")

    def cancel_reservation(self) -> None:
        email = self._ask("Your email: ")
        if not email:
            self._output("Email cannot be empty.")
            return

        reservations = list(self.engine.reservations_for_user(email))
        if not reservations:
            self._output("You have no active reservations.")
            return

        self._output("--- Your reservations ---")
        for reservation in reservations:
            self._output(
                f"ID: {reservation.reservation_id}, Item: '{reservation.item.title}', "
                f"From: {reservation.start:%Y-%m-%d}, To: {reservation.end:%Y-%m-%d}"
            )

        raw_reservation_id = self._ask("Reservation ID to cancel: ")
        if not raw_reservation_id.isdecimal():
            self._output("Invalid ID.")
            return
        self.engine.cancel_reservation(int(raw_reservation_id))
        self._output("Reservation cancelled.")

    def show_user_reservations(self) -> None:
        email = self._ask("Your email: ")
        if not email:
            self._output("Email cannot be empty.")
            return

        reservations = list(self.engine.reservations_for_user(email))
        if not reservations:
            self._output("You have no active reservations.")
            return

        self._output("--- Your active reservations ---")
        for reservation in reservations:
            self._output(
                f"ID: {reservation.reservation_id}, Item: '{reservation.item.title}', "
                f"From: {reservation.start:%Y-%m-%d}, To: {reservation.end:%Y-%m-%d}, "
                f"Length: {reservation.length_in_days} days"
            )

    def show_statistics(self) -> None:
        self._output("=== Library Statistics ===")
        self._output(f"Total reservations: {self.analytics.total_loans()}")
        self._output(f"Average loan length: {self.analytics.average_loan_length_days():.2f} days")
        self._output(f"Most popular title: {self.analytics.most_popular_item_title()}")
        self._output(f"Fulfillment rate (active reservations): {self.analytics.fulfillment_rate():.2f}%")

    def _on_new_reservation(self, event: ReservationEvent) -> None:
        reservation = event.reservation
        self._output(
            f"[INFO] New reservation: '{reservation.item.title}' for {reservation.user_email} "
            f"(from {reservation.start:%Y-%m-%d} to {reservation.end:%Y-%m-%d})"
        )

    def _on_reservation_cancelled(self, event: ReservationEvent) -> None:
        reservation = event.reservation
        self._output(f"[INFO] Reservation cancelled: '{reservation.item.title}' for {reservation.user_email}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive library reservation console.")
    parser.add_argument("--settings", help="Path to a YAML settings file with seed items and users.")
    args = parser.parse_args(argv)

    settings = load_settings(args.settings) if args.settings else DEFAULT_SETTINGS
    engine = ReservationEngine()
    seed_engine(engine, settings)
    if settings.event_log_path is not None:
        ReservationEventLog(settings.event_log_path).attach(engine)
    return LibraryConsole(engine, settings).run()


if __name__ == "__main__":
    raise SystemExit(main())
