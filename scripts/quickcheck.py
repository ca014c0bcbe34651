from __future__ import annotations

from datetime import datetime
import traceback

from library_reservations import (
    DEFAULT_SETTINGS,
    ReservationAnalytics,
    ReservationEngine,
    ReservationEventLog,
    parse_reservation_period,
    seed_engine,
)


def main() -> int:
    print("[INFO] Library Reservations Quick Check")
    print("[INFO] Seeding catalog and users...")

    engine = ReservationEngine()
    event_log = ReservationEventLog()
    event_log.attach(engine)
    items = seed_engine(engine, DEFAULT_SETTINGS)
    print(f"[OK] Seeded items: {len(items)}")

    now = datetime(2026, 2, 24, 10, 0)
    start, end = parse_reservation_period(
        "",
        "",
        now=now,
        default_loan_days=DEFAULT_SETTINGS.default_loan_days,
        holiday_country=DEFAULT_SETTINGS.holiday_country,
    )
    email = DEFAULT_SETTINGS.seed_users[0]
    reservation = engine.create_reservation(items[0].id, email, start, end)
    print(
        "[OK] Reserved: "
        f"{reservation.item.title},"
        f"{reservation.start.isoformat(timespec='minutes')}"
        f"~{reservation.end.isoformat(timespec='minutes')}"
    )
    print(f"[OK] Available after reserve: {len(list(engine.list_available_items()))}")

    engine.cancel_reservation(reservation.reservation_id)
    print(f"[OK] Available after cancel: {len(list(engine.list_available_items()))}")

    analytics = ReservationAnalytics(engine.all_reservations)
    for key, value in analytics.summary().items():
        print(f"[OK] {key}: {value}")
    print(f"[OK] Logged events: {len(event_log.events())}")

    print("[DONE] Quick check completed successfully.")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception:
        print("[ERROR] Quick check failed.")
        traceback.print_exc()
        raise SystemExit(1)
