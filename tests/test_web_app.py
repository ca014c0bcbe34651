import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from library_reservations import LibrarySettings, ReservationEngine, physical_work
from library_reservations.web_app import create_app

NOW = datetime(2026, 2, 24, 9, 0)
JAN = "jan.kowalski@example.com"
ANNA = "anna.nowak@example.com"


class TestWebApp(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app(now_provider=lambda: NOW)
        self.client = self.app.test_client()

    def test_lists_seeded_catalog(self) -> None:
        response = self.client.get("/api/items")

        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertTrue(payload["ok"])
        self.assertEqual([item["id"] for item in payload["items"]], [1, 2, 3, 4])
        self.assertEqual(response.headers["Access-Control-Allow-Origin"], "*")

    def test_filters_items_by_title_author_and_availability(self) -> None:
        by_author = self.client.get("/api/items?author=lem").get_json()
        self.assertEqual([item["title"] for item in by_author["items"]], ["Solaris"])

        self.client.post("/api/reservations", json={"item_id": 2, "email": JAN})
        available = self.client.get("/api/items?available=1&title=a").get_json()
        self.assertNotIn(2, [item["id"] for item in available["items"]])

    def test_reserve_and_cancel_flow(self) -> None:
        created = self.client.post("/api/reservations", json={"item_id": 1, "email": JAN})

        self.assertEqual(created.status_code, 201)
        reservation = created.get_json()["reservation"]
        self.assertEqual(reservation["reservation_id"], 1)
        self.assertEqual(reservation["start"], "2026-02-24T09:00")
        self.assertEqual(reservation["end"], "2026-03-03T09:00")

        second = self.client.post("/api/reservations", json={"item_id": 1, "email": ANNA})
        self.assertEqual(second.status_code, 412)
        self.assertEqual(second.get_json()["kind"], "precondition_failed")

        mine = self.client.get(f"/api/users/{JAN}/reservations").get_json()
        self.assertEqual([row["reservation_id"] for row in mine["reservations"]], [1])

        cancelled = self.client.post("/api/reservations/1/cancel")
        self.assertEqual(cancelled.status_code, 200)
        self.assertFalse(cancelled.get_json()["reservation"]["active"])

        again = self.client.post("/api/reservations/1/cancel")
        self.assertEqual(again.status_code, 409)
        self.assertEqual(again.get_json()["kind"], "invalid_state")

        events = self.client.get("/api/events").get_json()["events"]
        self.assertEqual([row["event_type"] for row in events], ["RESERVATION_CREATED", "RESERVATION_CANCELLED"])

    def test_reservation_errors_map_to_status_codes(self) -> None:
        unregistered = self.client.post("/api/reservations", json={"item_id": 999, "email": "ghost@example.com"})
        self.assertEqual(unregistered.status_code, 412)
        self.assertIn("not registered", unregistered.get_json()["message"])

        missing = self.client.post("/api/reservations", json={"item_id": 999, "email": JAN})
        self.assertEqual(missing.status_code, 404)

        inverted = self.client.post(
            "/api/reservations",
            json={"item_id": 1, "email": JAN, "from": "2026-03-10", "to": "2026-03-10"},
        )
        self.assertEqual(inverted.status_code, 400)

        bad_id = self.client.post("/api/reservations", json={"item_id": "abc", "email": JAN})
        self.assertEqual(bad_id.status_code, 400)

        unknown_cancel = self.client.post("/api/reservations/42/cancel")
        self.assertEqual(unknown_cancel.status_code, 404)

    def test_reserve_from_text(self) -> None:
        response = self.client.post(
            "/api/reservations/text",
            json={"text": f"reserve #2 for {ANNA} 2026-03-02~2026-03-09"},
        )

        self.assertEqual(response.status_code, 201)
        reservation = response.get_json()["reservation"]
        self.assertEqual(reservation["item_id"], 2)
        self.assertEqual(reservation["user_email"], ANNA)
        self.assertEqual(reservation["start"], "2026-03-02T00:00")

    def test_reserve_from_text_uses_payload_email_fallback(self) -> None:
        response = self.client.post("/api/reservations/text", json={"text": "#3 tomorrow for 3 days", "email": JAN})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["reservation"]["start"], "2026-02-25T00:00")

    def test_reserve_from_text_rejects_unparseable_request(self) -> None:
        empty = self.client.post("/api/reservations/text", json={"text": ""})
        self.assertEqual(empty.status_code, 400)

        no_item = self.client.post("/api/reservations/text", json={"text": f"{JAN} 2026-03-02"})
        self.assertEqual(no_item.status_code, 400)

    def test_register_user_and_duplicate(self) -> None:
        created = self.client.post("/api/users", json={"email": "new@example.com"})
        self.assertEqual(created.status_code, 201)

        duplicate = self.client.post("/api/users", json={"email": "new@example.com"})
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(duplicate.get_json()["kind"], "conflict")

        blank = self.client.post("/api/users", json={"email": " "})
        self.assertEqual(blank.status_code, 400)

    def test_add_items(self) -> None:
        book = self.client.post("/api/items", json={"title": "Quo Vadis", "author": "Henryk Sienkiewicz", "isbn": "X1"})
        ebook = self.client.post(
            "/api/items",
            json={"title": "Ferdydurke", "author": "Witold Gombrowicz", "isbn": "X2", "file_format": "MOBI"},
        )
        incomplete = self.client.post("/api/items", json={"title": "No author"})

        self.assertEqual(book.status_code, 201)
        self.assertEqual(book.get_json()["item"]["id"], 5)
        self.assertEqual(ebook.get_json()["item"]["kind"], "digital")
        self.assertEqual(incomplete.status_code, 400)

    def test_null_fields_are_treated_as_missing(self) -> None:
        engine = self.app.extensions["library_reservations"]["engine"]

        null_email = self.client.post("/api/users", json={"email": None})
        self.assertEqual(null_email.status_code, 400)
        self.assertEqual(null_email.get_json()["kind"], "invalid_argument")
        self.assertFalse(engine.is_user_registered("None"))

        null_title = self.client.post("/api/items", json={"title": None, "author": "Someone", "isbn": "X3"})
        self.assertEqual(null_title.status_code, 400)
        self.assertFalse(any(item.title == "None" for item in engine.list_all_items()))

        null_reserver = self.client.post("/api/reservations", json={"item_id": 1, "email": None})
        self.assertEqual(null_reserver.status_code, 400)
        self.assertTrue(engine.get_item(1).is_available)

        null_text = self.client.post("/api/reservations/text", json={"text": None})
        self.assertEqual(null_text.status_code, 400)

    def test_null_period_falls_back_to_default_loan(self) -> None:
        response = self.client.post(
            "/api/reservations",
            json={"item_id": 1, "email": JAN, "from": None, "to": None},
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["reservation"]["start"], "2026-02-24T09:00")

    def test_stats(self) -> None:
        self.client.post("/api/reservations", json={"item_id": 1, "email": JAN, "from": "2026-03-02", "to": "2026-03-09"})

        stats = self.client.get("/api/stats").get_json()["stats"]

        self.assertEqual(stats["total_loans"], 1)
        self.assertEqual(stats["average_loan_length_days"], 7.0)
        self.assertEqual(stats["most_popular_item_title"], "Pan Tadeusz")
        self.assertEqual(stats["fulfillment_rate"], 100.0)


class TestWebAppWithInjectedEngine(unittest.TestCase):
    def test_uses_given_engine_and_writes_event_log(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_path = Path(temp_dir) / "events.yaml"
            engine = ReservationEngine()
            engine.register_user("u@example.com")
            engine.add_item(physical_work(engine.next_item_id(), "Only Book", "Author", "ISBN"))
            settings = LibrarySettings(default_loan_days=3, holiday_country=None, event_log_path=log_path)

            client = create_app(engine=engine, settings=settings, now_provider=lambda: NOW).test_client()
            response = client.post("/api/reservations", json={"item_id": 1, "email": "u@example.com"})

            self.assertEqual(response.status_code, 201)
            self.assertEqual(response.get_json()["reservation"]["end"], "2026-02-27T09:00")
            self.assertIn("RESERVATION_CREATED", log_path.read_text(encoding="utf-8"))
            self.assertEqual(len(client.get("/api/items").get_json()["items"]), 1)


if __name__ == "__main__":
    unittest.main()
