from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from flask import Flask, jsonify, request

from .analytics import ReservationAnalytics
from .config import DEFAULT_SETTINGS, LibrarySettings, seed_engine
from .engine import ReservationEngine
from .errors import ReservationError
from .event_log import ReservationEventLog
from .items import by_author, by_title, digital_work, physical_work
from .natural_language import parse_reservation_period, parse_reservation_request

ERROR_STATUS_CODES = {
    "invalid_argument": 400,
    "not_found": 404,
    "precondition_failed": 412,
    "conflict": 409,
    "invalid_state": 409,
}
TRUTHY_VALUES = {"1", "true", "yes", "on"}


def create_app(
    engine: ReservationEngine | None = None,
    settings: LibrarySettings | None = None,
    now_provider: Callable[[], datetime] | None = None,
) -> Flask:
    app = Flask(__name__)
    clock: Callable[[], datetime] = now_provider or datetime.now
    if engine is None:
        settings = settings or DEFAULT_SETTINGS
        engine = ReservationEngine(now_provider=clock)
        seed_engine(engine, settings)
    settings = settings or LibrarySettings()

    event_log = ReservationEventLog(settings.event_log_path, now_provider=clock)
    event_log.attach(engine)
    analytics = ReservationAnalytics(engine.all_reservations)
    app.extensions["library_reservations"] = {"engine": engine, "event_log": event_log}

    @app.after_request
    def add_cors_headers(response: Any) -> Any:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.get("/api/items")
    def list_items() -> Any:
        only_available = str(request.args.get("available", "")).lower() in TRUTHY_VALUES
        items = engine.list_available_items() if only_available else engine.list_all_items()

        title = request.args.get("title")
        author = request.args.get("author")
        if title:
            items = by_title(items, title)
        if author:
            items = by_author(items, author)
        return jsonify({"ok": True, "items": [item.to_dict() for item in items]})

    @app.post("/api/items")
    def add_item() -> Any:
        payload = request.get_json(silent=True) or {}
        title = str(payload.get("title") or "").strip()
        author = str(payload.get("author") or "").strip()
        isbn = str(payload.get("isbn") or "").strip()
        file_format = str(payload.get("file_format") or "").strip()
        if not title or not author or not isbn:
            return jsonify({"ok": False, "message": "title, author and isbn are all required."}), 400

        try:
            item_id = engine.next_item_id()
            if file_format:
                item = digital_work(item_id, title, author, isbn, file_format)
            else:
                item = physical_work(item_id, title, author, isbn)
            engine.add_item(item)
        except ReservationError as error:
            return _error_response(error)
        return jsonify({"ok": True, "item": item.to_dict()}), 201

    @app.post("/api/users")
    def register_user() -> Any:
        payload = request.get_json(silent=True) or {}
        email = str(payload.get("email") or "").strip()
        try:
            engine.register_user(email)
        except ReservationError as error:
            return _error_response(error)
        return jsonify({"ok": True, "email": email}), 201

    @app.get("/api/users/<path:email>/reservations")
    def list_user_reservations(email: str) -> Any:
        try:
            reservations = list(engine.reservations_for_user(email))
        except ReservationError as error:
            return _error_response(error)
        return jsonify({"ok": True, "reservations": [r.to_dict() for r in reservations]})

    @app.post("/api/reservations")
    def create_reservation() -> Any:
        payload = request.get_json(silent=True) or {}
        try:
            item_id = int(payload.get("item_id"))
        except (TypeError, ValueError):
            return jsonify({"ok": False, "message": "item_id must be an integer.", "kind": "invalid_argument"}), 400

        email = str(payload.get("email") or "").strip()
        try:
            start, end = parse_reservation_period(
                _optional_text(payload.get("from")),
                _optional_text(payload.get("to")),
                now=clock(),
                default_loan_days=settings.default_loan_days,
                holiday_country=settings.holiday_country,
            )
            reservation = engine.create_reservation(item_id, email, start, end)
        except ReservationError as error:
            return _error_response(error)
        return jsonify({"ok": True, "reservation": reservation.to_dict()}), 201

    @app.post("/api/reservations/text")
    def create_reservation_from_text() -> Any:
        payload = request.get_json(silent=True) or {}
        text = str(payload.get("text") or "").strip()
        if not text:
            return jsonify({"ok": False, "message": "Please enter a reservation request.", "kind": "invalid_argument"}), 400

        try:
            parsed = parse_reservation_request(
                text,
                reference_datetime=clock(),
                default_loan_days=settings.default_loan_days,
            )
            email = parsed.user_email or str(payload.get("email") or "").strip()
            reservation = engine.create_reservation(parsed.item_id, email, parsed.start, parsed.end)
        except ReservationError as error:
            return _error_response(error)
        return jsonify({"ok": True, "reservation": reservation.to_dict()}), 201

    @app.post("/api/reservations/<int:reservation_id>/cancel")
    def cancel_reservation(reservation_id: int) -> Any:
        try:
            reservation = engine.cancel_reservation(reservation_id)
        except ReservationError as error:
            return _error_response(error)
        return jsonify({"ok": True, "reservation": reservation.to_dict()})

    @app.get("/api/stats")
    def get_stats() -> Any:
        return jsonify({"ok": True, "stats": analytics.summary()})

    @app.get("/api/events")
    def get_events() -> Any:
        return jsonify({"ok": True, "events": event_log.events()})

    return app


def _error_response(error: ReservationError) -> tuple[Any, int]:
    status = ERROR_STATUS_CODES.get(error.kind, 400)
    return jsonify({"ok": False, "message": str(error), "kind": error.kind}), status


def _optional_text(value: Any) -> str | None:
    return str(value) if value is not None else None
