from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import yaml

from .engine import ReservationEngine
from .errors import EventLogError
from .notifications import NotificationChannel, ReservationEvent, ReservationEventKind

EVENT_TYPES = {
    ReservationEventKind.NEW_RESERVATION: "RESERVATION_CREATED",
    ReservationEventKind.RESERVATION_CANCELLED: "RESERVATION_CANCELLED",
}


class ReservationEventLog:
    """Audit journal of reservation events, kept as YAML rows.

    With a ``path`` the journal file is created when missing, and new events are
    appended to the rows already in it. A file that is not a YAML list is backed
    up next to itself and started over. The engine never reads the journal; it is
    a record for humans and reporting tools.
    """

    def __init__(self, path: str | Path | None = None, now_provider: Callable[[], datetime] | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self._clock: Callable[[], datetime] = now_provider or datetime.now
        self._rows: list[dict[str, Any]] = []
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.path.exists():
                self._rows = self._read_yaml_list(self.path)
            else:
                self._write_yaml_list(self.path, self._rows)

    def attach(self, source: ReservationEngine | NotificationChannel) -> None:
        channel = source.channel if isinstance(source, ReservationEngine) else source
        for kind in EVENT_TYPES:
            channel.subscribe(kind, self.record)

    def record(self, event: ReservationEvent) -> None:
        reservation = event.reservation
        self._log_event(
            EVENT_TYPES[event.kind],
            {
                "reservation_id": reservation.reservation_id,
                "item_id": reservation.item.id,
                "title": reservation.item.title,
                "user_email": reservation.user_email,
                "start": reservation.start.isoformat(timespec="minutes"),
                "end": reservation.end.isoformat(timespec="minutes"),
            },
            event.occurred_at,
        )

    def events(self) -> list[dict[str, Any]]:
        return [dict(row) for row in self._rows]

    def to_yaml(self) -> str:
        return yaml.safe_dump(self._rows, allow_unicode=True, sort_keys=False)

    def _log_event(self, event_type: str, payload: dict[str, Any], event_time: datetime | None = None) -> None:
        timestamp = (event_time or self._clock()).isoformat(timespec="seconds")
        self._rows.append({"event_time": timestamp, "event_type": event_type, "payload": payload})
        if self.path is not None:
            self._write_yaml_list(self.path, self._rows)

    def _read_yaml_list(self, path: Path) -> list[dict[str, Any]]:
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, yaml.YAMLError) as error:
            self._recover_corrupted_yaml(path, error)
            return []
        except OSError as error:
            raise EventLogError(f"Failed to read event log: {path}") from error

        if payload is None:
            return []
        if not isinstance(payload, list):
            self._recover_corrupted_yaml(path, ValueError("top-level YAML is not a list"))
            return []
        return [row for row in payload if isinstance(row, dict)]

    def _recover_corrupted_yaml(self, path: Path, error: Exception) -> None:
        timestamp = self._clock().strftime("%Y%m%d%H%M%S")
        backup_path = path.with_name(f"{path.stem}.corrupt.{timestamp}{path.suffix}")
        try:
            shutil.copy2(path, backup_path)
        except OSError as copy_error:
            raise EventLogError(f"Failed to back up corrupted event log {path}: {error}") from copy_error
        self._write_yaml_list(path, [])

    def _write_yaml_list(self, path: Path, rows: list[dict[str, Any]]) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(yaml.safe_dump(rows, allow_unicode=True, sort_keys=False), encoding="utf-8")
            temp_path.replace(path)
        except OSError as error:
            raise EventLogError(f"Failed to write event log: {path}") from error
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
