from __future__ import annotations

from datetime import datetime
from typing import Any

from mcp.server.fastmcp import FastMCP

from library_reservations import (
    DEFAULT_SETTINGS,
    ReservationAnalytics,
    ReservationEngine,
    ReservationError,
    parse_reservation_period,
    seed_engine,
)

mcp = FastMCP(
    "Library Reservation MCP Server",
    instructions="Expose the library catalog and reservation operations from the library_reservations project.",
    json_response=True,
)

SETTINGS = DEFAULT_SETTINGS
ENGINE = ReservationEngine()
seed_engine(ENGINE, SETTINGS)
ANALYTICS = ReservationAnalytics(ENGINE.all_reservations)


@mcp.resource("library://items")
async def list_items() -> list[dict[str, Any]]:
    """List every catalog item with its availability."""
    return [item.to_dict() for item in ENGINE.list_all_items()]


@mcp.resource("library://items/available")
async def list_available_items() -> list[dict[str, Any]]:
    """List catalog items that can be reserved right now."""
    return [item.to_dict() for item in ENGINE.list_available_items()]


@mcp.tool()
def list_active_reservations(email: str) -> list[dict[str, Any]]:
    """Return the active reservations of a registered user."""
    return [reservation.to_dict() for reservation in ENGINE.reservations_for_user(email)]


@mcp.tool()
def reserve_item(item_id: int, email: str, start_date: str = "", end_date: str = "") -> dict[str, Any]:
    """Reserve an item. Dates use YYYY-MM-DD; blanks mean today and the default loan length."""
    try:
        start, end = parse_reservation_period(
            start_date,
            end_date,
            now=datetime.now(),
            default_loan_days=SETTINGS.default_loan_days,
            holiday_country=SETTINGS.holiday_country,
        )
        created = ENGINE.create_reservation(item_id, email, start, end)
    except ReservationError as error:
        return {"ok": False, "kind": error.kind, "message": str(error)}
    return {"ok": True, "reservation": created.to_dict()}


@mcp.tool()
def cancel_reservation(reservation_id: int) -> dict[str, Any]:
    """Cancel an active reservation and make its item available again."""
    try:
        cancelled = ENGINE.cancel_reservation(reservation_id)
    except ReservationError as error:
        return {"ok": False, "kind": error.kind, "message": str(error)}
    return {"ok": True, "reservation": cancelled.to_dict()}


@mcp.tool()
def reservation_statistics() -> dict[str, Any]:
    """Summarize the reservation history."""
    return ANALYTICS.summary()


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
