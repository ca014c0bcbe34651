from .analytics import ReservationAnalytics
from .booking import Reservation, can_reserve, has_time_overlap
from .catalog import Catalog
from .config import DEFAULT_SETTINGS, LibrarySettings, SeedItem, load_settings, seed_engine
from .engine import ReservationEngine
from .errors import (
	ConfigurationError,
	ConflictError,
	EventLogError,
	InvalidArgumentError,
	InvalidStateError,
	NotFoundError,
	PreconditionFailedError,
	ReservationError,
)
from .event_log import ReservationEventLog
from .items import ItemKind, ReservableItem, available, by_author, by_title, digital_work, newest, physical_work
from .ledger import ReservationLedger
from .natural_language import ParsedReservationRequest, parse_reservation_period, parse_reservation_request
from .notifications import NotificationChannel, ReservationEvent, ReservationEventKind
from .users import UserRegistry

__all__ = [
	"ReservationAnalytics",
	"Reservation",
	"can_reserve",
	"has_time_overlap",
	"Catalog",
	"DEFAULT_SETTINGS",
	"LibrarySettings",
	"SeedItem",
	"load_settings",
	"seed_engine",
	"ReservationEngine",
	"ConfigurationError",
	"ConflictError",
	"EventLogError",
	"InvalidArgumentError",
	"InvalidStateError",
	"NotFoundError",
	"PreconditionFailedError",
	"ReservationError",
	"ReservationEventLog",
	"ItemKind",
	"ReservableItem",
	"available",
	"by_author",
	"by_title",
	"digital_work",
	"newest",
	"physical_work",
	"ReservationLedger",
	"ParsedReservationRequest",
	"parse_reservation_period",
	"parse_reservation_request",
	"NotificationChannel",
	"ReservationEvent",
	"ReservationEventKind",
	"UserRegistry",
]
