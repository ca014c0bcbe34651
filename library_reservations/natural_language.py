import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

import holidays as pyholidays

from .errors import InvalidArgumentError

DEFAULT_LOAN_DAYS = 7

_DATE_RE = re.compile(r"(?<!\d)(?P<date>\d{4}[/-]\d{1,2}[/-]\d{1,2})(?!\d)")
_EMAIL_RE = re.compile(r"(?P<email>[^\s@#]+@[^\s@]+\.[^\s@]+)")
_ITEM_RE = re.compile(r"(?:#|\bitem\s+)(?P<item_id>\d+)\b", re.IGNORECASE)
_RELATIVE_DATE_RE = re.compile(r"\b(?P<day>today|tomorrow)\b", re.IGNORECASE)
_DURATION_RE = re.compile(r"(?P<count>\d+)\s*(?P<unit>days?|weeks?)\b", re.IGNORECASE)
_HOLIDAY_CACHE: dict[tuple[str, int], set[date]] = {}


@dataclass(frozen=True)
class ParsedReservationRequest:
    item_id: int
    user_email: str | None
    start: datetime
    end: datetime
    raw_text: str


def parse_date(date_text: str) -> date:
    normalized = date_text.strip().replace("/", "-")
    try:
        return datetime.strptime(normalized, "%Y-%m-%d").date()
    except ValueError as error:
        raise InvalidArgumentError(f"Invalid date '{date_text}'. Expected format: YYYY-MM-DD") from error


def is_open_day(target_date: date, country: str) -> bool:
    return target_date.weekday() < 5 and not _is_public_holiday(target_date, country)


def roll_forward_to_open_day(target_date: date, country: str) -> date:
    while not is_open_day(target_date, country):
        target_date += timedelta(days=1)
    return target_date


def parse_reservation_period(
    from_text: str | None,
    to_text: str | None,
    now: datetime,
    default_loan_days: int = DEFAULT_LOAN_DAYS,
    holiday_country: str | None = None,
) -> tuple[datetime, datetime]:
    """Turn the raw start/end strings a user typed into a reservation period.

    A blank start means ``now``. A blank end means ``default_loan_days`` after
    the start, moved to the next open day when ``holiday_country`` is given.
    """
    if default_loan_days <= 0:
        raise InvalidArgumentError("default_loan_days must be greater than zero")

    start = now if not from_text or not from_text.strip() else _start_of_day(parse_date(from_text))
    if to_text and to_text.strip():
        return start, _start_of_day(parse_date(to_text))

    end = start + timedelta(days=default_loan_days)
    if holiday_country:
        end = datetime.combine(roll_forward_to_open_day(end.date(), holiday_country), end.time())
    return start, end


def parse_reservation_request(
    text: str,
    reference_datetime: datetime | None = None,
    default_loan_days: int = DEFAULT_LOAN_DAYS,
) -> ParsedReservationRequest:
    if not text or not text.strip():
        raise InvalidArgumentError("text must not be empty")

    item_match = _ITEM_RE.search(text)
    if not item_match:
        raise InvalidArgumentError("Could not find an item id in text. Expected format: #<id> or 'item <id>'")
    item_id = int(item_match.group("item_id"))

    email_match = _EMAIL_RE.search(text)
    user_email = email_match.group("email") if email_match else None
    remainder = text.replace(user_email, " ") if user_email else text

    duration_match = _DURATION_RE.search(remainder)
    duration = _duration_from_match(duration_match) if duration_match else None

    dates = _DATE_RE.findall(remainder)
    if len(dates) >= 2:
        start = _start_of_day(parse_date(dates[0]))
        end = _start_of_day(parse_date(dates[1]))
    elif len(dates) == 1:
        start = _start_of_day(parse_date(dates[0]))
        end = start + (duration or timedelta(days=default_loan_days))
    else:
        relative_match = _RELATIVE_DATE_RE.search(remainder)
        if not relative_match:
            raise InvalidArgumentError(
                "Could not find a date in text. Expected format: YYYY-MM-DD or relative form like 'tomorrow for 14 days'"
            )
        now = reference_datetime or datetime.now()
        offset = 1 if relative_match.group("day").lower() == "tomorrow" else 0
        start = _start_of_day(now.date() + timedelta(days=offset))
        end = start + (duration or timedelta(days=default_loan_days))

    if start >= end:
        raise InvalidArgumentError("Start date must be before end date.")

    return ParsedReservationRequest(item_id=item_id, user_email=user_email, start=start, end=end, raw_text=text)


def _duration_from_match(match: re.Match[str]) -> timedelta:
    count = int(match.group("count"))
    if count <= 0:
        raise InvalidArgumentError("duration must be greater than zero")
    if match.group("unit").lower().startswith("week"):
        return timedelta(weeks=count)
    return timedelta(days=count)


def _start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def _is_public_holiday(target_date: date, country: str) -> bool:
    key = (country, target_date.year)
    if key not in _HOLIDAY_CACHE:
        try:
            holiday_map = pyholidays.country_holidays(country, years=[target_date.year])
        except NotImplementedError as error:
            raise InvalidArgumentError(f"Unsupported holiday country: {country}") from error
        _HOLIDAY_CACHE[key] = set(holiday_map.keys())
    return target_date in _HOLIDAY_CACHE[key]
