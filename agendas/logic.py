import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser, tz

SEARCH_MIN_LENGTH = 3
SEARCH_FIELDS = ("titre", "description", "location", "nom", "prenom")

def next_id(records: list[dict]) -> int:
    # recomputed from the current max: deleting the top record frees its id again
    ids = [i for i in (to_int(r.get("id")) for r in records) if i is not None]
    return max(ids) + 1 if ids else 1

def to_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

def parse_day(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return parser.isoparse(str(value)).date()
    except (ValueError, OverflowError):
        try:
            return parser.parse(str(value)).date()
        except (ValueError, OverflowError):
            return None

def in_range(day: Optional[date], start: date, end: date) -> bool:
    return day is not None and start <= day <= end

def matches_query(appointment: dict, query: str) -> bool:
    q = query.lower()
    return any(q in str(appointment.get(f) or "").lower() for f in SEARCH_FIELDS)

def count_unread(messages: list[dict]) -> int:
    return sum(1 for m in messages if not m.get("lu"))

def next_message_id(messages: list[dict], now_ms: int) -> str:
    taken = [to_int(m.get("id")) for m in messages]
    top = max((t for t in taken if t is not None), default=0)
    return str(now_ms if now_ms > top else top + 1)

_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

def password_is_strong(p: str) -> bool:
    return (
        len(p) >= 8
        and re.search(r"[a-z]", p) is not None
        and re.search(r"[A-Z]", p) is not None
        and re.search(r"[0-9]", p) is not None
        and _SPECIAL.search(p) is not None
    )

def appointment_start(appointment: dict, tz_name: str) -> Optional[datetime]:
    day = parse_day(appointment.get("date"))
    heure = str(appointment.get("heure") or "")
    if day is None or not re.fullmatch(r"\d{1,2}:\d{2}", heure):
        return None
    h, m = heure.split(":")
    try:
        return datetime(day.year, day.month, day.day, int(h), int(m), tzinfo=tz.gettz(tz_name))
    except ValueError:
        return None
