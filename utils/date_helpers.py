import re
from datetime import datetime, timedelta, timezone

from utils.constants import NOTIFICATION_RETENTION_HOURS

ONE_DAY = timedelta(hours=NOTIFICATION_RETENTION_HOURS)

_FRACTION_RE = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None on failure.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        # Java backends emit up to nanoseconds; fromisoformat wants <= 6 digits
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a trailing 'Z'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def age_of(timestamp, now: datetime) -> timedelta | None:
    """now - timestamp, or None when the timestamp cannot be parsed."""
    dt = parse_timestamp(timestamp)
    if dt is None:
        return None
    return now - dt


def is_expired(timestamp, now: datetime, retention: timedelta = ONE_DAY) -> bool:
    """True when the timestamp is unparseable or at least `retention` old."""
    age = age_of(timestamp, now)
    return age is None or age >= retention


def format_display_datetime(dt: datetime | None) -> str:
    if dt is None:
        return ""
    return dt.astimezone().strftime("%b %d, %Y")
