"""Weekly schedule text codec: "Every Sunday 02:00 UTC"."""
import logging
import re

from models.conditions import Schedule
from models.enums import Weekday

logger = logging.getLogger("nocconfig.codec.schedule")

_DAYS = "|".join(d.value for d in Weekday)

DAY_RE = re.compile(rf"(?:Every\s+)?\b({_DAYS})\b", re.IGNORECASE)
TIME_RE = re.compile(r"(\d{1,2}):(\d{2})")
WEEKLY_SCHEDULE_RE = re.compile(rf"^\s*Every\s+({_DAYS})\s+\d{{1,2}}:\d{{2}}(\s+UTC)?\s*$", re.IGNORECASE)

DEFAULT_DAY = Weekday.SUNDAY.value
DEFAULT_HOUR = 2
DEFAULT_MINUTE = 0
TIMEZONE = "UTC"


def decode_schedule(text):
    """Extract weekday and HH:MM; missing parts take the defaults. Never raises."""
    text = text or ""
    day_match = DAY_RE.search(text)
    day = day_match.group(1).capitalize() if day_match else DEFAULT_DAY

    hour, minute = DEFAULT_HOUR, DEFAULT_MINUTE
    time_match = TIME_RE.search(text)
    if time_match:
        h, m = int(time_match.group(1)), int(time_match.group(2))
        if 0 <= h <= 23 and 0 <= m <= 59:
            hour, minute = h, m

    if not day_match or not time_match:
        logger.debug(f"Schedule text partially outside grammar: {text!r}")
    return Schedule(day=day, hour=hour, minute=minute, timezone=TIMEZONE)


def encode_schedule(day, hour, minute):
    day = day.value if isinstance(day, Weekday) else day
    return f"Every {day} {hour:02d}:{minute:02d} {TIMEZONE}"


def is_weekly_schedule(text):
    """True if the text is fully within the weekly grammar (one-off dates are not)."""
    return bool(WEEKLY_SCHEDULE_RE.match(text or ""))
