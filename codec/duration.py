"""Duration text codec: "5 minutes", "1 hour", "30 seconds"."""
import logging
import re

from models.conditions import Duration
from models.enums import DurationUnit

logger = logging.getLogger("nocconfig.codec.duration")

DURATION_RE = re.compile(r"(\d+)\s*(second|minute|hour|day)", re.IGNORECASE)

DEFAULT_DURATION_VALUE = 2
DEFAULT_DURATION_UNIT = DurationUnit.HOURS.value


def decode_duration(text):
    """Parse duration text; the unit is always returned in plural form."""
    match = DURATION_RE.search(text or "")
    if match:
        return Duration(value=int(match.group(1)), unit=match.group(2).lower() + "s")
    logger.debug(f"Unparseable duration, using default: {text!r}")
    return Duration(value=DEFAULT_DURATION_VALUE, unit=DEFAULT_DURATION_UNIT)


def encode_duration(value, unit):
    """Compose "<value> <unit>", singular when value is 1.

    Raises ValueError for a unit that is not a DurationUnit.
    """
    unit = DurationUnit(unit)
    return f"{value} {unit.singular if value == 1 else unit.value}"
