"""Condition text codec.

Grammar:
    "<metric> <op> <number><unit>"   e.g. "CPU > 90%", "Latency >= 200ms"
    "<metric> <op> <text>"           e.g. "BGP State != Established"

op is one of >=, <=, ==, !=, >, <. Decoding is total: text matching
neither form comes back with the whole input as the metric and an empty
operator and value.
"""
import logging
import re

from models.conditions import Condition, metric_unit
from models.enums import Operator

logger = logging.getLogger("nocconfig.codec.condition")

_OPERATORS = "|".join(re.escape(op.value) for op in Operator)

NUMERIC_CONDITION_RE = re.compile(rf"^(.+?)\s*({_OPERATORS})\s*(-?\d+)")
TEXT_CONDITION_RE = re.compile(rf"^(.+?)\s*({_OPERATORS})\s*(.+)")

FALLBACK_OPERATOR = ""
FALLBACK_VALUE = ""


def decode_condition(text):
    """Parse persisted condition text into a Condition. Never raises."""
    text = text or ""
    match = NUMERIC_CONDITION_RE.match(text)
    if match:
        return Condition(metric=match.group(1).strip(), operator=match.group(2),
                         value=int(match.group(3)))

    match = TEXT_CONDITION_RE.match(text)
    if match:
        return Condition(metric=match.group(1).strip(), operator=match.group(2),
                         value=match.group(3).strip())

    logger.debug(f"Unparseable condition, passing through: {text!r}")
    return Condition(metric=text, operator=FALLBACK_OPERATOR, value=FALLBACK_VALUE)


def encode_condition(metric, operator, value):
    """Compose "<metric> <operator> <value><unit>". Unknown metrics get no unit."""
    op = operator.value if isinstance(operator, Operator) else operator
    return f"{metric} {op} {value}{metric_unit(metric)}"
