"""Mapping between configuration records and editable form state.

Forms hold decoded, structured fields; payloads hold the encoded strings
the backend persists. Clamping of percentage thresholds happens here, at
the input boundary, so the codec itself stays a pure format transform.
"""
import logging

from codec.condition import decode_condition, encode_condition
from codec.duration import decode_duration, encode_duration
from codec.schedule import decode_schedule, encode_schedule
from models.conditions import metric_unit
from models.records import RuleForm, MaintenanceForm, ChannelForm, PolicyForm

logger = logging.getLogger("nocconfig.codec.forms")

PERCENT_MIN = 0
PERCENT_MAX = 100
DEFAULT_RULE_DURATION = "5 minutes"
DEFAULT_RULE_NAME = "New Rule"
COPY_SUFFIX = " (Copy)"


def clamp_condition_value(metric, value):
    """Clamp to [0, 100] for percentage metrics; other metrics pass through."""
    if metric_unit(metric) == "%":
        return max(PERCENT_MIN, min(PERCENT_MAX, value))
    return value


def _to_int(value):
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def rule_to_form(rule):
    cond = decode_condition(rule.condition)
    dur = decode_duration(rule.duration or DEFAULT_RULE_DURATION)
    return RuleForm(
        name=rule.name,
        description=rule.description,
        condition_metric=cond.metric,
        condition_operator=cond.operator,
        condition_value=_to_int(cond.value),
        duration_value=dur.value,
        duration_unit=dur.unit,
        severity=rule.severity,
    )


def rule_form_payload(form):
    value = clamp_condition_value(form.condition_metric, form.condition_value)
    if value != form.condition_value:
        logger.debug(f"Clamped {form.condition_metric} threshold {form.condition_value} -> {value}")
    return {
        "name": form.name or DEFAULT_RULE_NAME,
        "description": form.description,
        "condition": encode_condition(form.condition_metric, form.condition_operator, value),
        "duration": encode_duration(form.duration_value, form.duration_unit),
        "severity": form.severity,
    }


def maintenance_to_form(window):
    sched = decode_schedule(window.schedule)
    dur = decode_duration(window.duration)
    return MaintenanceForm(
        name=window.name,
        schedule_day_of_week=sched.day,
        schedule_hour=sched.hour,
        schedule_minute=sched.minute,
        duration_value=dur.value,
        duration_unit=dur.unit,
        status=window.status,
    )


def maintenance_form_payload(form):
    return {
        "name": form.name,
        "schedule": encode_schedule(form.schedule_day_of_week, form.schedule_hour, form.schedule_minute),
        "duration": encode_duration(form.duration_value, form.duration_unit),
        "status": form.status,
    }


def channel_to_form(channel):
    return ChannelForm(name=channel.name, type=channel.type, meta=channel.meta)


def policy_to_form(policy):
    return PolicyForm(name=policy.name, description=policy.description, steps=policy.steps)


def channel_form_payload(form, create=False):
    """Channels and policies carry no encoded text; new records start active."""
    payload = {"name": form.name, "type": form.type, "meta": form.meta}
    if create:
        payload["active"] = True
    return payload


def policy_form_payload(form, create=False):
    payload = {"name": form.name, "description": form.description, "steps": max(1, form.steps)}
    if create:
        payload["active"] = True
    return payload


def duplicate_payload(record):
    """Create payload for a copy of any record: same fields, no id, name suffixed."""
    data = record.to_dict()
    data.pop("id", None)
    data["name"] = f"{data.get('name', '')}{COPY_SUFFIX}"
    return data
