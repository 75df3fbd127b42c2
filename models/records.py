"""Configuration records exchanged with the backend, and their form state."""
from dataclasses import dataclass, asdict, fields, replace

from models.enums import ChannelType, DurationUnit, MaintenanceStatus, Severity, Weekday


def _from_dict(cls, data):
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in (data or {}).items() if k in names})


@dataclass
class Rule:
    id: str = ""
    name: str = ""
    description: str = ""
    condition: str = ""
    duration: str = ""
    severity: str = Severity.WARNING.value
    enabled: bool = True

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)

    def to_dict(self):
        return asdict(self)


@dataclass
class Channel:
    id: str = ""
    name: str = ""
    type: str = ChannelType.SLACK.value
    meta: str = ""
    active: bool = True

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)

    def to_dict(self):
        return asdict(self)


@dataclass
class Policy:
    id: str = ""
    name: str = ""
    description: str = ""
    steps: int = 1
    active: bool = True

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)

    def to_dict(self):
        return asdict(self)


@dataclass
class Maintenance:
    id: str = ""
    name: str = ""
    schedule: str = ""
    duration: str = ""
    status: str = MaintenanceStatus.SCHEDULED.value

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)

    def to_dict(self):
        return asdict(self)


# ── Form state ─────────────────────────────────────────

@dataclass
class RuleForm:
    name: str = ""
    description: str = ""
    condition_metric: str = "CPU"
    condition_operator: str = ">"
    condition_value: int = 90
    duration_value: int = 5
    duration_unit: str = DurationUnit.MINUTES.value
    severity: str = Severity.WARNING.value


@dataclass
class MaintenanceForm:
    name: str = ""
    schedule_day_of_week: str = Weekday.SUNDAY.value
    schedule_hour: int = 2
    schedule_minute: int = 0
    duration_value: int = 2
    duration_unit: str = DurationUnit.HOURS.value
    status: str = MaintenanceStatus.SCHEDULED.value


@dataclass
class ChannelForm:
    name: str = ""
    type: str = ChannelType.SLACK.value
    meta: str = ""


@dataclass
class PolicyForm:
    name: str = ""
    description: str = ""
    steps: int = 1


DEFAULT_RULE_FORM = RuleForm()
DEFAULT_MAINTENANCE_FORM = MaintenanceForm()
DEFAULT_CHANNEL_FORM = ChannelForm()
DEFAULT_POLICY_FORM = PolicyForm()


def new_form(default):
    """Fresh copy of a default form so callers never mutate the shared instance."""
    return replace(default)
