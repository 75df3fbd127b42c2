"""Data models."""
from models.enums import Operator, DurationUnit, Weekday, Severity, MaintenanceStatus, ChannelType
from models.conditions import MetricDefinition, METRIC_CATALOG, get_metric, Condition, Duration, Schedule
from models.records import (
    Rule, Channel, Policy, Maintenance, RuleForm, MaintenanceForm, ChannelForm, PolicyForm,
)
from models.settings import GlobalSettings, DEFAULT_SETTINGS, SETTING_KEYS, ToggleResult
