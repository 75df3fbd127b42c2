"""Enums for operators, units, weekdays, severity and record status."""
from enum import Enum


class Operator(str, Enum):
    # Two-character tokens first so ">=" is never read as ">"
    GTE = ">="
    LTE = "<="
    EQ = "=="
    NE = "!="
    GT = ">"
    LT = "<"


class DurationUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @property
    def singular(self):
        return self.value[:-1]


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    WARNING = "warning"
    INFO = "info"


class MaintenanceStatus(str, Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"


class ChannelType(str, Enum):
    SLACK = "Slack"
    EMAIL = "Email"
    TWILIO = "Twilio"
