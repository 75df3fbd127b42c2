"""Shared test fixtures."""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.records import Rule, Maintenance, Channel, Policy


class FakeStore:
    """In-memory remote settings store."""

    def __init__(self, data=None, fail_get=False, fail_put=False):
        self.data = dict(data or {})
        self.fail_get = fail_get
        self.fail_put = fail_put
        self.puts = []

    async def get(self):
        if self.fail_get:
            raise ConnectionError("settings backend unreachable")
        return dict(self.data)

    async def put(self, partial):
        self.puts.append(partial)
        if self.fail_put:
            raise ConnectionError("settings backend rejected write")
        self.data.update(partial)


class FakeCache:
    """Dict-backed local cache."""

    def __init__(self, values=None, fail_get=False, fail_set=False):
        self.values = dict(values or {})
        self.fail_get = fail_get
        self.fail_set = fail_set

    def get(self, key):
        if self.fail_get:
            raise OSError("cache unreadable")
        return self.values.get(key)

    def set(self, key, value):
        if self.fail_set:
            raise OSError("cache read-only")
        self.values[key] = value


@pytest.fixture
def store():
    return FakeStore({
        "maintenance_mode": False,
        "auto_resolve_enabled": True,
        "ai_correlation_enabled": True,
    })


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def sample_rules():
    return [
        Rule(id="r1", name="High CPU", description="Core router CPU", condition="CPU > 90%",
             duration="5 minutes", severity="critical", enabled=True),
        Rule(id="r2", name="BGP Down", description="", condition="BGP State != Established",
             duration="1 minute", severity="major", enabled=False),
        Rule(id="r3", name="Legacy", description="", condition="link flapping",
             duration="", severity="info", enabled=True),
    ]


@pytest.fixture
def sample_maintenance():
    return [
        Maintenance(id="m1", name="Weekly Patch", schedule="Every Sunday 02:00 UTC",
                    duration="2 hours", status="scheduled"),
        Maintenance(id="m2", name="DC Migration", schedule="One-time: Oct 24, 2025",
                    duration="6 hours", status="scheduled"),
    ]


@pytest.fixture
def sample_channels():
    return [
        Channel(id="c1", name="#noc-alerts", type="Slack", meta="Webhook", active=True),
        Channel(id="c2", name="On-call SMS", type="Twilio", meta="+1 555 0100", active=False),
    ]


@pytest.fixture
def sample_policies():
    return [Policy(id="p1", name="Tier 1", description="Page on-call then manager", steps=3, active=True)]
