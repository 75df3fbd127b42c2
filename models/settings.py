"""Global alerting settings and the outcome of a settings toggle."""
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class SettingKey:
    name: str
    label: str
    description: str
    remote_field: str
    cache_field: str
    default: bool


SETTING_KEYS = (
    SettingKey("maintenance_mode", "Maintenance Mode", "Suppress all non-critical alerts",
               "maintenance_mode", "maintenanceMode", False),
    SettingKey("auto_resolve", "Auto-Resolve", "Close alerts after 24h of silence",
               "auto_resolve_enabled", "autoResolve", True),
    SettingKey("ai_correlation", "AI Correlation", "Group related alerts automatically",
               "ai_correlation_enabled", "aiCorrelation", True),
)

_KEYS = {k.name: k for k in SETTING_KEYS}
# camelCase aliases used by the settings panel and the cache
_KEYS.update({k.cache_field: k for k in SETTING_KEYS})


def resolve_key(key) -> Optional[SettingKey]:
    """Accept either the snake_case or camelCase name of a setting."""
    return _KEYS.get(key)


def _flag(data, field, default):
    value = data.get(field) if isinstance(data, dict) else None
    return value if isinstance(value, bool) else default


@dataclass(frozen=True)
class GlobalSettings:
    maintenance_mode: bool = False
    auto_resolve: bool = True
    ai_correlation: bool = True

    @classmethod
    def from_raw(cls, data):
        """Build from the backend's field names; missing fields take defaults."""
        return cls(**{k.name: _flag(data, k.remote_field, k.default) for k in SETTING_KEYS})

    @classmethod
    def from_cache(cls, data):
        return cls(**{k.name: _flag(data, k.cache_field, k.default) for k in SETTING_KEYS})

    def to_raw(self):
        return {k.remote_field: getattr(self, k.name) for k in SETTING_KEYS}

    def to_cache(self):
        return {k.cache_field: getattr(self, k.name) for k in SETTING_KEYS}

    def toggled(self, key):
        setting = resolve_key(key)
        return replace(self, **{setting.name: not getattr(self, setting.name)})


DEFAULT_SETTINGS = GlobalSettings()


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of one toggle: either confirmed, or rolled back to `reverted_to`."""
    ok: bool
    key: str = ""
    reverted_to: Optional[GlobalSettings] = None
    error: str = ""

    def to_dict(self):
        data = {"ok": self.ok, "key": self.key}
        if not self.ok:
            data["revertedTo"] = self.reverted_to.to_cache() if self.reverted_to else None
            data["error"] = self.error
        return data
