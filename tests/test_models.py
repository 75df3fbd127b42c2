"""Tests for settings and record models."""
from models.conditions import get_metric, METRIC_CATALOG
from models.records import Rule, DEFAULT_RULE_FORM, new_form
from models.settings import GlobalSettings, DEFAULT_SETTINGS, ToggleResult, resolve_key


def test_default_settings():
    assert DEFAULT_SETTINGS == GlobalSettings(maintenance_mode=False, auto_resolve=True, ai_correlation=True)


def test_raw_field_mapping():
    settings = GlobalSettings(maintenance_mode=True, auto_resolve=False, ai_correlation=True)
    raw = settings.to_raw()
    assert raw == {"maintenance_mode": True, "auto_resolve_enabled": False, "ai_correlation_enabled": True}
    assert GlobalSettings.from_raw(raw) == settings


def test_cache_field_mapping():
    settings = GlobalSettings(maintenance_mode=True, auto_resolve=True, ai_correlation=False)
    assert settings.to_cache() == {"maintenanceMode": True, "autoResolve": True, "aiCorrelation": False}
    assert GlobalSettings.from_cache(settings.to_cache()) == settings


def test_from_raw_ignores_non_boolean_values():
    assert GlobalSettings.from_raw({"maintenance_mode": "yes", "auto_resolve_enabled": None}) == DEFAULT_SETTINGS
    assert GlobalSettings.from_raw(None) == DEFAULT_SETTINGS


def test_toggled_returns_new_instance():
    toggled = DEFAULT_SETTINGS.toggled("aiCorrelation")
    assert toggled.ai_correlation is False
    assert DEFAULT_SETTINGS.ai_correlation is True


def test_resolve_key_aliases():
    assert resolve_key("maintenanceMode") is resolve_key("maintenance_mode")
    assert resolve_key("nope") is None


def test_toggle_result_to_dict():
    assert ToggleResult(ok=True, key="auto_resolve").to_dict() == {"ok": True, "key": "auto_resolve"}
    failed = ToggleResult(ok=False, key="auto_resolve", reverted_to=DEFAULT_SETTINGS, error="boom").to_dict()
    assert failed["revertedTo"] == DEFAULT_SETTINGS.to_cache()
    assert failed["error"] == "boom"


def test_metric_catalog():
    assert len(METRIC_CATALOG) == 9
    assert get_metric("Temperature").unit == "°C"
    assert get_metric("Interface Errors").unit == "/min"
    assert get_metric("cpu") is None


def test_record_from_dict_ignores_unknown_fields():
    rule = Rule.from_dict({"id": "r1", "name": "x", "condition": "CPU > 90%", "created_at": "2025-01-01"})
    assert rule.id == "r1"
    assert rule.enabled is True
    assert "created_at" not in rule.to_dict()


def test_new_form_is_a_copy():
    form = new_form(DEFAULT_RULE_FORM)
    form.condition_value = 10
    assert DEFAULT_RULE_FORM.condition_value == 90
