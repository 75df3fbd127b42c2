"""Tests for the optimistic settings controller."""
import asyncio
import json
import pytest

from conftest import FakeStore, FakeCache
from models.settings import GlobalSettings, DEFAULT_SETTINGS
from settings.controller import SettingsController, SETTINGS_CACHE_KEY


class GatedStore(FakeStore):
    """Store whose writes block until the test resolves them, one future per call."""

    def __init__(self):
        super().__init__()
        self.gates = []

    async def put(self, partial):
        self.puts.append(partial)
        gate = asyncio.get_running_loop().create_future()
        self.gates.append(gate)
        outcome = await gate
        if isinstance(outcome, Exception):
            raise outcome


# ── Initial load ───────────────────────────────────────

@pytest.mark.asyncio
async def test_load_from_remote(cache):
    store = FakeStore({"maintenance_mode": True, "auto_resolve_enabled": False, "ai_correlation_enabled": True})
    ctrl = SettingsController(store, cache)
    loaded = await ctrl.load()
    assert loaded == GlobalSettings(maintenance_mode=True, auto_resolve=False, ai_correlation=True)
    assert ctrl.current == loaded


@pytest.mark.asyncio
async def test_load_remote_missing_fields_use_defaults(cache):
    ctrl = SettingsController(FakeStore({"maintenance_mode": True}), cache)
    assert await ctrl.load() == GlobalSettings(maintenance_mode=True, auto_resolve=True, ai_correlation=True)


@pytest.mark.asyncio
async def test_load_falls_back_to_cache():
    cached = {"maintenanceMode": True, "autoResolve": False, "aiCorrelation": False}
    cache = FakeCache({SETTINGS_CACHE_KEY: json.dumps(cached)})
    ctrl = SettingsController(FakeStore(fail_get=True), cache)
    assert await ctrl.load() == GlobalSettings(maintenance_mode=True, auto_resolve=False, ai_correlation=False)


@pytest.mark.asyncio
async def test_load_falls_back_to_defaults_when_cache_empty(cache):
    ctrl = SettingsController(FakeStore(fail_get=True), cache)
    assert await ctrl.load() == GlobalSettings(False, True, True)


@pytest.mark.asyncio
@pytest.mark.parametrize("cache", [
    FakeCache({SETTINGS_CACHE_KEY: "{not json"}),
    FakeCache({SETTINGS_CACHE_KEY: "[1, 2]"}),
    FakeCache(fail_get=True),
    None,
])
async def test_load_never_raises(cache):
    ctrl = SettingsController(FakeStore(fail_get=True), cache)
    assert await ctrl.load() == DEFAULT_SETTINGS


# ── Toggle ─────────────────────────────────────────────

@pytest.mark.asyncio
async def test_toggle_success(store, cache):
    ctrl = SettingsController(store, cache)
    await ctrl.load()
    result = await ctrl.toggle("maintenance_mode")
    assert result.ok
    assert result.reverted_to is None
    assert ctrl.current.maintenance_mode is True
    assert store.puts == [{"maintenance_mode": True}]
    assert cache.values == {}


@pytest.mark.asyncio
async def test_toggle_accepts_camel_case_key(store, cache):
    ctrl = SettingsController(store, cache)
    result = await ctrl.toggle("autoResolve")
    assert result.ok
    assert result.key == "auto_resolve"
    assert store.puts == [{"auto_resolve_enabled": False}]


@pytest.mark.asyncio
async def test_toggle_failure_rolls_back_and_caches(cache):
    store = FakeStore(fail_put=True)
    ctrl = SettingsController(store, cache)
    original = ctrl.current
    assert original.maintenance_mode is False

    result = await ctrl.toggle("maintenance_mode")

    assert not result.ok
    assert result.reverted_to == original
    assert "Maintenance Mode" in result.error
    assert ctrl.current == original
    assert json.loads(cache.values[SETTINGS_CACHE_KEY]) == original.to_cache()
    assert not ctrl.pending


@pytest.mark.asyncio
async def test_toggle_failure_survives_cache_write_error():
    ctrl = SettingsController(FakeStore(fail_put=True), FakeCache(fail_set=True))
    result = await ctrl.toggle("ai_correlation")
    assert not result.ok
    assert ctrl.current.ai_correlation is True


@pytest.mark.asyncio
async def test_toggle_unknown_key(store):
    ctrl = SettingsController(store)
    with pytest.raises(KeyError):
        await ctrl.toggle("dark_mode")


@pytest.mark.asyncio
async def test_optimistic_apply_before_write_completes():
    store = GatedStore()
    ctrl = SettingsController(store, FakeCache())
    task = asyncio.create_task(ctrl.toggle("maintenance_mode"))
    await asyncio.sleep(0)

    assert ctrl.current.maintenance_mode is True
    assert ctrl.pending

    store.gates[0].set_result(None)
    assert (await task).ok
    assert not ctrl.pending


@pytest.mark.asyncio
async def test_same_key_race_rolls_back_to_own_snapshot():
    store = GatedStore()
    cache = FakeCache()
    ctrl = SettingsController(store, cache)

    first = asyncio.create_task(ctrl.toggle("maintenance_mode"))
    await asyncio.sleep(0)
    second = asyncio.create_task(ctrl.toggle("maintenance_mode"))
    await asyncio.sleep(0)
    assert ctrl.current.maintenance_mode is False

    # Second call fails: it reverts to the value it saw (first call's optimistic True)
    store.gates[1].set_result(ConnectionError("write rejected"))
    second_result = await second
    assert not second_result.ok
    assert second_result.reverted_to.maintenance_mode is True
    assert ctrl.current.maintenance_mode is True

    store.gates[0].set_result(None)
    assert (await first).ok
    assert ctrl.current.maintenance_mode is True
    assert json.loads(cache.values[SETTINGS_CACHE_KEY])["maintenanceMode"] is True


@pytest.mark.asyncio
async def test_different_keys_toggle_independently():
    store = GatedStore()
    ctrl = SettingsController(store, FakeCache())

    a = asyncio.create_task(ctrl.toggle("maintenance_mode"))
    b = asyncio.create_task(ctrl.toggle("ai_correlation"))
    await asyncio.sleep(0)
    assert store.puts == [{"maintenance_mode": True}, {"ai_correlation_enabled": False}]

    store.gates[0].set_result(None)
    store.gates[1].set_result(None)
    assert (await a).ok and (await b).ok
    assert ctrl.current == GlobalSettings(maintenance_mode=True, auto_resolve=True, ai_correlation=False)


@pytest.mark.asyncio
async def test_failed_toggle_keeps_other_key_that_succeeded():
    store = GatedStore()
    cache = FakeCache()
    ctrl = SettingsController(store, cache)

    slow = asyncio.create_task(ctrl.toggle("maintenance_mode"))
    await asyncio.sleep(0)
    fast = asyncio.create_task(ctrl.toggle("ai_correlation"))
    await asyncio.sleep(0)

    store.gates[1].set_result(None)
    assert (await fast).ok
    assert store.puts[1] == {"ai_correlation_enabled": False}

    store.gates[0].set_result(ConnectionError("write rejected"))
    result = await slow

    assert not result.ok
    expected = GlobalSettings(maintenance_mode=False, auto_resolve=True, ai_correlation=False)
    assert ctrl.current == expected
    assert result.reverted_to == expected
    assert json.loads(cache.values[SETTINGS_CACHE_KEY]) == expected.to_cache()
