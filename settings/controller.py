"""Optimistic controller for the global alerting settings.

A toggle is applied to `current` immediately, then written to the remote
store. If the write fails, only the toggled field is rolled back to the
value *this* call captured, so settings changed by other calls in the
meantime are kept. The resulting settings are written to the local cache
for the next load, and the failure is returned to the caller as a
ToggleResult rather than raised.

Initial load falls back remote -> local cache -> DEFAULT_SETTINGS and
never raises.
"""
import json
import logging
from dataclasses import replace

from models.settings import DEFAULT_SETTINGS, GlobalSettings, ToggleResult, resolve_key

logger = logging.getLogger("nocconfig.settings")

SETTINGS_CACHE_KEY = "global-config-settings"


class SettingsController:
    def __init__(self, store, cache=None, cache_key=SETTINGS_CACHE_KEY):
        self.store = store
        self.cache = cache
        self.cache_key = cache_key
        self.current = DEFAULT_SETTINGS
        self._in_flight = 0

    @property
    def pending(self):
        return self._in_flight > 0

    async def load(self) -> GlobalSettings:
        try:
            raw = await self.store.get()
            self.current = GlobalSettings.from_raw(raw)
            logger.info("Loaded global settings from remote store")
            return self.current
        except Exception as e:
            logger.warning(f"Remote settings read failed, trying local cache: {e}")

        cached = self._read_cache()
        if cached is not None:
            self.current = cached
            logger.info("Loaded global settings from local cache")
        else:
            self.current = DEFAULT_SETTINGS
            logger.info("Using default global settings")
        return self.current

    async def toggle(self, key) -> ToggleResult:
        setting = resolve_key(key)
        if setting is None:
            raise KeyError(f"Unknown setting: {key}")

        old = getattr(self.current, setting.name)
        self.current = self.current.toggled(setting.name)

        self._in_flight += 1
        try:
            await self.store.put({setting.remote_field: not old})
        except Exception as e:
            # Only this call's field is reverted; other keys may have settled meanwhile
            self.current = replace(self.current, **{setting.name: old})
            logger.warning(f"Failed to update {setting.name}, reverted: {e}")
            self._write_cache(self.current)
            return ToggleResult(
                ok=False,
                key=setting.name,
                reverted_to=self.current,
                error=f"Failed to update {setting.label}. Reverted to previous value.",
            )
        finally:
            self._in_flight -= 1

        logger.debug(f"{setting.name} set to {not old}")
        return ToggleResult(ok=True, key=setting.name)

    def _read_cache(self):
        if self.cache is None:
            return None
        try:
            stored = self.cache.get(self.cache_key)
            if not stored:
                return None
            data = json.loads(stored)
            if not isinstance(data, dict):
                return None
            return GlobalSettings.from_cache(data)
        except Exception as e:
            logger.warning(f"Local settings cache unreadable: {e}")
            return None

    def _write_cache(self, settings):
        if self.cache is None:
            return
        try:
            self.cache.set(self.cache_key, json.dumps(settings.to_cache()))
        except Exception as e:
            logger.warning(f"Could not write settings to local cache: {e}")
