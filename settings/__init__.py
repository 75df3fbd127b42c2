"""Global settings: optimistic toggle controller and its store/cache collaborators."""
from settings.controller import SettingsController, SETTINGS_CACHE_KEY
from settings.stores import SettingsStore, LocalCache, HTTPSettingsStore
