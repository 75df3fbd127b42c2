"""Collaborators of the settings controller."""
import asyncio
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class SettingsStore(Protocol):
    """Remote settings, addressed with the backend's field names."""
    async def get(self) -> dict: ...

    async def put(self, partial: dict) -> None: ...


@runtime_checkable
class LocalCache(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class HTTPSettingsStore:
    """Runs the blocking ConfigAPIClient calls off the event loop."""

    def __init__(self, api_client):
        self.api = api_client

    async def get(self):
        return await asyncio.to_thread(self.api.get_global_settings)

    async def put(self, partial):
        await asyncio.to_thread(self.api.put_global_settings, partial)
