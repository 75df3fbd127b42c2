"""Configuration backend client: rules, channels, policies, maintenance, global settings."""
import logging

from config import api_root
from models.records import Channel, Maintenance, Policy, Rule
from utils.http_client import APIError, HTTPClient

logger = logging.getLogger("nocconfig.api")

ENDPOINTS = {
    "rules": "/configuration/rules",
    "channels": "/configuration/channels",
    "policies": "/configuration/policies",
    "maintenance": "/configuration/maintenance",
}
GLOBAL_SETTINGS_ENDPOINT = "/configuration/global-settings"

RECORD_TYPES = {
    "rules": Rule,
    "channels": Channel,
    "policies": Policy,
    "maintenance": Maintenance,
}

# Flag flipped by the enable/disable action on each record kind
TOGGLE_FIELDS = {
    "rules": "enabled",
    "channels": "active",
    "policies": "active",
}


class ConfigAPIClient:
    def __init__(self, config=None, client=None):
        cfg = config or {}
        api_cfg = cfg.get("api", {})
        self.client = client or HTTPClient(
            base_url=api_root(cfg) if cfg else "http://localhost:8080/api/v1",
            timeout=api_cfg.get("timeout", 10),
            max_retries=api_cfg.get("max_retries", 2),
            source="configuration",
        )

    # ── Generic CRUD ──────────────────────────────────

    def list_records(self, kind):
        data = self.client.get(ENDPOINTS[kind])
        if not isinstance(data, list):
            logger.warning(f"Expected a list from {ENDPOINTS[kind]}, got {type(data).__name__}")
            return []
        record_type = RECORD_TYPES[kind]
        return [record_type.from_dict(item) for item in data if isinstance(item, dict)]

    def get(self, kind, record_id):
        for record in self.list_records(kind):
            if record.id == record_id:
                return record
        return None

    def create(self, kind, payload):
        logger.info(f"Creating {kind} record {payload.get('name', '')!r}")
        return self.client.post(ENDPOINTS[kind], payload)

    def update(self, kind, record_id, payload):
        logger.info(f"Updating {kind}/{record_id}")
        return self.client.put(f"{ENDPOINTS[kind]}/{record_id}", payload)

    def delete(self, kind, record_id):
        logger.info(f"Deleting {kind}/{record_id}")
        return self.client.delete(f"{ENDPOINTS[kind]}/{record_id}")

    def toggle(self, kind, record):
        """Flip a record's enabled/active flag on the backend (not optimistic)."""
        field = TOGGLE_FIELDS[kind]
        return self.update(kind, record.id, {field: not getattr(record, field)})

    # ── Typed helpers ─────────────────────────────────

    def list_rules(self):
        return self.list_records("rules")

    def list_channels(self):
        return self.list_records("channels")

    def list_policies(self):
        return self.list_records("policies")

    def list_maintenance(self):
        return self.list_records("maintenance")

    # ── Global settings ───────────────────────────────

    def get_global_settings(self):
        data = self.client.get(GLOBAL_SETTINGS_ENDPOINT)
        if not isinstance(data, dict):
            raise APIError(
                f"Expected an object from {GLOBAL_SETTINGS_ENDPOINT}, got {type(data).__name__}",
                response_body=data,
                source="configuration",
            )
        return data

    def put_global_settings(self, partial):
        return self.client.put(GLOBAL_SETTINGS_ENDPOINT, partial)

    def close(self):
        self.client.close()
