"""Configuration management."""
import os
import yaml
from pathlib import Path

_config = None
_DEFAULT_CONFIG = Path(__file__).parent / "default_config.yaml"

ENV_OVERRIDES = {
    "NOC_CONFIG_API_BASE_URL": ("api", "base_url"),
    "NOC_CONFIG_API_VERSION": ("api", "api_version"),
    "NOC_CONFIG_CACHE_PATH": ("cache", "path"),
    "NOC_CONFIG_LOG_LEVEL": ("logging", "level"),
}

REQUIRED_SECTIONS = ["api", "cache", "logging", "web"]


def load_config(path=None):
    """Load config from YAML, merging defaults with optional overrides."""
    global _config

    with open(_DEFAULT_CONFIG) as f:
        config = yaml.safe_load(f)

    if path and Path(path).exists():
        with open(path) as f:
            overrides = yaml.safe_load(f) or {}
        config = _deep_merge(config, overrides)

    for env_key, config_path in ENV_OVERRIDES.items():
        val = os.environ.get(env_key)
        if val:
            d = config
            for k in config_path[:-1]:
                d = d.setdefault(k, {})
            d[config_path[-1]] = val

    _validate_config(config)
    _config = config
    return config


def get_config():
    """Return cached config, loading defaults if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def api_root(config):
    """Versioned API root, e.g. http://localhost:8080/api/v1."""
    api = config["api"]
    return f"{api['base_url'].rstrip('/')}/api/{api['api_version']}"


def _deep_merge(base, override):
    """Recursively merge override into base dict."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate_config(config):
    for section in REQUIRED_SECTIONS:
        if section not in config:
            raise ValueError(f"Missing required config section: {section}")

    if not config["api"].get("base_url"):
        raise ValueError("api.base_url must be set")
    if config["api"].get("timeout", 0) <= 0:
        raise ValueError("api.timeout must be > 0")
