"""Client for the configuration REST backend."""
from api.config_client import ConfigAPIClient
