"""Utility modules for the NOC configuration tools."""
from utils.logger import setup_logging
from utils.cache import JSONFileCache
from utils.http_client import HTTPClient, APIError
