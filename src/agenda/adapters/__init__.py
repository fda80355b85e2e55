"""Adapters - I/O implementations of ports."""

from .api_client import AgendaApiClient, ApiError
from .file_store import JsonFileStore

__all__ = [
    "AgendaApiClient",
    "ApiError",
    "JsonFileStore",
]
