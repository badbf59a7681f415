"""Core app configuration, errors and record storage."""

from rolekeeper.core.config import get_settings, settings
from rolekeeper.core.store import RecordStore, get_record_store

__all__ = ["get_settings", "settings", "RecordStore", "get_record_store"]
