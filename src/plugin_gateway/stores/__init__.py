"""Stores module - Keyed record storage collaborators."""

from .exceptions import StoreError, RecordNotFoundError
from .service import Record, RecordStore, InMemoryRecordStore


__all__ = [
    # Exceptions
    "StoreError",
    "RecordNotFoundError",
    # Service
    "Record",
    "RecordStore",
    "InMemoryRecordStore",
]
