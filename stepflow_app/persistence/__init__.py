"""
Progress persistence module.

A gateway over a key-value backend that stores one progress record and
reports storage failures as a value instead of raising.
"""

from .backends import InMemoryBackend, KeyValueBackend, SQLiteBackend, UnavailableBackend
from .progress_store import ProgressGateway

__all__ = [
    "KeyValueBackend",
    "InMemoryBackend",
    "SQLiteBackend",
    "UnavailableBackend",
    "ProgressGateway",
]
