"""
The store module holds the blog content mirrored from the cluster.

- Posts and pages are keyed by their `id`.
- Values are the immutable records from manifest.py; an update replaces the
  whole record.
- Provides query APIs for the serving layer and update APIs for the
  controller.

This abstract interface allows for various implementations; the in-memory
store is rebuilt from the cluster on every start.
"""

from .store import Store
from .in_memory import InMemoryStore
from .rwlock import ReadWriteLock

__all__ = [
    "Store",
    "InMemoryStore",
    "ReadWriteLock",
]
