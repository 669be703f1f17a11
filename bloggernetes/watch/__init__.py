"""Watch transports delivering change notifications for custom resources."""

from .event import EventType, WatchEvent
from .transport import WatchTransport
from .kubectl import KubectlTransport
from .watcher import ResourceWatcher

__all__ = [
    "EventType",
    "WatchEvent",
    "WatchTransport",
    "KubectlTransport",
    "ResourceWatcher",
]
