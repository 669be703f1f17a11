"""Change notifications delivered by a watch transport."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from bloggernetes.manifest import RemoteObjectId

__all__ = ["EventType", "WatchEvent"]


class EventType(StrEnum):
    """Type of a change notification, as named by the Kubernetes watch API."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    BOOKMARK = "BOOKMARK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class WatchEvent:
    """A single notification carrying the generic record of an object."""

    type: EventType
    object: dict[str, Any]

    @property
    def resource_version(self) -> str | None:
        """Return the resourceVersion carried by the record, if any."""
        metadata = self.object.get("metadata")
        if isinstance(metadata, dict) and isinstance(
            rv := metadata.get("resourceVersion"), str
        ):
            return rv
        return None

    @property
    def remote_id(self) -> RemoteObjectId | None:
        """Return the cluster identity of the record, if it has one."""
        return RemoteObjectId.from_doc(self.object)

    def __str__(self) -> str:
        return f"{self.type} {self.remote_id or '<unknown>'}"
