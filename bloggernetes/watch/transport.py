"""Interface to a source of change notifications for one resource type."""

from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from typing import Any, TYPE_CHECKING

from bloggernetes.manifest import BlogResource

from .event import WatchEvent

__all__ = ["WatchTransport"]


class WatchTransport(ABC):
    """Lists and watches one resource type in a namespace."""

    @property
    @abstractmethod
    def resource(self) -> BlogResource:
        """The resource type this transport delivers."""

    @abstractmethod
    async def list(self) -> tuple[list[dict[str, Any]], str]:
        """Return the current objects and the resourceVersion of the listing.

        Raises:
            TransportFailure: If the listing cannot be fetched.
        """

    @abstractmethod
    async def watch(self, resource_version: str) -> AsyncGenerator[WatchEvent, None]:
        """Stream changes made after `resource_version`.

        The generator returns when the server closes the watch; the caller
        may resume from the last resourceVersion it observed.

        Raises:
            WatchExpired: If `resource_version` is too old to resume from.
            TransportFailure: If the watch cannot be established or breaks.
        """
        if TYPE_CHECKING:
            yield None  # type: ignore[misc]
