"""List-then-watch loop delivering a consistent stream of changes.

A `ResourceWatcher` turns a `WatchTransport` into the stream the controller
consumes: every pre-existing object first arrives as ADDED, then the initial
sync signal fires, then live changes follow. When the server closes a watch
the loop resumes from the last observed resourceVersion. If that version has
expired the watcher lists again and synthesizes DELETED events for objects
that disappeared in the meantime.
"""

import asyncio
from collections.abc import Callable
import contextlib
import logging
from typing import Any

from bloggernetes.exceptions import WatchExpired
from bloggernetes.manifest import RemoteObjectId

from .event import EventType, WatchEvent
from .transport import WatchTransport

__all__ = ["ResourceWatcher"]

_LOGGER = logging.getLogger(__name__)

REWATCH_DELAY = 1.0


class ResourceWatcher:
    """Drives one transport and hands each change to a handler."""

    def __init__(
        self,
        transport: WatchTransport,
        handler: Callable[[WatchEvent], None],
        rewatch_delay: float = REWATCH_DELAY,
    ) -> None:
        """Initialize the ResourceWatcher.

        Args:
            transport: Source of listings and change streams.
            handler: Called for every ADDED, MODIFIED and DELETED event. It
                must not block.
            rewatch_delay: Pause before resuming a watch that ended without
                delivering any event.
        """
        self._transport = transport
        self._handler = handler
        self._rewatch_delay = rewatch_delay
        self._synced = asyncio.Event()
        self._known: dict[RemoteObjectId, dict[str, Any]] = {}

    @property
    def has_synced(self) -> bool:
        """Return True once the initial listing has been delivered."""
        return self._synced.is_set()

    async def wait_synced(self) -> None:
        """Block until the initial listing has been delivered."""
        await self._synced.wait()

    async def run(self) -> None:
        """List and watch until cancelled.

        Raises:
            TransportFailure: If the transport fails.
        """
        resource = self._transport.resource
        resource_version = await self._relist()
        self._synced.set()
        _LOGGER.info("Initial sync of %s complete", resource.plural)
        while True:
            try:
                resource_version, delivered = await self._watch(resource_version)
            except WatchExpired as err:
                _LOGGER.info(
                    "Watch of %s expired (%s), listing again", resource.plural, err
                )
                resource_version = await self._relist()
                continue
            if not delivered:
                await asyncio.sleep(self._rewatch_delay)
            _LOGGER.debug(
                "Watch of %s closed, resuming from %s",
                resource.plural,
                resource_version,
            )

    async def _relist(self) -> str:
        items, resource_version = await self._transport.list()
        seen: set[RemoteObjectId] = set()
        for item in items:
            event = WatchEvent(EventType.ADDED, item)
            if (remote_id := event.remote_id) is not None:
                seen.add(remote_id)
            self._dispatch(event)
        for remote_id in set(self._known) - seen:
            self._dispatch(WatchEvent(EventType.DELETED, self._known[remote_id]))
        return resource_version

    async def _watch(self, resource_version: str) -> tuple[str, bool]:
        delivered = False
        stream = self._transport.watch(resource_version)
        async with contextlib.aclosing(stream) as events:
            async for event in events:
                resource_version = event.resource_version or resource_version
                if event.type == EventType.BOOKMARK:
                    continue
                delivered = True
                self._dispatch(event)
        return resource_version, delivered

    def _dispatch(self, event: WatchEvent) -> None:
        if (remote_id := event.remote_id) is not None:
            if event.type == EventType.DELETED:
                self._known.pop(remote_id, None)
            else:
                self._known[remote_id] = event.object
        self._handler(event)
