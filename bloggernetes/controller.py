"""
Blog Controller implementation.

This controller mirrors BlogPost and BlogPage custom resources into the store.
It runs one watch worker per resource kind; each notification is converted to
a domain record and applied to the store as an upsert or a delete.

Key Concepts:
    - Initial sync: both watches have delivered the objects that existed when
      they started. Readers of the store see a partially populated, growing
      view until then.
    - Remote identity: the namespace/name of an object in the cluster. The
      controller remembers the record each object last converted to so that
      deletes and id changes can be applied even when a record is no longer
      convertible, and so that an id shared by two objects keeps the content
      of the one that remains.

Conversion failures affect a single object only: they are logged and the
event is dropped. Transport failures are not contained and end the run.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Any

from bloggernetes.config import ControllerConfig
from bloggernetes.converter import convert_page, convert_post
from bloggernetes.exceptions import ConversionError, TransportFailure
from bloggernetes.manifest import (
    BlogPage,
    BlogPost,
    RemoteObjectId,
    BLOG_PAGE_KIND,
    BLOG_POST_KIND,
)
from bloggernetes.store import Store
from bloggernetes.task import get_task_service
from bloggernetes.watch import EventType, ResourceWatcher, WatchEvent, WatchTransport

__all__ = ["Controller", "ControllerState"]

_LOGGER = logging.getLogger(__name__)


class ControllerState(StrEnum):
    """Lifecycle of the controller."""

    INITIALIZING = "Initializing"
    SYNCED = "Synced"
    RUNNING = "Running"
    STOPPED = "Stopped"


@dataclass
class _KindBinding:
    """How notifications for one resource kind reach the store."""

    kind: str
    convert: Callable[[Any], BlogPost | BlogPage]
    upsert: Callable[[Any], None]
    delete: Callable[[str], None]
    records: dict[RemoteObjectId, BlogPost | BlogPage]
    """Last converted record of each object in the cluster."""


class Controller:
    """
    Controller keeping the store in agreement with the cluster.

    The controller is started with `start()` which returns once both resource
    kinds are synced, or with `run()` which additionally blocks until the
    controller is cancelled or a watch fails.
    """

    def __init__(
        self,
        store: Store,
        post_transport: WatchTransport,
        page_transport: WatchTransport,
        config: ControllerConfig,
    ) -> None:
        """
        Initialize the controller.

        Args:
            store: The store updated with converted records
            post_transport: Source of BlogPost notifications
            page_transport: Source of BlogPage notifications
            config: The configuration for the controller
        """
        self._store = store
        self._config = config
        self._state = ControllerState.INITIALIZING
        self._synced = asyncio.Event()
        self._task_service = get_task_service()
        self._tasks: list[asyncio.Task[None]] = []
        self._posts = _KindBinding(
            kind=BLOG_POST_KIND,
            convert=convert_post,
            upsert=store.upsert_post,
            delete=store.delete_post,
            records={},
        )
        self._pages = _KindBinding(
            kind=BLOG_PAGE_KIND,
            convert=convert_page,
            upsert=store.upsert_page,
            delete=store.delete_page,
            records={},
        )
        self._watchers = [
            ResourceWatcher(post_transport, self.apply_post_event),
            ResourceWatcher(page_transport, self.apply_page_event),
        ]

    @property
    def state(self) -> ControllerState:
        """Return the current lifecycle state."""
        return self._state

    async def wait_synced(self) -> None:
        """Block until the initial sync has completed."""
        await self._synced.wait()

    async def start(self) -> None:
        """Start both watch workers and wait for the initial sync.

        Raises:
            TransportFailure: If a watch fails or does not sync in time.
        """
        if self._tasks:
            raise RuntimeError("Controller already started")
        _LOGGER.info("Starting controller in namespace %s", self._config.namespace)
        for name, watcher in zip(("posts", "pages"), self._watchers):
            self._tasks.append(
                self._task_service.create_background_task(
                    watcher.run(), name=f"watch-{name}"
                )
            )

        sync = asyncio.ensure_future(
            asyncio.gather(*(watcher.wait_synced() for watcher in self._watchers))
        )
        done, _ = await asyncio.wait(
            [sync, *self._tasks],
            timeout=self._config.sync_timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
        if sync not in done:
            sync.cancel()
            failure = next(
                (
                    task.exception()
                    for task in done
                    if task is not sync and not task.cancelled()
                ),
                None,
            )
            await self.close()
            if failure is not None:
                raise TransportFailure(
                    f"Failed to sync watches: {failure}"
                ) from failure
            raise TransportFailure(
                f"Watches did not sync within {self._config.sync_timeout} seconds"
            )

        self._state = ControllerState.SYNCED
        self._synced.set()
        _LOGGER.info(
            "Controller synced with %d posts and %d pages",
            self._store.post_count(),
            self._store.page_count(),
        )
        self._state = ControllerState.RUNNING

    async def run(self) -> None:
        """Start the controller and process events until cancelled.

        Raises:
            TransportFailure: If a watch fails while starting or running.
        """
        await self.start()
        try:
            await asyncio.gather(*self._tasks)
        except asyncio.CancelledError:
            _LOGGER.info("Controller cancelled")
            raise
        except Exception as err:
            _LOGGER.error("Controller watch failed: %s", err)
            if isinstance(err, TransportFailure):
                raise
            raise TransportFailure(f"Watch failed: {err}") from err
        finally:
            await self.close()

    async def close(self) -> None:
        """Stop the watch workers, allowing them a grace period to finish."""
        if self._state == ControllerState.STOPPED:
            return
        _LOGGER.info("Closing controller, cancelling watches")
        self._state = ControllerState.STOPPED
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            _, pending = await asyncio.wait(tasks, timeout=self._config.shutdown_grace)
            if pending:
                _LOGGER.warning(
                    "%d watches did not stop within %s seconds",
                    len(pending),
                    self._config.shutdown_grace,
                )
        self._tasks.clear()

    def apply_post_event(self, event: WatchEvent) -> None:
        """Apply a BlogPost notification to the store."""
        self._apply(self._posts, event)

    def apply_page_event(self, event: WatchEvent) -> None:
        """Apply a BlogPage notification to the store."""
        self._apply(self._pages, event)

    def _apply(self, binding: _KindBinding, event: WatchEvent) -> None:
        if event.type == EventType.DELETED:
            self._apply_delete(binding, event)
            return
        remote_id = event.remote_id
        try:
            record = binding.convert(event.object)
        except ConversionError as err:
            _LOGGER.error(
                "Failed to convert %s %s: %s", binding.kind, remote_id or "", err
            )
            return

        if remote_id is not None:
            previous = binding.records.get(remote_id)
            binding.records[remote_id] = record
            if previous is not None and previous.id != record.id:
                _LOGGER.info(
                    "%s %s changed id from %s to %s",
                    binding.kind,
                    remote_id,
                    previous.id,
                    record.id,
                )
                self._release(binding, previous.id)

        binding.upsert(record)
        action = "added" if event.type == EventType.ADDED else "updated"
        _LOGGER.info(
            "%s %s: id=%s title=%s", binding.kind, action, record.id, record.title
        )

    def _apply_delete(self, binding: _KindBinding, event: WatchEvent) -> None:
        remote_id = event.remote_id
        try:
            record_id = binding.convert(event.object).id
        except ConversionError as err:
            known = binding.records.get(remote_id) if remote_id is not None else None
            if known is None:
                _LOGGER.error(
                    "Failed to convert deleted %s %s, it may remain in the store: %s",
                    binding.kind,
                    remote_id or "",
                    err,
                )
                return
            record_id = known.id
            _LOGGER.warning(
                "Deleted %s %s could not be converted (%s), using last known id %s",
                binding.kind,
                remote_id,
                err,
                record_id,
            )
        if remote_id is not None:
            binding.records.pop(remote_id, None)
        _LOGGER.info("%s deleted: id=%s", binding.kind, record_id)
        self._release(binding, record_id)

    def _release(self, binding: _KindBinding, record_id: str) -> None:
        """Remove a record, or restore it from another object still claiming its id."""
        claimant = next(
            (record for record in binding.records.values() if record.id == record_id),
            None,
        )
        if claimant is not None:
            _LOGGER.debug(
                "%s id %s is still claimed by another object", binding.kind, record_id
            )
            binding.upsert(claimant)
            return
        binding.delete(record_id)
