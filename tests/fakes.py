"""Test doubles and record builders shared by the tests."""

import asyncio
from collections.abc import AsyncGenerator, Callable
import json
from pathlib import Path
from typing import Any

from bloggernetes.manifest import BlogResource
from bloggernetes.watch import EventType, WatchEvent, WatchTransport


def post_doc(
    name: str,
    post_id: str | None = None,
    authored_date: str | None = "2024-01-01T00:00:00Z",
    namespace: str = "default",
    **spec: Any,
) -> dict[str, Any]:
    """Build the generic record of a BlogPost as the API server returns it."""
    content: dict[str, Any] = {"id": post_id if post_id is not None else name}
    if authored_date is not None:
        content["authoredDate"] = authored_date
    content.update(spec)
    return {
        "apiVersion": "alpha.bloggernetes.davies.me.uk/v1",
        "kind": "BlogPost",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": "1"},
        "spec": content,
    }


def page_doc(
    name: str,
    page_id: str | None = None,
    namespace: str = "default",
    **spec: Any,
) -> dict[str, Any]:
    """Build the generic record of a BlogPage as the API server returns it."""
    content: dict[str, Any] = {"id": page_id if page_id is not None else name}
    content.update(spec)
    return {
        "apiVersion": "alpha.bloggernetes.davies.me.uk/v1",
        "kind": "BlogPage",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": "1"},
        "spec": content,
    }


class FakeTransport(WatchTransport):
    """A transport fed by the test through a queue.

    Items put on the queue are yielded by `watch`; `None` ends the current
    watch and an exception is raised from it.
    """

    def __init__(
        self,
        resource: BlogResource,
        items: list[dict[str, Any]] | None = None,
        resource_version: str = "100",
    ) -> None:
        self._resource = resource
        self.items = list(items or [])
        self.resource_version = resource_version
        self.list_error: Exception | None = None
        self.list_hangs = False
        self.list_calls = 0
        self.watch_calls: list[str] = []
        self.queue: asyncio.Queue[WatchEvent | Exception | None] = asyncio.Queue()

    @property
    def resource(self) -> BlogResource:
        return self._resource

    async def list(self) -> tuple[list[dict[str, Any]], str]:
        self.list_calls += 1
        if self.list_hangs:
            await asyncio.Future()
        if self.list_error is not None:
            raise self.list_error
        return list(self.items), self.resource_version

    async def watch(self, resource_version: str) -> AsyncGenerator[WatchEvent, None]:
        self.watch_calls.append(resource_version)
        while True:
            item = await self.queue.get()
            if item is None:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    def send(self, event_type: EventType, obj: dict[str, Any]) -> None:
        """Deliver a change on the current watch."""
        self.queue.put_nowait(WatchEvent(event_type, obj))

    def fail(self, err: Exception) -> None:
        """Break the current watch with an error."""
        self.queue.put_nowait(err)

    def close_watch(self) -> None:
        """End the current watch as if the server closed it."""
        self.queue.put_nowait(None)

    async def drain(self) -> None:
        """Wait until the consumer has taken everything sent so far."""
        while not self.queue.empty():
            await asyncio.sleep(0)
        for _ in range(5):
            await asyncio.sleep(0)


async def until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Wait for a condition to become true while other tasks run."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)


FAKE_KUBECTL = """#!/bin/sh
echo "$*" >> "{dir}/args.log"
case "$*" in
  *blogposts*) plural=blogposts ;;
  *) plural=blogpages ;;
esac
case "$*" in
  *watch=1*) file="{dir}/$plural.watch.jsonl" ;;
  *) file="{dir}/$plural.json" ;;
esac
if [ ! -f "$file" ]; then
  echo "Error from server (NotFound): the server could not find the requested resource" >&2
  exit 1
fi
cat "$file"
"""


def listing(items: list[dict[str, Any]], resource_version: str = "100") -> str:
    """Render a listing the way the API server returns it."""
    return json.dumps(
        {
            "apiVersion": "alpha.bloggernetes.davies.me.uk/v1",
            "kind": "List",
            "items": items,
            "metadata": {"resourceVersion": resource_version},
        }
    )


def fake_kubectl(
    directory: Path,
    listings: dict[str, list[dict[str, Any]]],
    watches: dict[str, list[dict[str, Any]]] | None = None,
    resource_version: str = "100",
) -> Path:
    """Write an executable standing in for kubectl.

    Listings and watch streams are keyed by resource plural. A resource with
    no listing fails like an unknown resource type; every command line is
    appended to `args.log` in the directory.
    """
    for plural, items in listings.items():
        (directory / f"{plural}.json").write_text(listing(items, resource_version))
    for plural, events in (watches or {}).items():
        (directory / f"{plural}.watch.jsonl").write_text(
            "".join(json.dumps(event) + "\n" for event in events)
        )
    script = directory / "kubectl"
    script.write_text(FAKE_KUBECTL.format(dir=directory))
    script.chmod(0o755)
    return script
