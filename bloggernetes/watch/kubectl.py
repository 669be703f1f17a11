"""Watch transport backed by the kubectl command line tool.

Both the listing and the changes are read from the raw API endpoint of the
resource. The watch endpoint writes one JSON document per line:

    {"type": "ADDED", "object": {...}}

Authentication and cluster selection are left entirely to kubectl (in-cluster
service account, kubeconfig file and context).
"""

from collections.abc import AsyncGenerator
import contextlib
import json
import logging
from typing import Any
from urllib.parse import urlencode

from bloggernetes.command import Command, run
from bloggernetes.config import KubectlConfig
from bloggernetes.exceptions import TransportFailure, WatchExpired
from bloggernetes.manifest import BlogResource

from .event import EventType, WatchEvent
from .transport import WatchTransport

__all__ = ["KubectlTransport"]

_LOGGER = logging.getLogger(__name__)

HTTP_GONE = 410


class KubectlTransport(WatchTransport):
    """Lists and watches a custom resource with kubectl."""

    def __init__(
        self, resource: BlogResource, namespace: str, config: KubectlConfig
    ) -> None:
        self._resource = resource
        self._namespace = namespace
        self._config = config

    @property
    def resource(self) -> BlogResource:
        return self._resource

    def _command(self, args: list[str]) -> Command:
        return Command(
            [self._config.kubectl_bin, *self._config.global_flags(), *args],
            exc=TransportFailure,
        )

    async def list(self) -> tuple[list[dict[str, Any]], str]:
        """Return the current objects and the resourceVersion of the listing.

        The listing is read from the raw API path so that the resourceVersion
        is the one assigned by the API server, which a watch can resume from.
        """
        cmd = self._command(
            ["get", "--raw", self._resource.api_path(self._namespace)]
        )
        output = await run(cmd)
        try:
            doc = json.loads(output)
        except json.JSONDecodeError as err:
            raise TransportFailure(
                f"Unable to parse listing of {self._resource}: {err}"
            ) from err
        if not isinstance(doc, dict) or not isinstance(items := doc.get("items"), list):
            raise TransportFailure(f"Listing of {self._resource} has no items")
        resource_version = ""
        if isinstance(metadata := doc.get("metadata"), dict):
            resource_version = str(metadata.get("resourceVersion") or "")
        if not resource_version:
            _LOGGER.warning(
                "Listing of %s has no resourceVersion, changes made before the "
                "watch starts may be missed",
                self._resource.plural,
            )
        _LOGGER.debug(
            "Listed %d %s at resourceVersion %s",
            len(items),
            self._resource.plural,
            resource_version,
        )
        return [item for item in items if isinstance(item, dict)], resource_version

    def watch_path(self, resource_version: str) -> str:
        """Return the raw API path used to watch from `resource_version`."""
        params = {"watch": "1", "allowWatchBookmarks": "true"}
        if resource_version:
            params["resourceVersion"] = resource_version
        return f"{self._resource.api_path(self._namespace)}?{urlencode(params)}"

    async def watch(self, resource_version: str) -> AsyncGenerator[WatchEvent, None]:
        """Stream changes made after `resource_version`."""
        cmd = self._command(["get", "--raw", self.watch_path(resource_version)])
        async with contextlib.aclosing(cmd.stream()) as lines:
            async for line in lines:
                if not line.strip():
                    continue
                yield parse_watch_line(line)


def parse_watch_line(line: bytes | str) -> WatchEvent:
    """Parse one line of watch output into a WatchEvent.

    Raises:
        WatchExpired: For an ERROR event with status 410 Gone.
        TransportFailure: For any other ERROR event or unparsable line.
    """
    try:
        doc = json.loads(line)
    except json.JSONDecodeError as err:
        raise TransportFailure(f"Unable to parse watch event: {err}") from err
    if not isinstance(doc, dict):
        raise TransportFailure(f"Unexpected watch event: {doc!r}")
    try:
        event_type = EventType(doc.get("type"))
    except ValueError as err:
        raise TransportFailure(
            f"Unknown watch event type: {doc.get('type')!r}"
        ) from err
    obj = doc.get("object")
    if not isinstance(obj, dict):
        raise TransportFailure(f"Watch event {event_type} has no object")
    if event_type == EventType.ERROR:
        message = obj.get("message", "unknown error")
        if obj.get("code") == HTTP_GONE:
            raise WatchExpired(f"Watch expired: {message}")
        raise TransportFailure(f"Watch failed: {message}")
    return WatchEvent(event_type, obj)
