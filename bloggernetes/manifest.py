"""Representation of the blog content mirrored from the cluster.

A `BlogPost` or `BlogPage` is built from the generic record delivered by the
watch transport (see `bloggernetes.converter`). Records are immutable: an
update from the cluster always produces a whole new record that replaces the
previous one in the store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

__all__ = [
    "BaseManifest",
    "BlogResource",
    "BlogPost",
    "BlogPage",
    "RemoteObjectId",
    "BLOG_POST_RESOURCE",
    "BLOG_PAGE_RESOURCE",
]


BLOG_GROUP = "alpha.bloggernetes.davies.me.uk"
BLOG_VERSION = "v1"
BLOG_POST_KIND = "BlogPost"
BLOG_PAGE_KIND = "BlogPage"
DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True)
class BlogResource:
    """Identifies a custom resource type served by the API server."""

    group: str
    version: str
    plural: str
    kind: str

    def api_path(self, namespace: str) -> str:
        """Return the REST path for listing or watching this resource."""
        return f"/apis/{self.group}/{self.version}/namespaces/{namespace}/{self.plural}"

    def __str__(self) -> str:
        return f"{self.group}/{self.version}/{self.plural}"


BLOG_POST_RESOURCE = BlogResource(
    group=BLOG_GROUP, version=BLOG_VERSION, plural="blogposts", kind=BLOG_POST_KIND
)
BLOG_PAGE_RESOURCE = BlogResource(
    group=BLOG_GROUP, version=BLOG_VERSION, plural="blogpages", kind=BLOG_PAGE_KIND
)


@dataclass(frozen=True, order=True)
class RemoteObjectId:
    """Identity of an object in the cluster, independent of its content."""

    namespace: str | None
    name: str

    @classmethod
    def from_doc(cls, doc: Any) -> "RemoteObjectId | None":
        """Return the identity from the record metadata, if it has one."""
        if not isinstance(doc, dict):
            return None
        metadata = doc.get("metadata")
        if not isinstance(metadata, dict):
            return None
        name = metadata.get("name")
        if not isinstance(name, str) or not name:
            return None
        namespace = metadata.get("namespace")
        return cls(namespace if isinstance(namespace, str) else None, name)

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass(frozen=True)
class BaseManifest(DataClassDictMixin):
    """Base class for all blog records."""

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass(frozen=True)
class BlogPost(BaseManifest):
    """A published article."""

    id: str
    """Stable unique identifier of the post."""

    authored_date: datetime = field(metadata=field_options(alias="authoredDate"))
    """When the post was written, used for ordering."""

    title: str = ""
    body: str = ""
    author: str = ""

    meta_description: str = field(
        default="", metadata=field_options(alias="metaDescription")
    )
    """Short summary used in feeds and page metadata."""

    tags: tuple[str, ...] = ()
    """Tags in the order they were declared, duplicates included."""

    updated_date: datetime | None = field(
        default=None, metadata=field_options(alias="updatedDate")
    )
    """When the post was last revised, if ever."""

    @property
    def description(self) -> str:
        """Return the meta description, or a prefix of the body."""
        if self.meta_description:
            return self.meta_description
        if len(self.body) > 200:
            return self.body[:200] + "..."
        return self.body


@dataclass(frozen=True)
class BlogPage(BaseManifest):
    """A static document shown in the site navigation."""

    id: str
    title: str = ""
    content: str = ""

    order: int = 0
    """Display position, ascending."""
