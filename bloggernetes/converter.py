"""Conversion of generic records into blog records.

The watch transport delivers each object as an untyped nested mapping (the
decoded JSON of the custom resource). All of the type uncertainty of those
records is handled here: each field is read by an extractor that checks the
type and substitutes an empty value rather than coercing. Only the identity
and the authored date are mandatory.

Conversion is a pure function of its input and only ever raises a
`ConversionError`.
"""

from datetime import datetime
import re
from typing import Any

from .exceptions import MalformedRecord, MissingRequiredField
from .manifest import BlogPage, BlogPost, BLOG_PAGE_KIND, BLOG_POST_KIND

__all__ = [
    "convert_post",
    "convert_page",
    "get_str",
    "get_str_list",
    "get_int",
    "parse_timestamp",
]

# RFC 3339: date, time with optional fraction, and a mandatory offset.
_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$"
)


def get_str(spec: dict[str, Any], key: str) -> str:
    """Return the string value for `key`, or an empty string."""
    value = spec.get(key)
    if isinstance(value, str):
        return value
    return ""


def get_str_list(spec: dict[str, Any], key: str) -> tuple[str, ...]:
    """Return the string elements of the sequence at `key`.

    Elements that are not strings are skipped.
    """
    value = spec.get(key)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def get_int(spec: dict[str, Any], key: str) -> int:
    """Return the whole number value for `key`, or 0."""
    value = spec.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp, returning None if it is not one."""
    if not isinstance(value, str) or not _RFC3339_RE.match(value):
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _content(doc: Any, kind: str) -> dict[str, Any]:
    """Return the content section of a generic record."""
    if not isinstance(doc, dict):
        raise MalformedRecord(f"{kind} record is not a mapping: {type(doc).__name__}")
    spec = doc.get("spec")
    if not isinstance(spec, dict):
        raise MalformedRecord(f"{kind} record has no spec section")
    return spec


def _require_id(spec: dict[str, Any], kind: str) -> str:
    if not (record_id := get_str(spec, "id")):
        raise MissingRequiredField(kind, "id")
    return record_id


def convert_post(doc: Any) -> BlogPost:
    """Convert a generic BlogPost record into a `BlogPost`.

    Raises:
        MalformedRecord: The record has no spec section.
        MissingRequiredField: The id or authoredDate is absent or invalid.
    """
    spec = _content(doc, BLOG_POST_KIND)
    post_id = _require_id(spec, BLOG_POST_KIND)
    raw_authored = spec.get("authoredDate")
    if (authored_date := parse_timestamp(raw_authored)) is None:
        detail = "absent" if raw_authored is None else f"invalid value {raw_authored!r}"
        raise MissingRequiredField(BLOG_POST_KIND, "authoredDate", detail)
    return BlogPost(
        id=post_id,
        title=get_str(spec, "title"),
        body=get_str(spec, "body"),
        author=get_str(spec, "author"),
        meta_description=get_str(spec, "metaDescription"),
        tags=get_str_list(spec, "tags"),
        authored_date=authored_date,
        # Best effort: an unparsable updatedDate is treated as never set
        updated_date=parse_timestamp(spec.get("updatedDate")),
    )


def convert_page(doc: Any) -> BlogPage:
    """Convert a generic BlogPage record into a `BlogPage`."""
    spec = _content(doc, BLOG_PAGE_KIND)
    return BlogPage(
        id=_require_id(spec, BLOG_PAGE_KIND),
        title=get_str(spec, "title"),
        content=get_str(spec, "content"),
        order=get_int(spec, "order"),
    )
