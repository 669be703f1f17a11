"""RSS 2.0 feed of the blog posts."""

from collections.abc import Sequence
from datetime import datetime, timezone
from email.utils import format_datetime

from jinja2 import Environment

from bloggernetes.manifest import BlogPost

FEED_TEMPLATE = "rss.xml"
FEED_CONTENT_TYPE = "application/rss+xml"


def rfc1123(value: datetime) -> str:
    """Format a timestamp as used in RSS, e.g. `Mon, 01 Jan 2024 00:00:00 +0000`."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value)


def render_feed(
    env: Environment,
    posts: Sequence[BlogPost],
    blog_name: str,
    base_url: str,
    build_date: datetime | None = None,
) -> str:
    """Render the feed document for the posts, newest first as given."""
    return env.get_template(FEED_TEMPLATE).render(
        posts=posts,
        blog_name=blog_name,
        base_url=base_url.rstrip("/"),
        build_date=build_date or datetime.now(timezone.utc),
    )
