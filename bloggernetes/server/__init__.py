"""Read-only web views of the store: site pages, tag and author filters and a feed."""

from .app import create_app, create_environment
from .feed import render_feed

__all__ = ["create_app", "create_environment", "render_feed"]
