"""Web application serving the blog from the store.

Handlers are plain functions so FastAPI runs them in its thread pool; they
only read from the store, which is safe to query concurrently with the
controller applying changes.
"""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, PackageLoader, select_autoescape

from bloggernetes.config import ServerConfig
from bloggernetes.store import Store

from .feed import FEED_CONTENT_TYPE, render_feed, rfc1123

__all__ = ["create_app", "create_environment"]


STATIC_DIR = Path(__file__).parent / "static"


def display_date(value: datetime) -> str:
    """Format a timestamp for display on a page."""
    return value.strftime("%d %B %Y")


def quote_segment(value: str) -> str:
    """Quote a value for use as a single URL path segment, `/` included."""
    return quote(value, safe="")


def create_environment() -> Environment:
    """Create the Jinja2 environment for the packaged templates."""
    env = Environment(
        loader=PackageLoader("bloggernetes.server", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["display_date"] = display_date
    env.filters["quote_segment"] = quote_segment
    env.filters["rfc1123"] = rfc1123
    return env


def create_app(
    store: Store,
    config: ServerConfig,
    state: Callable[[], str] | None = None,
) -> FastAPI:
    """Create the web application.

    Args:
        store: The store to read posts and pages from
        config: The configuration for the server
        state: Optional callable reporting the controller state for /healthz
    """
    env = create_environment()
    app = FastAPI(
        title=config.blog_name, docs_url=None, redoc_url=None, openapi_url=None
    )
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    def render(template: str, title: str, **context: Any) -> HTMLResponse:
        base = {
            "blog_name": config.blog_name,
            "title": title,
            "tags": sorted(store.list_tags()),
            "authors": sorted(author for author in store.list_authors() if author),
            "pages": store.list_pages(),
            "page_id": None,
        }
        return HTMLResponse(env.get_template(template).render({**base, **context}))

    # Filters without a value go back to the home page. The value routes
    # below also match an empty value, so these must come first.
    for prefix in ("tag", "author", "post", "page"):
        app.add_api_route(
            f"/{prefix}/",
            lambda: RedirectResponse("/", status_code=status.HTTP_302_FOUND),
            methods=["GET"],
            include_in_schema=False,
        )

    @app.get("/", response_class=HTMLResponse)
    def home() -> HTMLResponse:
        return render("post_list.html", "Home", posts=store.list_posts())

    @app.get("/tag/{tag:path}", response_class=HTMLResponse)
    def tag(tag: str) -> HTMLResponse:
        return render(
            "post_list.html",
            f"Posts tagged with {tag}",
            heading=f"Posts tagged with {tag}",
            posts=store.list_posts_by_tag(tag),
        )

    @app.get("/author/{author:path}", response_class=HTMLResponse)
    def author(author: str) -> HTMLResponse:
        return render(
            "post_list.html",
            f"Posts by {author}",
            heading=f"Posts by {author}",
            posts=store.list_posts_by_author(author),
        )

    @app.get("/post/{post_id:path}", response_class=HTMLResponse)
    def post(post_id: str) -> HTMLResponse:
        if (record := store.get_post(post_id)) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return render("post.html", record.title, post=record)

    @app.get("/page/{page_id:path}", response_class=HTMLResponse)
    def page(page_id: str) -> HTMLResponse:
        if (record := store.get_page(page_id)) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return render("page.html", record.title, page=record, page_id=record.id)

    @app.get("/rss.xml")
    def rss(request: Request) -> Response:
        content = render_feed(
            env, store.list_posts(), config.blog_name, str(request.base_url)
        )
        return Response(content=content, media_type=FEED_CONTENT_TYPE)

    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        return {
            "state": state() if state else "Unknown",
            "posts": store.post_count(),
            "pages": store.page_count(),
        }

    return app
