"""Module for in memory blog content store."""

from collections.abc import Iterable
import logging

from bloggernetes.manifest import BlogPage, BlogPost

from .rwlock import ReadWriteLock
from .store import Store

_LOGGER = logging.getLogger(__name__)


def _sort_posts(posts: Iterable[BlogPost]) -> list[BlogPost]:
    """Sort posts newest first; sorted() is stable so ties keep their order."""
    return sorted(posts, key=lambda post: post.authored_date, reverse=True)


class InMemoryStore(Store):
    """In-memory implementation of the Store interface.

    Posts and pages are kept in dicts keyed by id and guarded by a reader/writer
    lock. Derived views (by tag, by author) are computed on every query.
    Listings copy references while holding the shared lock and sort after
    releasing it, so callers never hold the lock while iterating.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryStore."""
        self._lock = ReadWriteLock()
        self._posts: dict[str, BlogPost] = {}
        self._pages: dict[str, BlogPage] = {}

    def upsert_post(self, post: BlogPost) -> None:
        """Insert a post, replacing any existing post with the same id."""
        with self._lock.write():
            self._posts[post.id] = post
        _LOGGER.debug("Stored post %s", post.id)

    def delete_post(self, post_id: str) -> None:
        """Remove the post with the given id, if present."""
        with self._lock.write():
            removed = self._posts.pop(post_id, None)
        if removed is None:
            _LOGGER.debug("Post %s not in store, nothing to delete", post_id)

    def get_post(self, post_id: str) -> BlogPost | None:
        """Retrieve a post by id."""
        with self._lock.read():
            return self._posts.get(post_id)

    def list_posts(self) -> list[BlogPost]:
        """Return all posts, newest authored date first."""
        with self._lock.read():
            posts = list(self._posts.values())
        return _sort_posts(posts)

    def list_posts_by_tag(self, tag: str) -> list[BlogPost]:
        """Return posts carrying the tag, newest authored date first."""
        with self._lock.read():
            posts = [post for post in self._posts.values() if tag in post.tags]
        return _sort_posts(posts)

    def list_posts_by_author(self, author: str) -> list[BlogPost]:
        """Return posts by the author, newest authored date first."""
        with self._lock.read():
            posts = [post for post in self._posts.values() if post.author == author]
        return _sort_posts(posts)

    def list_tags(self) -> list[str]:
        """Return the distinct tags across all posts, in no particular order."""
        with self._lock.read():
            posts = list(self._posts.values())
        return list({tag for post in posts for tag in post.tags})

    def list_authors(self) -> list[str]:
        """Return the distinct authors across all posts, in no particular order."""
        with self._lock.read():
            posts = list(self._posts.values())
        return list({post.author for post in posts})

    def post_count(self) -> int:
        with self._lock.read():
            return len(self._posts)

    def upsert_page(self, page: BlogPage) -> None:
        """Insert a page, replacing any existing page with the same id."""
        with self._lock.write():
            self._pages[page.id] = page
        _LOGGER.debug("Stored page %s", page.id)

    def delete_page(self, page_id: str) -> None:
        """Remove the page with the given id, if present."""
        with self._lock.write():
            removed = self._pages.pop(page_id, None)
        if removed is None:
            _LOGGER.debug("Page %s not in store, nothing to delete", page_id)

    def get_page(self, page_id: str) -> BlogPage | None:
        """Retrieve a page by id."""
        with self._lock.read():
            return self._pages.get(page_id)

    def list_pages(self) -> list[BlogPage]:
        """Return all pages in ascending display order."""
        with self._lock.read():
            pages = list(self._pages.values())
        return sorted(pages, key=lambda page: page.order)

    def page_count(self) -> int:
        with self._lock.read():
            return len(self._pages)
