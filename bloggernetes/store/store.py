"""Store module for holding the mirrored blog content."""

from abc import ABC, abstractmethod

from bloggernetes.manifest import BlogPage, BlogPost


class Store(ABC):
    """Abstract base class for the index of posts and pages.

    Every operation is total: deleting a missing id is a no-op and looking up
    a missing id returns None.
    """

    @abstractmethod
    def upsert_post(self, post: BlogPost) -> None:
        """Insert a post, replacing any existing post with the same id."""

    @abstractmethod
    def delete_post(self, post_id: str) -> None:
        """Remove the post with the given id, if present."""

    @abstractmethod
    def get_post(self, post_id: str) -> BlogPost | None:
        """Retrieve a post by id."""

    @abstractmethod
    def list_posts(self) -> list[BlogPost]:
        """Return all posts, newest authored date first."""

    @abstractmethod
    def list_posts_by_tag(self, tag: str) -> list[BlogPost]:
        """Return posts carrying the tag, newest authored date first."""

    @abstractmethod
    def list_posts_by_author(self, author: str) -> list[BlogPost]:
        """Return posts by the author, newest authored date first."""

    @abstractmethod
    def list_tags(self) -> list[str]:
        """Return the distinct tags across all posts, in no particular order."""

    @abstractmethod
    def list_authors(self) -> list[str]:
        """Return the distinct authors across all posts, in no particular order."""

    @abstractmethod
    def post_count(self) -> int:
        """Return the number of posts."""

    @abstractmethod
    def upsert_page(self, page: BlogPage) -> None:
        """Insert a page, replacing any existing page with the same id."""

    @abstractmethod
    def delete_page(self, page_id: str) -> None:
        """Remove the page with the given id, if present."""

    @abstractmethod
    def get_page(self, page_id: str) -> BlogPage | None:
        """Retrieve a page by id."""

    @abstractmethod
    def list_pages(self) -> list[BlogPage]:
        """Return all pages in ascending display order."""

    @abstractmethod
    def page_count(self) -> int:
        """Return the number of pages."""
