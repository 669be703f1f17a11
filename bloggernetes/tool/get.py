"""Bloggernetes get action."""

import logging
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import sys
from typing import Any, cast

from bloggernetes.store import InMemoryStore, Store

from . import common
from .format import formatter

_LOGGER = logging.getLogger(__name__)

POST_COLUMNS = ["id", "title", "author", "authoredDate", "tags"]
PAGE_COLUMNS = ["id", "title", "order"]


def _rows(store: Store, resource: str) -> tuple[list[dict[str, Any]], list[str]]:
    if resource == "posts":
        return [post.to_dict() for post in store.list_posts()], POST_COLUMNS
    if resource == "pages":
        return [page.to_dict() for page in store.list_pages()], PAGE_COLUMNS
    if resource == "tags":
        return [{"tag": tag} for tag in sorted(store.list_tags())], ["tag"]
    authors = sorted(author for author in store.list_authors() if author)
    return [{"author": author} for author in authors], ["author"]


class GetAction:
    """Get blog content currently declared in the cluster."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "get",
                help="Print blog content from the cluster",
                description="List BlogPost and BlogPage resources once and print them",
            ),
        )
        args.add_argument(
            "resource",
            choices=["posts", "pages", "tags", "authors"],
            help="What to print",
        )
        args.add_argument(
            "--output",
            "-o",
            choices=["table", "yaml", "json"],
            default="table",
            help="Output format of the command",
        )
        common.add_cluster_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        resource: str,
        output: str,
        namespace: str,
        kubeconfig: str | None,
        context: str | None,
        kubectl: str,
        sync_timeout: float,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = InMemoryStore()
        controller = common.build_controller(
            store, namespace, kubeconfig, context, kubectl, sync_timeout
        )
        await controller.start()
        await controller.close()

        data, keys = _rows(store, resource)
        if not data and output == "table":
            print(f"No {resource} found in namespace {namespace}", file=sys.stderr)
            return
        formatter(output, keys).print(data)
