"""Command line tool for mirroring and serving a Kubernetes-native blog."""

import argparse
import asyncio
import logging
import sys
import traceback

from bloggernetes.exceptions import BloggernetesException
from . import get, serve

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve BlogPost and BlogPage resources from a Kubernetes cluster.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    serve.ServeAction.register(subparsers)
    get.GetAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Bloggernetes command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except BloggernetesException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("bloggernetes error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
