"""Bloggernetes serve action."""

import asyncio
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import signal
from typing import cast

import uvicorn

from bloggernetes.config import ControllerConfig, ServerConfig, default_blog_name
from bloggernetes.server import create_app
from bloggernetes.store import InMemoryStore
from bloggernetes.task import get_task_service

from . import common

_LOGGER = logging.getLogger(__name__)


class ServeAction:
    """Mirror blog content from the cluster and serve it over HTTP."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "serve",
                help="Watch the cluster and serve the blog",
                description=(
                    "Watch BlogPost and BlogPage resources and serve them as a "
                    "web site with an RSS feed"
                ),
            ),
        )
        common.add_cluster_flags(args)
        args.add_argument(
            "--host", default=ServerConfig.host, help="Address to listen on"
        )
        args.add_argument(
            "--port", type=int, default=ServerConfig.port, help="Port to listen on"
        )
        args.add_argument(
            "--blog-name", default=default_blog_name(), help="Name of the blog"
        )
        args.add_argument(
            "--shutdown-grace",
            type=float,
            default=ControllerConfig.shutdown_grace,
            help="Seconds allowed for in-flight work to finish on shutdown",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        namespace: str,
        kubeconfig: str | None,
        context: str | None,
        kubectl: str,
        sync_timeout: float,
        host: str,
        port: int,
        blog_name: str,
        shutdown_grace: float,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = InMemoryStore()
        controller = common.build_controller(
            store,
            namespace,
            kubeconfig,
            context,
            kubectl,
            sync_timeout,
            shutdown_grace,
        )
        config = ServerConfig(host=host, port=port, blog_name=blog_name)
        app = create_app(store, config, state=lambda: controller.state)
        server = uvicorn.Server(
            uvicorn.Config(app, host=config.host, port=config.port, log_config=None)
        )

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

        task_service = get_task_service()
        controller_task = task_service.create_background_task(
            controller.run(), name="controller"
        )
        server_task = task_service.create_background_task(
            server.serve(), name="server"
        )
        stop_task = asyncio.ensure_future(stop.wait())
        _LOGGER.info("Starting server on %s:%s", config.host, config.port)

        await asyncio.wait(
            [controller_task, server_task, stop_task],
            return_when=asyncio.FIRST_COMPLETED,
        )
        _LOGGER.info("Shutting down gracefully...")
        stop_task.cancel()
        server.should_exit = True
        await controller.close()
        await asyncio.wait([server_task], timeout=shutdown_grace)
        await task_service.cancel_background(shutdown_grace)
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)

        if (
            controller_task.done()
            and not controller_task.cancelled()
            and (err := controller_task.exception()) is not None
        ):
            raise err
