"""Configuration objects for bloggernetes."""

from dataclasses import dataclass
import os

from .manifest import DEFAULT_NAMESPACE

NAMESPACE_ENV = "BLOGGERNETES_NAMESPACE"
BLOG_NAME_ENV = "BLOGGERNETES_BLOG_NAME"


def default_namespace() -> str:
    """Namespace to watch when none is given on the command line."""
    return os.environ.get(NAMESPACE_ENV, DEFAULT_NAMESPACE)


def default_blog_name() -> str:
    """Blog name to use when none is given on the command line."""
    return os.environ.get(BLOG_NAME_ENV, "Bloggernetes")


@dataclass
class KubectlConfig:
    """Configuration for reaching the cluster with kubectl."""

    kubectl_bin: str = "kubectl"
    kubeconfig: str | None = None
    context: str | None = None

    def global_flags(self) -> list[str]:
        """Flags passed to every kubectl invocation."""
        flags: list[str] = []
        if self.kubeconfig:
            flags.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            flags.extend(["--context", self.context])
        return flags


@dataclass
class ControllerConfig:
    """Configuration for the Controller."""

    namespace: str = DEFAULT_NAMESPACE

    sync_timeout: float = 60.0
    """Seconds to wait for the initial listing of each resource."""

    shutdown_grace: float = 5.0
    """Seconds allowed for watch workers to finish after cancellation."""


@dataclass
class ServerConfig:
    """Configuration for the web server."""

    host: str = "0.0.0.0"
    port: int = 8080
    blog_name: str = "Bloggernetes"
