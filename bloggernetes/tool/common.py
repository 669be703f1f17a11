"""Flags and wiring shared by the bloggernetes actions."""

from argparse import ArgumentParser
import os
from pathlib import Path

from bloggernetes.config import (
    ControllerConfig,
    KubectlConfig,
    default_namespace,
)
from bloggernetes.controller import Controller
from bloggernetes.manifest import BLOG_PAGE_RESOURCE, BLOG_POST_RESOURCE
from bloggernetes.store import Store
from bloggernetes.watch import KubectlTransport

SERVICE_ACCOUNT_TOKEN = Path("/var/run/secrets/kubernetes.io/serviceaccount/token")


def is_running_in_cluster() -> bool:
    """Return True if running in a pod with a service account."""
    return SERVICE_ACCOUNT_TOKEN.exists()


def add_cluster_flags(args: ArgumentParser) -> None:
    """Add flags for selecting the cluster and namespace to watch."""
    args.add_argument(
        "--namespace",
        "-n",
        default=default_namespace(),
        help="Namespace to watch for BlogPost and BlogPage resources",
    )
    args.add_argument(
        "--kubeconfig",
        default=os.environ.get("KUBECONFIG"),
        help="Path to kubeconfig file (ignored when running in-cluster)",
    )
    args.add_argument(
        "--context",
        default=None,
        help="Kubernetes context to use (ignored when running in-cluster)",
    )
    args.add_argument(
        "--kubectl",
        default="kubectl",
        help="Path to the kubectl binary",
    )
    args.add_argument(
        "--sync-timeout",
        type=float,
        default=ControllerConfig.sync_timeout,
        help="Seconds to wait for the initial listing of resources",
    )


def build_controller(
    store: Store,
    namespace: str,
    kubeconfig: str | None,
    context: str | None,
    kubectl: str,
    sync_timeout: float,
    shutdown_grace: float = ControllerConfig.shutdown_grace,
) -> Controller:
    """Create a controller watching the cluster with kubectl."""
    if is_running_in_cluster():
        # kubectl picks up the service account on its own
        kubectl_config = KubectlConfig(kubectl_bin=kubectl)
    else:
        kubectl_config = KubectlConfig(
            kubectl_bin=kubectl, kubeconfig=kubeconfig, context=context
        )
    return Controller(
        store,
        KubectlTransport(BLOG_POST_RESOURCE, namespace, kubectl_config),
        KubectlTransport(BLOG_PAGE_RESOURCE, namespace, kubectl_config),
        ControllerConfig(
            namespace=namespace,
            sync_timeout=sync_timeout,
            shutdown_grace=shutdown_grace,
        ),
    )
