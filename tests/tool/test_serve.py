"""Tests for the serve command."""

from pathlib import Path

import pytest

from bloggernetes.tool.bloggernetes import main

from ..fakes import fake_kubectl


def test_serve_fails_without_resources(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that serve exits when the cluster cannot be listed."""
    kubectl = fake_kubectl(tmp_path, {})
    with pytest.raises(SystemExit) as exc_info:
        main(
            [
                "serve",
                "--kubectl",
                str(kubectl),
                "--host",
                "127.0.0.1",
                "--port",
                "0",
                "--shutdown-grace",
                "1",
            ]
        )
    assert exc_info.value.code == 1
    assert "Failed to sync watches" in capsys.readouterr().err


def test_serve_help(capsys: pytest.CaptureFixture[str]) -> None:
    """Test the flags accepted by serve."""
    with pytest.raises(SystemExit):
        main(["serve", "--help"])
    out = capsys.readouterr().out
    for flag in ("--namespace", "--kubeconfig", "--port", "--blog-name"):
        assert flag in out
