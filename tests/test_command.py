"""Tests for command library."""

import contextlib

import pytest

from bloggernetes.command import Command, run
from bloggernetes.exceptions import CommandException, TransportFailure


async def test_command() -> None:
    """Test stdout parsing of a command."""
    result = await run(Command(["echo", "Hello"]))
    assert result == "Hello\n"


async def test_command_env() -> None:
    """Test passing extra environment variables to a command."""
    result = await run(
        Command(["sh", "-c", "echo $GREETING"], env={"GREETING": "Hi there"})
    )
    assert result == "Hi there\n"


async def test_failed_command() -> None:
    """Test a failing command."""
    with pytest.raises(CommandException, match="return code 1"):
        await run(Command(["/bin/false"]))


async def test_failed_command_custom_exception() -> None:
    """Test a failing command raising the configured exception."""
    cmd = Command(["sh", "-c", "echo oops >&2; exit 3"], exc=TransportFailure)
    with pytest.raises(TransportFailure, match="return code 3") as exc_info:
        await run(cmd)
    assert "oops" in str(exc_info.value)


async def test_command_timeout() -> None:
    """Test a command that does not finish in time."""
    with pytest.raises(CommandException, match="timed out"):
        await run(Command(["sleep", "5"]), timeout=0.1)


async def test_command_string() -> None:
    """Test the quoted rendering of a command."""
    cmd = Command(["kubectl", "get", "--raw", "/apis?watch=1&x=y"])
    assert str(cmd) == "kubectl get --raw '/apis?watch=1&x=y'"


async def test_stream() -> None:
    """Test streaming each line of output."""
    cmd = Command(["sh", "-c", "echo one; echo two; echo three"])
    lines = [line async for line in cmd.stream()]
    assert lines == [b"one\n", b"two\n", b"three\n"]


async def test_stream_failure_after_output() -> None:
    """Test that a non-zero exit raises once the output is consumed."""
    cmd = Command(["sh", "-c", "echo one; echo broken >&2; exit 2"])
    lines = []
    with pytest.raises(CommandException, match="broken"):
        async for line in cmd.stream():
            lines.append(line)
    assert lines == [b"one\n"]


async def test_stream_stops_early() -> None:
    """Test that the process is stopped when the consumer stops reading."""
    cmd = Command(["sh", "-c", "while true; do echo tick; sleep 0.01; done"])
    async with contextlib.aclosing(cmd.stream()) as lines:
        async for line in lines:
            assert line == b"tick\n"
            break
