"""Library for issuing commands using asyncio and returning the result."""

import asyncio
from collections.abc import AsyncGenerator
import contextlib
from dataclasses import dataclass
import logging
import os
import shlex
import subprocess

from .exceptions import CommandException

_LOGGER = logging.getLogger(__name__)

_TIMEOUT = 60.0

# Custom resources can carry whole articles on a single line of JSON
_STREAM_LINE_LIMIT = 16 * 1024 * 1024


# No public API
__all__: list[str] = []


@dataclass
class Command:
    """An instance of a command to run."""

    cmd: list[str]
    """Array of command line arguments."""

    exc: type[CommandException] = CommandException
    """Exception to throw in case of an error."""

    env: dict[str, str] | None = None
    """Environment variables for the subprocess."""

    @property
    def string(self) -> str:
        """Render the command as a single string."""
        return " ".join([shlex.quote(arg) for arg in self.cmd])

    def __str__(self) -> str:
        """Render as a debug string."""
        return self.string

    def _env(self) -> dict[str, str]:
        return {
            **os.environ,
            **(self.env if self.env else {}),
        }

    async def run(self) -> bytes:
        """Run the command, returning stdout."""
        _LOGGER.debug("Running command: %s", self)
        proc = await asyncio.create_subprocess_shell(
            self.string,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=self._env(),
        )
        out, err = await proc.communicate()
        if proc.returncode:
            raise self.exc(self._failure_message(proc.returncode, out, err))
        return out

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Run a long lived command, yielding each line of stdout.

        The process is killed if the consumer stops iterating. A non-zero exit
        raises once the output is exhausted.
        """
        _LOGGER.debug("Streaming command: %s", self)
        proc = await asyncio.create_subprocess_shell(
            self.string,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=self._env(),
            limit=_STREAM_LINE_LIMIT,
        )
        assert proc.stdout is not None
        assert proc.stderr is not None
        try:
            while line := await proc.stdout.readline():
                yield line
            err = await proc.stderr.read()
            await proc.wait()
        finally:
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()
        if proc.returncode:
            raise self.exc(self._failure_message(proc.returncode, b"", err))

    def _failure_message(self, returncode: int, out: bytes, err: bytes) -> str:
        errors = [f"Command '{self}' failed with return code {returncode}"]
        if out:
            errors.append(out.decode("utf-8"))
        if err:
            errors.append(err.decode("utf-8"))
        _LOGGER.debug("\n".join(errors))
        return "\n".join(errors)


async def run(cmd: Command, timeout: float = _TIMEOUT) -> str:
    """Run the specified command and return stdout."""
    try:
        out = await asyncio.wait_for(cmd.run(), timeout)
    except asyncio.TimeoutError as err:
        raise cmd.exc(f"Command '{cmd}' timed out") from err
    return out.decode("utf-8")
