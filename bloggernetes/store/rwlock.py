"""Reader/writer lock shared by threads and the event loop."""

from collections.abc import Generator
import contextlib
import threading

__all__ = ["ReadWriteLock"]


class ReadWriteLock:
    """A lock allowing many concurrent readers or a single writer.

    Waiting writers are preferred over new readers so that a steady stream of
    readers cannot starve updates. The lock is not reentrant.
    """

    def __init__(self) -> None:
        """Initialize the ReadWriteLock."""
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextlib.contextmanager
    def read(self) -> Generator[None, None, None]:
        """Hold the lock shared for the duration of the context."""
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextlib.contextmanager
    def write(self) -> Generator[None, None, None]:
        """Hold the lock exclusively for the duration of the context."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            except BaseException:
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()
