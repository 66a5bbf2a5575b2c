"""
Durable consumers for the result and error streams.

Each sink is the single consumer of one asyncio.Queue. It drains the queue
until the dispatcher puts STREAM_CLOSED on it, writing every item to an
append-only file as it arrives.
"""

import asyncio
import json
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, TextIO

from tqdm import tqdm

from .exceptions import SinkOpenError
from .models import RequestResult


# Marks the end of a stream; put by the dispatcher once every execution finished
STREAM_CLOSED = object()


def rfc3339_now() -> str:
    """Current local time as an RFC 3339 timestamp with seconds precision."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


class BaseSink(ABC):
    """
    Abstract base class for stream sinks.

    Provides opening, closing and the drain loop; subclasses only format
    and write a single item.
    """

    kind = "output"

    def __init__(self, path: str):
        self.path = path
        self.written = 0
        self._file: Optional[TextIO] = None

    def open(self) -> "BaseSink":
        """Open the destination in append mode, creating it if needed."""
        if self._file is None:
            try:
                self._file = open(self.path, "a", encoding="utf-8")
            except OSError as exc:
                raise SinkOpenError(
                    f"Error opening {self.kind} file {self.path}",
                    path=self.path,
                    original_error=exc,
                ) from exc
        return self

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    @property
    def closed(self) -> bool:
        return self._file is None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @abstractmethod
    def format(self, item: Any) -> str:
        """Render one item as a single line, without the trailing newline."""
        pass

    def write(self, item: Any) -> None:
        if self._file is None:
            raise RuntimeError(f"{type(self).__name__} is not open")
        self._file.write(self.format(item) + "\n")
        self._file.flush()
        self.written += 1

    async def drain(self, queue: asyncio.Queue) -> int:
        """
        Consume the queue until STREAM_CLOSED.

        Returns:
            int: Number of items written by this drain
        """
        count = 0
        while True:
            item = await queue.get()
            try:
                if item is STREAM_CLOSED:
                    return count
                try:
                    self.write(item)
                    count += 1
                except Exception as e:
                    tqdm.write(f"Error writing {self.kind}: {e}", file=sys.stderr)
            finally:
                queue.task_done()


class ResultSink(BaseSink):
    """
    Writes one JSON object per line (JSON Lines), no enclosing array.

    Success records carry status, duration and response_length;
    failure records carry error only.
    """

    kind = "result"

    def format(self, item: RequestResult) -> str:
        return json.dumps(item.to_dict())


class ErrorSink(BaseSink):
    """Appends '<RFC3339 timestamp>: <message>' lines, stamped at write time."""

    kind = "error log"

    def format(self, item: str) -> str:
        return f"{rfc3339_now()}: {item}"
