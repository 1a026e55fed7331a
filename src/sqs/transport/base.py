"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`sqs.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Optional

from ..errors import SqsConnectionError


# Transport agnostic exceptions

class TransportError(SqsConnectionError):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A connect, read or write did not complete in time."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class ResponseTooLarge(TransportError):
    """The broker sent more than the configured response ceiling."""


class Transport(ABC):
    """Minimal contract for a byte-stream transport to the broker.

    Subclasses move bytes; the framing of one logical response is shared
    and lives in :meth:`read_response`.
    """

    def __init__(self, max_response_size: int):
        self.max_response_size = max_response_size

    @abstractmethod
    def open(self, host: str, port: int, timeout: Optional[float] = None) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def interrupt(self) -> None:
        """Unblock any in-flight read; the transport is unusable afterwards.

        Safe to call from a thread other than the one blocked in a read.
        """

    @abstractmethod
    def send(self, data: bytes, timeout: Optional[float] = None) -> None:
        """Write all of *data*, blocking until it is written."""

    @abstractmethod
    def _recv_chunk(self, timeout: Optional[float]) -> bytes:
        """Return the next chunk of bytes from the peer.

        Raises TransportConnectionError if the peer closed the connection.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def read_response(self, timeout: Optional[float] = None) -> bytes:
        """Read one logical response.

        A response is everything received until the buffered bytes end with
        a line feed; chunks are only accumulated to tolerate segmentation of
        a single reply. The total is bounded by ``max_response_size``.
        """

        deadline = None if timeout is None else time.monotonic() + timeout
        buffer = bytearray()

        while True:
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TransportTimeout(f"no complete response in {timeout:.2f} sec")

            chunk = self._recv_chunk(remaining)
            buffer.extend(chunk)

            if len(buffer) > self.max_response_size:
                raise ResponseTooLarge(
                    f"response exceeds {self.max_response_size} bytes"
                )

            if buffer.endswith(b"\n") and buffer.strip():
                return bytes(buffer)

            # A lone line terminator is not a response.
            if not buffer.strip():
                buffer.clear()
