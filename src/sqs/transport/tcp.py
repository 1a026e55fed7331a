"""Blocking TCP socket transport.

Every operation carries its own timeout; a timed-out or failed operation is
fatal for the transport, the session above it decides what state that
leaves the connection in.
"""

from __future__ import annotations

import logging
import socket
import threading
from typing import Optional

from .base import Transport, TransportConnectionError, TransportTimeout

logger = logging.getLogger(__name__)

RECV_BUFFER = 65536


class TcpTransport(Transport):
    """Talk to the broker over a plain TCP socket."""

    def __init__(self, max_response_size: int):
        super().__init__(max_response_size)
        self.socket: Optional[socket.socket] = None
        self.address: Optional[str] = None
        self._interrupted = threading.Event()

    @property
    def is_open(self) -> bool:
        return self.socket is not None and not self._interrupted.is_set()

    def open(self, host: str, port: int, timeout: Optional[float] = None) -> None:
        self.address = f"{host}:{port}"
        self._interrupted.clear()

        try:
            sock = socket.create_connection((host, int(port)), timeout=timeout)
        except socket.timeout as e:
            raise TransportTimeout(f"{self.address}: no connection in {timeout} sec") from e
        except OSError as e:
            raise TransportConnectionError(f"{self.address}: {e}") from e

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self.socket = sock
        logger.debug("connected to %s", self.address)

    def close(self) -> None:
        sock = self.socket
        self.socket = None
        if sock is None:
            return

        try:
            sock.close()
        except OSError as e:
            logger.debug("%s: error closing socket: %s", self.address, e)

    def interrupt(self) -> None:
        self._interrupted.set()
        sock = self.socket
        if sock is None:
            return

        # shutdown() wakes up a recv() blocked in another thread; close()
        # alone does not.
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug("%s: error shutting down socket: %s", self.address, e)

    def _require_socket(self) -> socket.socket:
        sock = self.socket
        if sock is None or self._interrupted.is_set():
            raise TransportConnectionError(f"{self.address}: connection is closed")
        return sock

    def send(self, data: bytes, timeout: Optional[float] = None) -> None:
        sock = self._require_socket()
        try:
            sock.settimeout(timeout)
            sock.sendall(data)
        except socket.timeout as e:
            raise TransportTimeout(f"{self.address}: write not completed in {timeout} sec") from e
        except OSError as e:
            raise TransportConnectionError(f"{self.address}: write failed: {e}") from e

    def _recv_chunk(self, timeout: Optional[float]) -> bytes:
        sock = self._require_socket()
        try:
            sock.settimeout(timeout)
            chunk = sock.recv(RECV_BUFFER)
        except socket.timeout as e:
            raise TransportTimeout(f"{self.address}: no response in {timeout} sec") from e
        except OSError as e:
            raise TransportConnectionError(f"{self.address}: read failed: {e}") from e

        if not chunk:
            if self._interrupted.is_set():
                raise TransportConnectionError(f"{self.address}: connection interrupted")
            raise TransportConnectionError(f"{self.address}: connection closed by the broker")
        return chunk
