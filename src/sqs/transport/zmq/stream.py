"""ZeroMQ STREAM transport.

A ZMQ_STREAM socket speaks raw TCP to a non-ZeroMQ peer. Every message on
the socket is two frames: the routing id of the peer connection, then the
data. A zero-length data frame is a connect (or disconnect) notification.

ZeroMQ sockets are not thread-safe, so :meth:`interrupt` never touches the
socket; reads poll in short slices and notice the interruption instead.
"""

from __future__ import annotations

import atexit
import logging
import threading
import time
from typing import Optional

import zmq

from ..base import Transport, TransportConnectionError, TransportTimeout

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()

# Seconds between checks for interruption while waiting on the socket.
poll_slice = 0.05


class StreamTransport(Transport):
    """Talk to the broker through a ZeroMQ STREAM socket."""

    def __init__(self, max_response_size: int):
        super().__init__(max_response_size)
        self.socket: Optional[zmq.Socket] = None
        self.routing_id: Optional[bytes] = None
        self.address: Optional[str] = None
        self._interrupted = threading.Event()

    @property
    def is_open(self) -> bool:
        return (
            self.socket is not None
            and self.routing_id is not None
            and not self._interrupted.is_set()
        )

    def open(self, host: str, port: int, timeout: Optional[float] = None) -> None:
        self.address = f"{host}:{port}"
        self._interrupted.clear()

        sock = zmq_context.socket(zmq.STREAM)
        sock.setsockopt(zmq.LINGER, 0)

        try:
            sock.connect(f"tcp://{host}:{int(port)}")
        except zmq.ZMQError as e:
            sock.close()
            raise TransportConnectionError(f"{self.address}: {e}") from e

        self.socket = sock

        # ZeroMQ keeps retrying a refused connection in the background; the
        # only failure we can observe is the missing notification.
        try:
            frames = self._poll_recv(timeout)
        except TransportTimeout as e:
            self.close()
            raise TransportTimeout(f"{self.address}: no connection in {timeout} sec") from e
        except TransportConnectionError:
            self.close()
            raise

        self.routing_id = frames[0]
        logger.debug("connected to %s", self.address)

    def close(self) -> None:
        sock = self.socket
        routing_id = self.routing_id
        self.socket = None
        self.routing_id = None
        if sock is None:
            return

        # Sending an empty data frame to the peer closes the TCP connection.
        if routing_id is not None:
            try:
                sock.send_multipart((routing_id, b""), flags=zmq.NOBLOCK)
            except zmq.ZMQError as e:
                logger.debug("%s: error disconnecting: %s", self.address, e)

        sock.close(linger=0)

    def interrupt(self) -> None:
        self._interrupted.set()

    def send(self, data: bytes, timeout: Optional[float] = None) -> None:
        if not self.is_open:
            raise TransportConnectionError(f"{self.address}: connection is closed")

        milliseconds = -1 if timeout is None else max(1, int(timeout * 1000))
        try:
            self.socket.setsockopt(zmq.SNDTIMEO, milliseconds)
            self.socket.send_multipart((self.routing_id, data))
        except zmq.Again as e:
            raise TransportTimeout(f"{self.address}: write not completed in {timeout} sec") from e
        except zmq.ZMQError as e:
            raise TransportConnectionError(f"{self.address}: write failed: {e}") from e

    def _recv_chunk(self, timeout: Optional[float]) -> bytes:
        if not self.is_open:
            raise TransportConnectionError(f"{self.address}: connection is closed")

        routing_id, data = self._poll_recv(timeout)
        if data == b"":
            raise TransportConnectionError(f"{self.address}: connection closed by the broker")
        if routing_id != self.routing_id:
            raise TransportConnectionError(f"{self.address}: data from an unknown peer")
        return data

    def _poll_recv(self, timeout: Optional[float]):
        deadline = None if timeout is None else time.monotonic() + timeout
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)

        while True:
            if self._interrupted.is_set():
                raise TransportConnectionError(f"{self.address}: connection interrupted")

            wait = poll_slice
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TransportTimeout(f"{self.address}: no response in {timeout} sec")
                wait = min(wait, remaining)

            try:
                events = dict(poller.poll(int(wait * 1000)))
                if self.socket in events:
                    frames = self.socket.recv_multipart(zmq.NOBLOCK)
                    break
            except zmq.Again:
                continue
            except zmq.ZMQError as e:
                raise TransportConnectionError(f"{self.address}: read failed: {e}") from e

        if len(frames) != 2:
            raise TransportConnectionError(f"{self.address}: malformed STREAM message ({len(frames)} frames)")
        return frames


def _cleanup() -> None:
    try:
        zmq_context.destroy(linger=0)
    except zmq.ZMQError as e:
        logger.debug("error destroying the ZeroMQ context: %s", e)


atexit.register(_cleanup)
