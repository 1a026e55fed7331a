"""ZeroMQ transport backend."""

from .stream import StreamTransport
