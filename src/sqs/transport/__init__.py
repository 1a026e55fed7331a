"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    ResponseTooLarge,
)


def create(settings) -> Transport:
    """Return a new, unopened transport for the backend named in *settings*."""

    backend = settings.transport

    if backend == "tcp":
        from .tcp import TcpTransport
        return TcpTransport(settings.max_response_size)
    elif backend == "zmq":
        from .zmq import StreamTransport
        return StreamTransport(settings.max_response_size)
    else:
        raise ValueError(f"unknown transport backend: {backend!r}")
