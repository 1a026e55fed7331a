""" Runtime settings for sqs client sessions. The broker address, port and
    queue name are supplied by the application at :func:`connect` time; the
    settings here govern how the connection behaves once it exists.
"""

import os

from dataclasses import dataclass, replace
from typing import Optional


MEBIBYTE = 1024 * 1024

transports = ('tcp', 'zmq')


@dataclass(frozen=True)
class Settings:
    """ Connection behavior for a :class:`sqs.session.Session`.

        :ivar connect_timeout: Seconds to wait for the socket to open.
        :ivar io_timeout: Seconds to wait for any single write, or for the
            broker's response to a command.
        :ivar receive_timeout: Seconds a consumer waits for the broker to
            hand over a message; None waits indefinitely.
        :ivar max_response_size: Upper bound, in bytes, on a single response
            from the broker. Larger responses are a fatal error.
        :ivar transport: Name of the transport backend, 'tcp' or 'zmq'.
        :ivar encoding: Character encoding used on the wire.
    """

    connect_timeout: Optional[float] = 10.0
    io_timeout: Optional[float] = 30.0
    receive_timeout: Optional[float] = None
    max_response_size: int = 16 * MEBIBYTE
    transport: str = 'tcp'
    encoding: str = 'utf-8'

    def __post_init__(self):

        if self.transport not in transports:
            raise ValueError('unknown transport backend: ' + repr(self.transport))

        if self.max_response_size <= 0:
            raise ValueError('max_response_size must be positive')

        for name in ('connect_timeout', 'io_timeout', 'receive_timeout'):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(name + ' must be positive or None')


    def with_overrides(self, **changes):
        return replace(self, **changes)


    @classmethod
    def from_environment(cls, environ=None):
        """ Build a :class:`Settings` instance, overriding the defaults with
            any SQS_* variables present in *environ* (``os.environ`` if not
            specified). A timeout variable set to 'none' disables that
            timeout.
        """

        if environ is None:
            environ = os.environ

        changes = dict()

        for name in ('connect_timeout', 'io_timeout', 'receive_timeout'):
            raw = environ.get('SQS_' + name.upper())
            if raw is not None:
                changes[name] = _parse_timeout(name, raw)

        raw = environ.get('SQS_MAX_RESPONSE_SIZE')
        if raw is not None:
            try:
                changes['max_response_size'] = int(raw)
            except ValueError:
                raise ValueError('SQS_MAX_RESPONSE_SIZE is not an integer: ' + repr(raw))

        raw = environ.get('SQS_TRANSPORT')
        if raw is not None:
            changes['transport'] = raw.strip().lower()

        return cls(**changes)



def _parse_timeout(name, raw):

    raw = raw.strip()
    if raw.lower() == 'none':
        return None

    try:
        return float(raw)
    except ValueError:
        raise ValueError('SQS_%s is not a number: %r' % (name.upper(), raw))


default = Settings()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
