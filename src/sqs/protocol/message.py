""" Representations of a queued message and of the session states and roles
    that frame its exchange with the broker.
"""

import enum

from datetime import datetime, timezone

from ..errors import InvalidMessage
from . import fields


class ConnectionState(enum.Enum):
    """ The four states a :class:`sqs.session.Session` moves through. Only
        CONNECTED_AFTER_CONFIG permits sending or receiving messages.
    """

    NOT_WANTING_CONNECTION = 'NOT_WANTING_CONNECTION'
    NOT_CONNECTED = 'NOT_CONNECTED'
    CONNECTED_BEFORE_CONFIG = 'CONNECTED_BEFORE_CONFIG'
    CONNECTED_AFTER_CONFIG = 'CONNECTED_AFTER_CONFIG'


class Role(enum.Enum):
    PRODUCER = 'PRODUCER'
    CONSUMER = 'CONSUMER'


class Message:
    """ The :class:`Message` is the generic envelope exchanged with the
        broker: a *body*, whose type is bound to whichever body codec will
        encode it, plus at most one delivery timing directive.

        *deliver_at* is an absolute :class:`datetime.datetime`; a naive
        datetime is interpreted as local time. *deliver_after* is a relative
        delay in integer milliseconds. The two are mutually exclusive;
        setting neither is allowed here, but such a message cannot be sent.

        Messages returned by a consumer never carry timing information, the
        broker does not echo it back.
    """

    def __init__(self, body=None, deliver_at=None, deliver_after=None):

        if deliver_at is not None and deliver_after is not None:
            raise InvalidMessage('deliver_at and deliver_after are mutually exclusive')

        if deliver_at is not None and not isinstance(deliver_at, datetime):
            raise InvalidMessage('deliver_at must be a datetime, not ' + type(deliver_at).__name__)

        if deliver_after is not None:
            if isinstance(deliver_after, bool) or not isinstance(deliver_after, int):
                raise InvalidMessage('deliver_after must be an integer number of milliseconds')
            if deliver_after < 0:
                raise InvalidMessage('deliver_after cannot be negative')

        self.body = body
        self.deliver_at = deliver_at
        self.deliver_after = deliver_after


    def __repr__(self):
        return 'Message(body=%r, deliver_at=%r, deliver_after=%r)' % (
            self.body, self.deliver_at, self.deliver_after)


    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return (self.body, self.deliver_at, self.deliver_after) == \
               (other.body, other.deliver_at, other.deliver_after)


    @property
    def has_timing(self):
        return self.deliver_at is not None or self.deliver_after is not None


    def deliver_directive(self):
        """ Return the (key, value) pair for the metadata section's SET
            directive. A relative delay takes precedence; an absolute instant
            is rendered as an ISO-8601 UTC timestamp with a 'Z' suffix.
        """

        if self.deliver_after is not None:
            return fields.DELIVER_TIMESTAMP, str(self.deliver_after)

        if self.deliver_at is not None:
            return fields.DELIVER_DATE, format_instant(self.deliver_at)

        raise InvalidMessage('a message needs deliver_at or deliver_after to be sent')



def format_instant(moment):
    """ Render *moment* as an ISO-8601 instant in UTC, for example
        '2024-05-01T10:00:00Z' or '2024-05-01T10:00:00.250Z'.
    """

    moment = moment.astimezone(timezone.utc)

    if moment.microsecond:
        text = moment.isoformat(timespec='milliseconds')
    else:
        text = moment.isoformat(timespec='seconds')

    return text.replace('+00:00', 'Z')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
