""" Producers put messages on a queue. Sending a message is two sections
    on the wire: a metadata section carrying the delivery timing directive,
    then a payload section carrying the encoded body.
"""

import logging

from . import client
from .errors import InvalidMessage
from .protocol import fields
from .protocol import wire
from .protocol.codec import Codecs, describe, encode_body
from .protocol.message import Message, Role

logger = logging.getLogger(__name__)


class Producer(client.Client):
    """ Send messages to a queue. See :class:`sqs.client.Client` for the
        constructor arguments.
    """

    role = Role.PRODUCER

    def send_message(self, message, codec=None):
        """ Send a single :class:`sqs.protocol.message.Message`, blocking
            until the broker has accepted it. The body is encoded with
            *codec*, or with this producer's default codec.

            The message must carry exactly one of *deliver_at* or
            *deliver_after*; a message with neither is rejected before
            anything is written. Any failure of the codec is raised as
            :class:`sqs.errors.EncodingError`, also before anything is
            written. A protocol violation by the broker raises
            :class:`sqs.errors.UnexpectedResponse` and is not retried.
        """

        if not isinstance(message, Message):
            raise InvalidMessage('expected a Message, not ' + type(message).__name__)

        if codec is None:
            codec = self.codec
        else:
            codec = Codecs.resolve(codec)

        if not message.has_timing:
            raise InvalidMessage('a message needs deliver_at or deliver_after to be sent')

        key, value = message.deliver_directive()
        directive = wire.set_directive(key, value)

        # A body that fails to encode writes nothing.
        payload = wire.encode_payload(encode_body(codec, message.body))

        with self.session.exchange(self.role, 'send_message') as session:
            session.write_line(fields.START_METADATA)
            session.expect_exact(fields.OK)
            session.write_line(directive)
            session.expect_contains(fields.OK_WITH_VALUE)
            session.write_line(fields.END_METADATA)
            session.expect_exact(fields.OK)

            session.write_line(fields.START_MESSAGE)
            session.expect_exact(fields.OK)
            logger.debug('-> <%s body, %d chars> %s', describe(codec), len(payload), fields.END_MESSAGE)
            session.write(payload)
            session.expect_exact(fields.OK)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
