""" Exceptions raised by the sqs client. Every exception carries a *kind*
    attribute, an :class:`ErrorKind` member, so that a caller can handle the
    whole family with a single ``except SqsError`` clause and still branch
    on what went wrong.
"""

import enum


class ErrorKind(enum.Enum):
    CONNECTION = 'connection'
    UNEXPECTED_RESPONSE = 'unexpected-response'
    BAD_STATE = 'bad-state'
    ENCODING = 'encoding'
    INVALID_MESSAGE = 'invalid-message'


class SqsError(Exception):
    """ Base class for all sqs client errors.
    """

    kind = None


class SqsConnectionError(SqsError):
    """ The connection to the broker failed: the socket could not be opened,
        an I/O operation failed or timed out, or the peer went away. These
        errors are fatal for the session, which moves to the NOT_CONNECTED
        state.
    """

    kind = ErrorKind.CONNECTION


class UnexpectedResponse(SqsError):
    """ The broker answered a protocol step with something other than what
        the step requires. The *expected* and *actual* attributes hold the
        required response and the (trimmed) response that was received;
        *broker_error* is the text of an ``ERROR:`` reply, if the broker
        sent one.
    """

    kind = ErrorKind.UNEXPECTED_RESPONSE

    def __init__(self, expected, actual, broker_error=None):

        self.expected = expected
        self.actual = actual
        self.broker_error = broker_error

        text = 'expected %r from the broker, received %r' % (expected, actual)
        SqsError.__init__(self, text)


class BadState(SqsError):
    """ An operation was invoked while the session was not in a state that
        permits it; for example, sending a message before :func:`connect`
        completed.
    """

    kind = ErrorKind.BAD_STATE


class EncodingError(SqsError):
    """ A body codec could not encode or decode a message body. The original
        exception, if any, is available as ``__cause__``.
    """

    kind = ErrorKind.ENCODING


class InvalidMessage(SqsError, ValueError):
    """ A :class:`sqs.protocol.message.Message` was built or sent with
        invalid contents, such as both delivery timing directives at once.
    """

    kind = ErrorKind.INVALID_MESSAGE


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
