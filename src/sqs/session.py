""" The :class:`Session` owns the connection to the broker: the transport,
    the connection state machine, the configuration handshake, and the
    line-level read/write primitives used by producers and consumers.

    A session is shared by at most two call sites, the foreground caller and
    a consumer's background subscription. The protocol is a strict ping-pong
    of one write answered by one response; an interleaved write from another
    thread would desynchronize it for good. Every protocol operation therefore
    holds :attr:`Session.lock` for its whole write+read sequence, see
    :func:`Session.exchange`.
"""

import contextlib
import logging
import threading

from . import config
from . import transport as transports
from .errors import BadState, SqsConnectionError, SqsError, UnexpectedResponse
from .protocol import fields
from .protocol import wire
from .protocol.message import ConnectionState, Role

logger = logging.getLogger(__name__)

# Sentinel: use the configured io_timeout for a read.
_IO_TIMEOUT = object()


class Session:
    """ One connection to the broker, bound to one queue and one role once
        :func:`connect` completes. The *settings* argument is a
        :class:`sqs.config.Settings` instance; *transport_factory* is a
        callable accepting the settings and returning an unopened
        :class:`sqs.transport.Transport`, and defaults to
        :func:`sqs.transport.create`.

        :ivar lock: Held for the duration of every protocol exchange.
        :ivar listeners: Callables invoked as ``listener(previous, current)``
            on every state transition.
        :ivar quit_hooks: Callables invoked by :func:`quit` right after the
            state moves to NOT_WANTING_CONNECTION.
    """

    def __init__(self, settings=None, transport_factory=None):

        if settings is None:
            settings = config.default

        if transport_factory is None:
            transport_factory = transports.create

        self.settings = settings
        self.transport_factory = transport_factory
        self.transport = None

        self.host = None
        self.port = None
        self.queue = None
        self.role = None

        self.lock = threading.RLock()
        self.listeners = list()
        self.quit_hooks = list()

        self._state = ConnectionState.NOT_WANTING_CONNECTION


    def __repr__(self):
        return '<Session %s:%s queue=%r role=%s state=%s>' % (
            self.host, self.port, self.queue,
            self.role.name if self.role else None, self._state.name)


    @property
    def state(self):
        return self._state


    def _set_state(self, state):

        previous = self._state
        self._state = state

        if previous == state:
            return

        logger.debug('%s:%s state %s -> %s', self.host, self.port, previous.name, state.name)

        for listener in list(self.listeners):
            listener(previous, state)


    @property
    def transport_open(self):
        transport = self.transport
        return transport is not None and transport.is_open


    def is_alive(self):
        """ True if the transport is open and the session has not failed or
            been asked to quit.
        """

        if not self.transport_open:
            return False

        dead = (ConnectionState.NOT_WANTING_CONNECTION, ConnectionState.NOT_CONNECTED)
        return self._state not in dead


    def connect(self, host, port, queue, role):
        """ Open the connection to the broker at *host* and *port*, wait for
            its greeting, and configure the session for the named *queue*
            and *role* (a :class:`sqs.protocol.message.Role` or its name).

            Any failure leaves the session in the NOT_CONNECTED state with
            the transport closed, and is raised to the caller.
        """

        role = _as_role(role)

        with self.lock:
            if self.is_alive():
                raise BadState('session is already connected to %s:%s' % (self.host, self.port))

            self._discard_transport()

            self.host = host
            self.port = port
            self.queue = queue
            self.role = role

            self._set_state(ConnectionState.NOT_CONNECTED)

            transport = self.transport_factory(self.settings)
            transport.open(host, port, self.settings.connect_timeout)
            self.transport = transport

            try:
                self.expect_exact(fields.GREETING)
                self._set_state(ConnectionState.CONNECTED_BEFORE_CONFIG)
                self._configure(queue, role)
                self.expect_exact(fields.OK)
            except SqsError:
                self._set_state(ConnectionState.NOT_CONNECTED)
                self._discard_transport()
                raise

            self._set_state(ConnectionState.CONNECTED_AFTER_CONFIG)

        logger.info('connected to %s:%s as %s of queue %r', host, port, role.name, queue)


    def _configure(self, queue, role):

        self.write_line(fields.START_CONFIG)
        self.expect_exact(fields.OK)

        self._set_value(fields.QUEUE, queue)
        self._set_value(fields.ROLE, role.value)

        # The reply to END_CONFIG is checked by the caller.
        self.write_line(fields.END_CONFIG)


    def _set_value(self, key, value):
        """ Issue one SET directive. The broker echoes the setting back as
            'OK: (KEY=value)'; an echo naming a different setting or value
            is rejected. A bare 'OK:' is accepted as is.
        """

        self.write_line(wire.set_directive(key, value))
        response = self.expect_contains(fields.OK_WITH_VALUE)

        echoed = wire.parse_value(response)
        if echoed is not None and echoed != (key, str(value)):
            raise UnexpectedResponse('%s%s=%s' % (fields.OK_WITH_VALUE, key, value), response)

        return echoed


    def quit(self, grace=None):
        """ Leave the session. The state moves to NOT_WANTING_CONNECTION
            before anything else happens, then the quit hooks run, then the
            RUN QUIT handshake is performed and the transport is closed.

            If another thread holds the session lock for longer than *grace*
            seconds (default: the configured io_timeout), typically a
            subscription blocked waiting for a message, the transport is
            interrupted instead of running the handshake.

            A failure during the handshake is raised as a
            :class:`sqs.errors.SqsConnectionError`; the transport is closed
            regardless.
        """

        self._set_state(ConnectionState.NOT_WANTING_CONNECTION)

        for hook in list(self.quit_hooks):
            hook()

        if grace is None:
            grace = self.settings.io_timeout

        if grace is None:
            acquired = self.lock.acquire()
        elif grace <= 0:
            acquired = self.lock.acquire(blocking=False)
        else:
            acquired = self.lock.acquire(timeout=grace)

        if not acquired:
            logger.warning('%s:%s is busy, interrupting the connection', self.host, self.port)
            self.abort()
            return

        try:
            if self.transport is None:
                return

            if not self.transport.is_open:
                self._discard_transport()
                return

            try:
                self.run_command(fields.QUIT)
            except SqsError as e:
                raise SqsConnectionError("couldn't gracefully quit: %s" % (e,)) from e
            finally:
                self._discard_transport()
        finally:
            self.lock.release()

        logger.info('quit %s:%s', self.host, self.port)


    def abort(self):
        """ Interrupt the transport, unblocking any in-flight read, and close
            it once the session lock is released.
        """

        transport = self.transport
        if transport is None:
            return

        transport.interrupt()

        timeout = self.settings.io_timeout
        if timeout is None:
            acquired = self.lock.acquire()
        else:
            acquired = self.lock.acquire(timeout=timeout)

        try:
            if self.transport is transport:
                self._discard_transport()
            else:
                transport.close()
        finally:
            if acquired:
                self.lock.release()


    def _discard_transport(self):

        transport = self.transport
        self.transport = None

        if transport is not None:
            transport.close()


    def _fail(self, error):
        """ A connection failure is fatal: unless the session is quitting,
            it moves to NOT_CONNECTED, and the transport is closed either way.
        """

        if self._state != ConnectionState.NOT_WANTING_CONNECTION:
            logger.debug('%s:%s connection failed: %s', self.host, self.port, error)
            self._set_state(ConnectionState.NOT_CONNECTED)

        self._discard_transport()


    def require_configured(self, role=None, operation='this operation'):
        """ Raise :class:`sqs.errors.BadState` unless the transport is open,
            the session is CONNECTED_AFTER_CONFIG and, if *role* is given,
            configured for that role.
        """

        if not self.transport_open:
            raise BadState("can't invoke %s when the connection is closed" % (operation,))

        if self._state != ConnectionState.CONNECTED_AFTER_CONFIG:
            raise BadState("can't invoke %s when the connection state is %s" % (operation, self._state.name))

        if role is not None and self.role != role:
            raise BadState("can't invoke %s on a %s session" % (operation, self.role.name))


    @contextlib.contextmanager
    def exchange(self, role=None, operation='this operation'):
        """ Hold the session lock for one complete protocol operation, after
            checking the session is configured (see
            :func:`require_configured`). A connection failure inside the
            block marks the session NOT_CONNECTED before propagating.
        """

        with self.lock:
            self.require_configured(role, operation)
            try:
                yield self
            except SqsConnectionError as e:
                self._fail(e)
                raise


    def _require_transport(self):

        transport = self.transport
        if transport is None:
            raise BadState('session is not connected')
        return transport


    def write(self, text):
        """ Write *text* exactly as given, blocking until it is written.
        """

        transport = self._require_transport()
        transport.send(text.encode(self.settings.encoding), self.settings.io_timeout)


    def write_line(self, text):
        """ Write one command line, framed with CRLF on both sides.
        """

        logger.debug('-> %s', text)
        self.write(wire.encode_line(text))


    def read_line(self, timeout=_IO_TIMEOUT):
        """ Read one response from the broker and return it trimmed. The
            *timeout* defaults to the configured io_timeout; None waits
            indefinitely.
        """

        if timeout is _IO_TIMEOUT:
            timeout = self.settings.io_timeout

        transport = self._require_transport()
        raw = transport.read_response(timeout)
        response = wire.decode_response(raw, self.settings.encoding)

        if len(response) > 200:
            logger.debug('<- %s... (%d chars)', response[:200], len(response))
        else:
            logger.debug('<- %s', response)

        return response


    def expect_exact(self, expected):
        return wire.check_exact(self.read_line(), expected)


    def expect_contains(self, expected):
        """ Read one response and require it to contain *expected*. The full
            response is returned so the caller can parse any attached value.
        """

        return wire.check_contains(self.read_line(), expected)


    def run_command(self, name):
        """ Issue a RUN command, valid in any section, and require an exact
            OK in reply.
        """

        self.write_line(wire.run_command(name))
        return self.expect_exact(fields.OK)



def _as_role(role):

    if isinstance(role, Role):
        return role

    try:
        return Role(str(role).upper())
    except ValueError:
        raise ValueError('invalid role: ' + repr(role))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
