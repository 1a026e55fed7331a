""" Consumers take messages off a queue, either one at a time with
    :func:`Consumer.receive_message`, or continuously via a background
    :class:`Subscription` started by :func:`Consumer.subscribe`.
"""

import logging
import threading

from . import client
from .errors import BadState, EncodingError, SqsConnectionError, UnexpectedResponse
from .protocol import fields
from .protocol.codec import Codecs, decode_body
from .protocol.message import ConnectionState, Message, Role

logger = logging.getLogger(__name__)


class Consumer(client.Client):
    """ Receive messages from a queue. In addition to the
        :class:`sqs.client.Client` arguments, *error_handler* is a callable
        that receives any error a subscription cannot hand back to a caller;
        see :func:`subscribe`.

        :ivar subscription: The active :class:`Subscription`, if any.
        :ivar loop_starts: How many background loops this consumer started.
    """

    role = Role.CONSUMER

    def __init__(self, codec=None, settings=None, transport_factory=None, error_handler=None):

        client.Client.__init__(self, codec, settings, transport_factory)

        self.error_handler = error_handler
        self.subscription = None
        self.loop_starts = 0
        self._subscription_lock = threading.Lock()

        self.session.quit_hooks.append(self._cancel_subscription)


    def receive_message(self, codec=None):
        """ Block until the broker hands over a message, and return it as a
            :class:`sqs.protocol.message.Message` whose body was decoded with
            *codec*, or with this consumer's default codec. The returned
            message never carries delivery timing.

            Foreground calls are rejected with :class:`sqs.errors.BadState`
            while a subscription is active.
        """

        subscription = self.subscription
        if subscription is not None and subscription.running:
            if threading.current_thread() is not subscription.thread:
                raise BadState("can't invoke receive_message while a subscription is active")

        return self._receive(codec)


    def _receive(self, codec=None, operation='receive_message'):

        if codec is None:
            codec = self.codec
        else:
            codec = Codecs.resolve(codec)

        with self.session.exchange(self.role, operation) as session:
            session.write_line(fields.START_GET_MESSAGE)

            # There is no section wrapper on the way back: the next response
            # is the raw payload.
            payload = session.read_line(session.settings.receive_timeout)

            session.write_line(fields.END_GET_MESSAGE)
            session.expect_contains(fields.OK)

        return Message(body=decode_body(codec, payload))


    def subscribe(self, callback, on_error=None, codec=None):
        """ Start a background thread that receives messages continuously,
            invoking *callback* with each :class:`sqs.protocol.message.Message`
            in turn. Only one subscription is active per consumer; calling
            :func:`subscribe` again while one is running returns the running
            :class:`Subscription` and changes nothing.

            Errors the loop cannot raise to anyone are passed to *on_error*,
            or to the consumer's *error_handler*; if neither is set they are
            logged. An undecodable body skips that message; a connection failure
            or any other error ends the subscription, as does
            :func:`quit` or :func:`Subscription.cancel`.
        """

        with self._subscription_lock:
            current = self.subscription
            if current is not None and current.running:
                return current

            self.session.require_configured(self.role, 'subscribe')

            subscription = Subscription(self, callback, on_error, codec)
            self.subscription = subscription
            self.loop_starts += 1
            subscription.start()

        return subscription


    def _subscription_stopped(self, subscription):

        with self._subscription_lock:
            if self.subscription is subscription:
                self.subscription = None


    def _cancel_subscription(self):

        subscription = self.subscription
        if subscription is not None:
            subscription.cancel()


    def quit(self):
        """ Cancel any active subscription and close the connection. A
            subscription blocked waiting for a message is interrupted rather
            than waited for.
        """

        subscription = self.subscription
        busy = subscription is not None and subscription.running

        try:
            if busy:
                self.session.quit(grace=0)
            else:
                self.session.quit()
        finally:
            if subscription is not None:
                subscription.join(self.session.settings.io_timeout)



class Subscription:
    """ Background thread receiving messages on behalf of a
        :class:`Consumer`. The thread holds the session lock only while a
        message is being received; the *callback* is invoked outside of it,
        and may itself call :func:`Consumer.quit`.
    """

    def __init__(self, consumer, callback, on_error=None, codec=None):

        self.consumer = consumer
        self.callback = callback
        self.on_error = on_error
        self.codec = codec

        self.cancelled = threading.Event()
        self.thread = threading.Thread(target=self.run)
        self.thread.name = 'sqs-subscription-%d' % (id(self))
        self.thread.daemon = True


    @property
    def running(self):
        return self.thread.is_alive()


    def start(self):
        self.thread.start()


    def cancel(self):
        """ Ask the loop to stop. A receive already in progress completes
            (or fails) first; :func:`Consumer.quit` interrupts it.
        """

        self.cancelled.set()


    def join(self, timeout=None):

        if self.thread is threading.current_thread():
            return

        if self.thread.ident is None:
            return

        self.thread.join(timeout)


    def report(self, error):
        """ Route an *error* to the registered error handler.
        """

        handler = self.on_error
        if handler is None:
            handler = self.consumer.error_handler

        if handler is None:
            logger.error('unhandled error in subscription to %r', self.consumer.session.queue, exc_info=error)
            return

        try:
            handler(error)
        except Exception:
            logger.exception('subscription error handler raised')


    def run(self):

        consumer = self.consumer
        session = consumer.session

        try:
            while self.cancelled.is_set() == False:

                if session.transport_open == False:
                    logger.debug('connection closed, abandoning subscription')
                    break

                try:
                    session.require_configured(consumer.role, 'subscribe')
                    message = consumer._receive(self.codec, 'subscribe')
                except BadState as e:
                    logger.debug('subscription stopped: %s', e)
                    break
                except SqsConnectionError as e:
                    quitting = session.state == ConnectionState.NOT_WANTING_CONNECTION
                    if self.cancelled.is_set() or quitting:
                        logger.debug('subscription interrupted: %s', e)
                    else:
                        self.report(e)
                    break
                except UnexpectedResponse as e:
                    self.report(e)
                    break
                except EncodingError as e:
                    self.report(e)
                    continue
                except Exception as e:
                    self.report(e)
                    break

                try:
                    self.callback(message)
                except Exception as e:
                    self.report(e)
        finally:
            consumer._subscription_stopped(self)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
