""" Common behavior of the two kinds of broker participants, producers and
    consumers. Each instance owns one :class:`sqs.session.Session`; the role
    sent during configuration is fixed by the subclass.
"""

from .protocol.codec import Codecs, TextCodec
from .session import Session


class Client:
    """ Base class for :class:`sqs.producer.Producer` and
        :class:`sqs.consumer.Consumer`. The *codec* is the body codec used
        when a call does not supply one, either an instance or the name of a
        registered codec ('text', 'json'); it defaults to
        :class:`sqs.protocol.codec.TextCodec`. The *settings* and
        *transport_factory* arguments are passed to the
        :class:`sqs.session.Session`.
    """

    role = None

    def __init__(self, codec=None, settings=None, transport_factory=None):

        if codec is None:
            codec = TextCodec()

        self.codec = Codecs.resolve(codec)
        self.session = Session(settings, transport_factory)


    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self.session)


    @property
    def state(self):
        return self.session.state


    def connect(self, host, port, queue):
        """ Connect to the broker at *host* and *port* and configure this
            client's role for the named *queue*.
        """

        self.session.connect(host, port, queue, self.role)


    def quit(self):
        """ Close the connection to the broker gracefully.
        """

        self.session.quit()


    def is_alive(self):
        """ Return True if the connection is open and configured, or still
            being configured.
        """

        return self.session.is_alive()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
