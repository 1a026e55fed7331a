""" The response framing shared by all transports, exercised through a
    transport that replays canned chunks, plus the TCP transport's handling
    of timeouts and interruption.
"""

import socket
import threading
import time

import pytest

import sqs
from sqs.transport import Transport, TransportConnectionError, TransportTimeout, ResponseTooLarge
from sqs.transport.tcp import TcpTransport


class Replay(Transport):

    def __init__(self, chunks, max_response_size=1024):
        super().__init__(max_response_size)
        self.chunks = list(chunks)

    def open(self, host, port, timeout=None):
        pass

    def close(self):
        pass

    def interrupt(self):
        pass

    def send(self, data, timeout=None):
        pass

    def _recv_chunk(self, timeout):
        if not self.chunks:
            raise TransportConnectionError('replay exhausted')
        return self.chunks.pop(0)


def test_single_chunk():
    transport = Replay([b'OK\r\n'])
    assert transport.read_response() == b'OK\r\n'


def test_segmented_response():

    transport = Replay([b'\r\nOK: (QU', b'EUE=x)', b'\r\n'])
    assert transport.read_response() == b'\r\nOK: (QUEUE=x)\r\n'


def test_lone_terminator_skipped():

    transport = Replay([b'\r\n', b'OK\r\n'])
    assert transport.read_response() == b'OK\r\n'


def test_whole_read_is_one_response():
    """ Whatever arrives in one read, up to a line terminator, is one
        response; multi-line bodies are not split apart.
    """

    transport = Replay([b'{"type":"foo",\r\n"content":null}\r\n'])
    assert transport.read_response() == b'{"type":"foo",\r\n"content":null}\r\n'


def test_response_ceiling():

    transport = Replay([b'x' * 600, b'x' * 600, b'\r\n'], max_response_size=1024)

    with pytest.raises(ResponseTooLarge) as caught:
        transport.read_response()

    assert isinstance(caught.value, sqs.SqsConnectionError)
    assert caught.value.kind is sqs.ErrorKind.CONNECTION


def test_peer_closed():

    transport = Replay([b'partial'])
    with pytest.raises(TransportConnectionError):
        transport.read_response()


@pytest.fixture
def silent_peer():
    """ A listening socket that accepts one connection and never writes.
    """

    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(('127.0.0.1', 0))
    listener.listen(1)

    accepted = list()

    def accept():
        try:
            connection, _address = listener.accept()
        except OSError:
            return
        accepted.append(connection)

    thread = threading.Thread(target=accept)
    thread.daemon = True
    thread.start()

    yield listener.getsockname()

    listener.close()
    thread.join(1)
    for connection in accepted:
        connection.close()


def test_tcp_read_timeout(silent_peer):

    host, port = silent_peer
    transport = TcpTransport(1024)
    transport.open(host, port, timeout=1)
    assert transport.is_open

    begin = time.time()
    with pytest.raises(TransportTimeout):
        transport.read_response(timeout=0.2)
    assert time.time() - begin < 1

    transport.close()
    assert transport.is_open == False


def test_tcp_interrupt(silent_peer):

    host, port = silent_peer
    transport = TcpTransport(1024)
    transport.open(host, port, timeout=1)

    errors = list()

    def reader():
        try:
            transport.read_response(timeout=5)
        except sqs.SqsConnectionError as e:
            errors.append(e)

    thread = threading.Thread(target=reader)
    thread.start()
    time.sleep(0.1)

    begin = time.time()
    transport.interrupt()
    thread.join(2)

    assert thread.is_alive() == False
    assert time.time() - begin < 1
    assert len(errors) == 1
    assert isinstance(errors[0], TransportConnectionError)
    assert transport.is_open == False

    transport.close()


def test_tcp_refused(unused_port):

    transport = TcpTransport(1024)
    with pytest.raises(TransportConnectionError):
        transport.open('127.0.0.1', unused_port, timeout=1)

    assert transport.is_open == False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
