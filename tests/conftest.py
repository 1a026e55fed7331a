import socket

import pytest

import sqs

from scripted import ScriptedBroker, GREETING


@pytest.fixture
def settings():
    return sqs.Settings(connect_timeout=2, io_timeout=2)


@pytest.fixture
def broker():

    brokers = list()

    def start(replies=(), greeting=GREETING, hang_up=False):
        scripted = ScriptedBroker(replies, greeting, hang_up)
        brokers.append(scripted)
        return scripted

    yield start

    for scripted in brokers:
        scripted.stop()


@pytest.fixture
def unused_port():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(('127.0.0.1', 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
