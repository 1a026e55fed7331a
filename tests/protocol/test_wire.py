import pytest

import sqs
from sqs.protocol import fields, wire


def test_encode_line():

    assert wire.encode_line('START_CONFIG') == '\r\nSTART_CONFIG\r\n'
    assert wire.encode_line(wire.set_directive('QUEUE', 'orders')) == '\r\nSET QUEUE=orders;\r\n'
    assert wire.encode_line(wire.run_command('quit')) == '\r\nRUN QUIT\r\n'


def test_encode_payload():

    # The body and the terminator go out in one write, body first.
    assert wire.encode_payload('"hi"') == '"hi"\r\nEND_MESSAGE\r\n'


def test_decode_response():

    assert wire.decode_response(b'OK\r\n') == 'OK'
    assert wire.decode_response(b'\r\nOK: (QUEUE=x)\r\n') == 'OK: (QUEUE=x)'
    assert wire.decode_response('"café"\r\n'.encode('utf-8')) == '"café"'


def test_check_exact():

    assert wire.check_exact('OK', fields.OK) == 'OK'

    with pytest.raises(sqs.UnexpectedResponse) as caught:
        wire.check_exact('OK: (QUEUE=x)', fields.OK)

    error = caught.value
    assert error.expected == 'OK'
    assert error.actual == 'OK: (QUEUE=x)'
    assert error.broker_error is None
    assert error.kind is sqs.ErrorKind.UNEXPECTED_RESPONSE


def test_check_contains():

    # The full line comes back, so the caller can parse the attached value.
    response = wire.check_contains('OK: (ROLE=CONSUMER)', fields.OK_WITH_VALUE)
    assert response == 'OK: (ROLE=CONSUMER)'

    with pytest.raises(sqs.UnexpectedResponse):
        wire.check_contains('OK', fields.OK_WITH_VALUE)


def test_broker_error():

    with pytest.raises(sqs.UnexpectedResponse) as caught:
        wire.check_contains('ERROR: Key QUEUE is not something assignable', fields.OK_WITH_VALUE)

    assert caught.value.broker_error == 'Key QUEUE is not something assignable'
    assert wire.broker_error('OK') is None


def test_parse_value():

    assert wire.parse_value('OK: (QUEUE=orders)') == ('QUEUE', 'orders')
    assert wire.parse_value('OK: (DELIVER_DATE=2024-05-01T10:00:00Z)') == ('DELIVER_DATE', '2024-05-01T10:00:00Z')
    assert wire.parse_value('OK:ROLE=PRODUCER') == ('ROLE', 'PRODUCER')
    assert wire.parse_value('OK') is None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
