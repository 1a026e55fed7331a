import pytest

from datetime import datetime, timedelta, timezone

import sqs
from sqs.protocol.message import format_instant


moment = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


def test_timing_exclusivity():
    """ Every combination of the two timing directives: both set fails at
        construction, one set succeeds, neither set succeeds here but cannot
        be sent.
    """

    with pytest.raises(sqs.InvalidMessage):
        sqs.Message('body', deliver_at=moment, deliver_after=0)

    message = sqs.Message('body', deliver_at=moment)
    assert message.has_timing

    message = sqs.Message('body', deliver_after=0)
    assert message.has_timing

    message = sqs.Message('body')
    assert message.has_timing == False

    with pytest.raises(sqs.InvalidMessage):
        message.deliver_directive()


def test_invalid_timing_values():

    with pytest.raises(sqs.InvalidMessage):
        sqs.Message('body', deliver_after=-1)

    with pytest.raises(sqs.InvalidMessage):
        sqs.Message('body', deliver_after=1.5)

    with pytest.raises(sqs.InvalidMessage):
        sqs.Message('body', deliver_at='2024-05-01')


def test_invalid_message_is_a_value_error():

    with pytest.raises(ValueError) as caught:
        sqs.Message('body', deliver_at=moment, deliver_after=10)

    assert caught.value.kind is sqs.ErrorKind.INVALID_MESSAGE


def test_deliver_directive():

    message = sqs.Message('body', deliver_after=3000)
    assert message.deliver_directive() == ('DELIVER_TIMESTAMP', '3000')

    message = sqs.Message('body', deliver_at=moment)
    assert message.deliver_directive() == ('DELIVER_DATE', '2024-05-01T10:00:00Z')


def test_format_instant():

    assert format_instant(moment) == '2024-05-01T10:00:00Z'

    later = moment + timedelta(milliseconds=250)
    assert format_instant(later) == '2024-05-01T10:00:00.250Z'

    # Offsets are normalized to UTC.
    offset = timezone(timedelta(hours=2))
    local = datetime(2024, 5, 1, 12, 0, 0, tzinfo=offset)
    assert format_instant(local) == '2024-05-01T10:00:00Z'


def test_builder():

    message = sqs.MessageBuilder().body('THIS IS A TEST').deliver_delay(3).build()
    assert message.body == 'THIS IS A TEST'
    assert message.deliver_after == 3000
    assert message.deliver_at is None

    message = sqs.MessageBuilder().body('x').deliver_delay(0.25).build()
    assert message.deliver_after == 250

    message = sqs.MessageBuilder().deliver_at(moment).body({'type': 'foo'}).build()
    assert message.deliver_at == moment
    assert message.deliver_after is None


def test_builder_exclusivity():

    builder = sqs.MessageBuilder().body('x').deliver_delay(1)
    with pytest.raises(sqs.InvalidMessage):
        builder.deliver_at(moment)

    builder = sqs.MessageBuilder().body('x').deliver_at(moment)
    with pytest.raises(sqs.InvalidMessage):
        builder.deliver_delay(1)


def test_builder_misuse():

    with pytest.raises(sqs.InvalidMessage):
        sqs.MessageBuilder().deliver_delay(1).build()

    with pytest.raises(sqs.InvalidMessage):
        sqs.MessageBuilder().body('x').deliver_delay(-1)

    with pytest.raises(sqs.InvalidMessage):
        sqs.MessageBuilder().body('x').deliver_delay('soon')

    # A message without timing can be built, just not sent.
    message = sqs.MessageBuilder().body('x').build()
    assert message.has_timing == False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
