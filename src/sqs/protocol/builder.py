from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..errors import InvalidMessage
from .message import Message


_UNSET = object()


class MessageBuilder:
    """Fluent construction of a :class:`Message`.

    Delays are given in seconds and stored on the message in milliseconds.
    Setting a second timing directive raises immediately rather than at
    :meth:`build` time.
    """

    def __init__(self):
        self._body: Any = _UNSET
        self._deliver_at: Optional[datetime] = None
        self._deliver_after: Optional[int] = None

    # Data
    def body(self, body: Any):
        self._body = body
        return self

    # Timing
    def deliver_at(self, moment: datetime):
        if self._deliver_after is not None:
            raise InvalidMessage("can't specify deliver_at when a deliver delay is defined")
        if not isinstance(moment, datetime):
            raise InvalidMessage("deliver_at requires a datetime")
        self._deliver_at = moment
        return self

    def deliver_delay(self, seconds: float):
        if self._deliver_at is not None:
            raise InvalidMessage("can't specify a deliver delay when deliver_at is defined")
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise InvalidMessage("deliver delay must be a number of seconds")
        if seconds < 0:
            raise InvalidMessage("deliver delay cannot be negative")
        self._deliver_after = int(round(seconds * 1000))
        return self

    # Finalize
    def build(self) -> Message:

        if self._body is _UNSET:
            raise InvalidMessage("message body not specified")

        return Message(
            body=self._body,
            deliver_at=self._deliver_at,
            deliver_after=self._deliver_after,
        )
