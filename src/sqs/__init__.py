""" Python client for the simple queue server. Producers put messages on a
    named queue, consumers take them off, either one at a time or through a
    background subscription; both speak the broker's line-oriented protocol
    over a single TCP connection per queue and role.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Utility components.

from . import json
from . import config
from . import errors

# Submodules used by multiple other components.

from . import protocol
from . import transport
from . import session

# Primary public-facing interfaces.

from .config import Settings
from .errors import (
    ErrorKind,
    SqsError,
    SqsConnectionError,
    UnexpectedResponse,
    BadState,
    EncodingError,
    InvalidMessage,
)
from .protocol import (
    ConnectionState,
    JsonCodec,
    Message,
    MessageBuilder,
    Role,
    StructuredBody,
    TextCodec,
)
from .session import Session
from .producer import Producer
from .consumer import Consumer, Subscription

__version__ = '1.0.0'

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
