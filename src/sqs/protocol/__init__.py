"""
sqs Protocol Layer
==================

This package defines the line-oriented protocol spoken with the queue
broker: the command vocabulary, line framing, the message model and its
builder, and the body codecs. It does not perform any I/O.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Producer / Consumer (sqs.producer, sqs.consumer)
    Section sequences for sending and receiving

    │
    ▼
Session (sqs.session)
    Connection state machine, handshake, locking

    │
    ▼
Wire Codec (wire.py)
    CRLF framing of commands, trimming of responses
    Exact / contains response checks

Message Model (message.py, builder.py)
    Body + delivery timing, session states, roles

Body Codecs (codec.py)
    Text and structured (JSON) body encodings

Field Vocabulary (fields.py)
    Canonical command and reply words

    │
    ▼
Transport (sqs.transport)
    Moves bytes
    - TCP socket
    - ZeroMQ STREAM socket

---------------------------------------------------------------------

Wire exchange
-------------

Every step is a single write answered by a single response line:

    <- HELO SERVER
    -> START_CONFIG                     <- OK
    -> SET QUEUE=<name>;                <- OK: (QUEUE=<name>)
    -> SET ROLE=<PRODUCER|CONSUMER>;    <- OK: (ROLE=<role>)
    -> END_CONFIG                       <- OK

    -> START_METADATA                   <- OK
    -> SET DELIVER_TIMESTAMP=<ms>;      <- OK: (...)
    -> END_METADATA                     <- OK
    -> START_MESSAGE                    <- OK
    -> <body> END_MESSAGE               <- OK

    -> START_GET_MESSAGE                <- <body>
    -> END_GET_MESSAGE                  <- OK

    -> RUN QUIT                         <- OK

---------------------------------------------------------------------
"""

from . import fields
from . import wire
from .message import ConnectionState, Message, Role
from .builder import MessageBuilder
from .codec import BodyCodec, Codecs, JsonCodec, StructuredBody, TextCodec


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
