from __future__ import annotations

import re
from typing import Optional, Tuple

from ..errors import UnexpectedResponse
from . import fields


# The broker acknowledges a SET with "OK: (KEY=value)".
_VALUE_PATTERN = re.compile(r"^OK:\s*\(?\s*([A-Za-z0-9_]+)=(.*?)\)?\s*$")


def encode_line(text: str) -> str:
    """
    Frame one command line.

    Commands are written with a leading and a trailing CRLF; the broker
    looks for the line terminators on both sides of a section keyword.
    """

    return fields.CRLF + text + fields.CRLF


def encode_payload(body: str) -> str:
    """
    Frame an encoded message body followed by the END_MESSAGE terminator.

    Both are sent in a single write, with no response awaited in between.
    """

    return body + fields.CRLF + fields.END_MESSAGE + fields.CRLF


def set_directive(key: str, value) -> str:
    return f"SET {key}={value};"


def run_command(name: str) -> str:
    return f"RUN {name.upper()}"


def decode_response(raw: bytes, encoding: str = "utf-8") -> str:
    """
    Bytes -> trimmed response string
    """

    return raw.decode(encoding, errors="replace").strip()


def broker_error(response: str) -> Optional[str]:
    """
    Return the text of an ``ERROR:`` reply, or None for any other response.
    """

    if response.startswith(fields.ERROR):
        return response[len(fields.ERROR):].strip()
    return None


def parse_value(response: str) -> Optional[Tuple[str, str]]:
    """
    Return the (key, value) pair attached to an ``OK:`` reply, if any.
    """

    match = _VALUE_PATTERN.match(response)
    if match is None:
        return None
    return match.group(1), match.group(2)


def check_exact(response: str, expected: str) -> str:
    if response != expected:
        raise UnexpectedResponse(expected, response, broker_error(response))
    return response


def check_contains(response: str, expected: str) -> str:
    if expected not in response:
        raise UnexpectedResponse(expected, response, broker_error(response))
    return response
