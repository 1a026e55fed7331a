from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol as TypingProtocol

from .. import json
from ..errors import EncodingError


class BodyCodec(TypingProtocol):
    """Encode/decode pair between an application body and its wire text."""

    name: str
    def encode(self, body: Any) -> str: ...
    def decode(self, text: str) -> Any: ...


QUOTE = '"'


class TextCodec:
    """
    Plain text bodies, wrapped in a literal double quote on each side.

    Decoding strips exactly one leading and one trailing character without
    looking at them; a body that itself starts or ends with a quote does not
    survive the round trip unchanged.
    """

    name = "text"

    def encode(self, body: Any) -> str:
        if not isinstance(body, str):
            raise EncodingError(f"text bodies must be str, not {type(body).__name__}")
        return QUOTE + body + QUOTE

    def decode(self, text: str) -> str:
        if len(text) < 2:
            raise EncodingError(f"text body too short to carry its quotes: {text!r}")
        return text[1:-1]


@dataclass
class StructuredBody:
    """
    Structured body: a ``type`` discriminator plus an open field map.
    """

    type: str
    content: Optional[Dict[str, Any]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "content": self.content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StructuredBody":
        kind = data.get("type")
        if not isinstance(kind, str):
            raise EncodingError(f"structured body needs a string 'type', got {kind!r}")
        content = data.get("content")
        if content is not None and not isinstance(content, dict):
            raise EncodingError("structured body 'content' must be an object")
        return cls(type=kind, content=content)


class JsonCodec:
    """
    Structured bodies as a compact JSON object: {"type": ..., "content": {...}}
    """

    name = "json"

    def encode(self, body: Any) -> str:
        if isinstance(body, StructuredBody):
            data = body.to_dict()
        elif isinstance(body, Mapping):
            data = StructuredBody.from_dict(body).to_dict()
        else:
            raise EncodingError(f"structured bodies must be StructuredBody or a mapping, not {type(body).__name__}")

        try:
            return json.dumps(data).decode("utf-8")
        except json.JSONEncodeError as e:
            raise EncodingError(f"couldn't create the JSON body: {e}") from e

    def decode(self, text: str) -> StructuredBody:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise EncodingError(f"couldn't parse the JSON body: {e}") from e

        if not isinstance(data, dict):
            raise EncodingError(f"structured body must be a JSON object, got {type(data).__name__}")
        return StructuredBody.from_dict(data)


class Codecs:
    _registry: Dict[str, BodyCodec] = {
        "text": TextCodec(),
        "json": JsonCodec(),
    }

    @classmethod
    def get(cls, name: str) -> BodyCodec:
        if name not in cls._registry:
            raise ValueError(f"Unknown codec: {name}")
        return cls._registry[name]

    @classmethod
    def resolve(cls, codec) -> BodyCodec:
        """Accept a codec instance, or the name of a registered codec."""

        if isinstance(codec, str):
            return cls.get(codec)
        return codec


def describe(codec) -> str:
    return getattr(codec, "name", type(codec).__name__)


def encode_body(codec: BodyCodec, body: Any) -> str:
    """
    Encode *body* with *codec*. Whatever an application codec raises is
    reported as an EncodingError, with the original exception as its cause.
    """

    try:
        text = codec.encode(body)
    except EncodingError:
        raise
    except Exception as e:
        raise EncodingError(f"{describe(codec)} codec couldn't encode the body: {e!r}") from e

    if not isinstance(text, str):
        raise EncodingError(f"{describe(codec)} codec returned {type(text).__name__}, not str")
    return text


def decode_body(codec: BodyCodec, text: str) -> Any:
    try:
        return codec.decode(text)
    except EncodingError:
        raise
    except Exception as e:
        raise EncodingError(f"{describe(codec)} codec couldn't decode the body: {e!r}") from e
