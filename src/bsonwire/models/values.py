"""BSON value variants, fields and documents.

Every variant is a small frozen pydantic model. Integer widths are enforced when
a value is constructed, so the encoder never sees an out-of-range number.
"""

from __future__ import annotations

import enum
from typing import Tuple, Union

import pydantic
from pydantic import AwareDatetime

from .base import BsonValue

_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class BinarySubtype(enum.IntEnum):
    """Subtype byte of a binary (0x05) value."""

    GENERIC = 0x00
    FUNCTION = 0x01
    UUID = 0x04
    MD5 = 0x05
    USER_DEFINED = 0x80


class Float(BsonValue):
    value: float


class String(BsonValue):
    value: str


class Doc(BsonValue):
    """An embedded document."""

    document: Tuple[Field, ...] = ()


class Array(BsonValue):
    """An ordered list of values, encoded as a document keyed "0", "1", ..."""

    values: Tuple[Value, ...] = ()


class Binary(BsonValue):
    """A binary blob tagged with its subtype.

    Example:
        >>> Binary(subtype=BinarySubtype.MD5, data=bytes(16))
    """

    subtype: BinarySubtype = BinarySubtype.GENERIC
    data: bytes = b""


class ObjectId(BsonValue):
    """A 12-byte object identifier.

    Stored as the two big-endian parts it occupies on the wire: a 4-byte
    timestamp and an 8-byte machine/process/counter part.
    """

    timestamp: int = pydantic.Field(ge=0, le=0xFFFFFFFF)
    counter: int = pydantic.Field(ge=0, le=0xFFFFFFFFFFFFFFFF)

    @classmethod
    def from_bytes(cls, raw: bytes) -> ObjectId:
        """Build an ObjectId from its 12-byte wire form."""
        if len(raw) != 12:
            raise ValueError(f"ObjectId requires 12 bytes, got {len(raw)}")
        return cls(
            timestamp=int.from_bytes(raw[:4], "big"),
            counter=int.from_bytes(raw[4:], "big"),
        )

    @classmethod
    def from_hex(cls, text: str) -> ObjectId:
        """Parse the 24-digit hexadecimal form produced by ``str(oid)``."""
        if len(text) != 24:
            raise ValueError(f"ObjectId hex string must be 24 characters, got {len(text)}")
        return cls.from_bytes(bytes.fromhex(text))

    def to_bytes(self) -> bytes:
        return self.timestamp.to_bytes(4, "big") + self.counter.to_bytes(8, "big")

    def __str__(self) -> str:
        return self.to_bytes().hex()


class Bool(BsonValue):
    value: bool


class UTCDateTime(BsonValue):
    """A point in time. Only millisecond resolution survives encoding."""

    value: AwareDatetime


class Null(BsonValue):
    pass


class Regex(BsonValue):
    """A regular expression: pattern and option letters, both NUL-free."""

    pattern: str
    options: str = ""


class Javascript(BsonValue):
    """JavaScript code, optionally closed over a scope document.

    An empty scope is written as plain code (0x0D); a non-empty scope as code
    with scope (0x0F).
    """

    code: str
    scope: Tuple[Field, ...] = ()


class Symbol(BsonValue):
    value: str


class Int32(BsonValue):
    value: int = pydantic.Field(ge=_INT32_MIN, le=_INT32_MAX)


class Int64(BsonValue):
    value: int = pydantic.Field(ge=_INT64_MIN, le=_INT64_MAX)


class ReplicationTimestamp(BsonValue):
    """Internal replication timestamp, carried as an opaque 64-bit value."""

    value: int = pydantic.Field(ge=_INT64_MIN, le=_INT64_MAX)


class MinKey(BsonValue):
    """Sentinel that compares lower than every other value."""

    pass


class MaxKey(BsonValue):
    """Sentinel that compares higher than every other value."""

    pass


Value = Union[
    Float,
    String,
    Doc,
    Array,
    Binary,
    ObjectId,
    Bool,
    UTCDateTime,
    Null,
    Regex,
    Javascript,
    Symbol,
    Int32,
    Int64,
    ReplicationTimestamp,
    MinKey,
    MaxKey,
]


class Field(BsonValue):
    """A named value inside a document.

    Attributes:
        name: Element name; must not contain NUL
        value: Any BSON value variant
    """

    name: str
    value: Value


Document = Tuple[Field, ...]

for _model in (Doc, Array, Javascript, Field):
    _model.model_rebuild()


def document(*pairs: tuple[str, Value]) -> Document:
    """Build a document from ``(name, value)`` pairs, keeping their order.

    Example:
        >>> document(("a", Int32(value=1)), ("b", String(value="x")))
    """
    return tuple(Field(name=name, value=value) for name, value in pairs)
