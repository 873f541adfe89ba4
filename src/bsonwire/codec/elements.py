"""The BSON element table.

Each element on the wire is ``tag byte, name cstring, payload``. This module
holds the one table that ties every tag to its value model and to the pair of
functions that write and read its payload. Both directions of the codec are
driven from ``ELEMENT_CODECS``; nothing else in the package knows a tag value.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from ..exceptions import (
    ArrayKeyError,
    DecodeError,
    EncodeError,
    LengthMismatchError,
    MaxDepthExceededError,
    UnknownTagError,
)
from ..models import (
    Array,
    Binary,
    BinarySubtype,
    Bool,
    BsonValue,
    Doc,
    Document,
    Field,
    Float,
    Int32,
    Int64,
    Javascript,
    MaxKey,
    MinKey,
    Null,
    ObjectId,
    Regex,
    ReplicationTimestamp,
    String,
    Symbol,
    UTCDateTime,
    Value,
)
from ..options import CodecOptions
from .framing import array_names, check_array_names, document_names, read_document, write_document
from .primitives import ByteReader, ByteWriter

logger = logging.getLogger(__name__)


class ElementType(enum.IntEnum):
    """Tag byte of a BSON element."""

    DOUBLE = 0x01
    STRING = 0x02
    DOCUMENT = 0x03
    ARRAY = 0x04
    BINARY = 0x05
    OBJECT_ID = 0x07
    BOOLEAN = 0x08
    UTC_DATETIME = 0x09
    NULL = 0x0A
    REGEX = 0x0B
    JAVASCRIPT = 0x0D
    SYMBOL = 0x0E
    JAVASCRIPT_WITH_SCOPE = 0x0F
    INT32 = 0x10
    TIMESTAMP = 0x11
    INT64 = 0x12
    MAX_KEY = 0x7F
    MIN_KEY = 0xFF


# Subtypes accepted on decode and mapped onto a current one. Never written.
LEGACY_BINARY_SUBTYPES = {0x03: BinarySubtype.UUID}

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class DecodeContext:
    """Per-call decode state: the options in force and the current nesting."""

    options: CodecOptions
    depth: int = 0

    def nested(self, offset: int) -> DecodeContext:
        depth = self.depth + 1
        if depth > self.options.max_depth:
            raise MaxDepthExceededError(
                f"Nesting deeper than max_depth={self.options.max_depth}", offset=offset
            )
        return DecodeContext(self.options, depth)


def _any_value(value: Any) -> bool:
    return True


@dataclass(frozen=True)
class ElementCodec:
    """One row of the element table.

    Attributes:
        tag: Wire tag byte
        value_type: Value model written under this tag
        write: Writes the payload of a value
        read: Reads a payload and returns the value
        accepts: Picks this row when several rows share a value model
    """

    tag: ElementType
    value_type: type[BsonValue]
    write: Callable[[ByteWriter, Any], None]
    read: Callable[[ByteReader, DecodeContext], BsonValue]
    accepts: Callable[[Any], bool] = _any_value


# --- Element dispatch ---


def write_element(writer: ByteWriter, name: str, value: Value) -> None:
    """Write one element: tag, name and payload."""
    codec = codec_for_value(value)
    writer.write_byte(codec.tag)
    writer.write_cstring(name)
    codec.write(writer, value)


def read_element(reader: ByteReader, context: DecodeContext) -> tuple[str, Value]:
    """Read one element and return its ``(name, value)``.

    Raises:
        UnknownTagError: If the tag byte is not in the element table
    """
    offset = reader.position
    codec = codec_for_tag(reader.read_byte(), offset)
    name = reader.read_cstring()
    return name, codec.read(reader, context)


def read_fields(reader: ByteReader, context: DecodeContext) -> tuple[Document, int]:
    """Read a framed document and return (fields, declared length)."""
    items, length = read_document(reader, lambda body: read_element(body, context))
    return tuple(Field(name=name, value=value) for name, value in items), length


def codec_for_value(value: Any) -> ElementCodec:
    for codec in _CODECS_BY_TYPE.get(type(value), ()):
        if codec.accepts(value):
            return codec
    raise EncodeError(f"Unsupported BSON value {value!r} of type {type(value).__name__}")


def codec_for_tag(tag: int, offset: int | None = None) -> ElementCodec:
    try:
        return _CODECS_BY_TAG[tag]
    except KeyError:
        raise UnknownTagError(tag, offset=offset) from None


# --- Payload codecs ---


def _write_float(writer: ByteWriter, value: Float) -> None:
    writer.write_double(value.value)


def _read_float(reader: ByteReader, context: DecodeContext) -> Float:
    return Float(value=reader.read_double())


def _write_string(writer: ByteWriter, value: String) -> None:
    writer.write_string(value.value)


def _read_string(reader: ByteReader, context: DecodeContext) -> String:
    return String(value=reader.read_string())


def _write_doc(writer: ByteWriter, value: Doc) -> None:
    write_document(writer, document_names(value.document), write_element)


def _read_doc(reader: ByteReader, context: DecodeContext) -> Doc:
    fields, _ = read_fields(reader, context.nested(reader.position))
    return Doc(document=fields)


def _write_array(writer: ByteWriter, value: Array) -> None:
    write_document(writer, array_names(value.values), write_element)


def _read_array(reader: ByteReader, context: DecodeContext) -> Array:
    offset = reader.position
    nested = context.nested(offset)
    items, _ = read_document(reader, lambda body: read_element(body, nested))

    names = [name for name, _ in items]
    bad_index = check_array_names(names)
    if bad_index is not None:
        if context.options.strict_array_keys:
            raise ArrayKeyError(
                f"Array element {bad_index} has key {names[bad_index]!r}", offset=offset
            )
        logger.debug(
            "Ignoring non-sequential array key %r at index %d (array at offset %d)",
            names[bad_index],
            bad_index,
            offset,
        )
    return Array(values=tuple(value for _, value in items))


def _write_binary(writer: ByteWriter, value: Binary) -> None:
    writer.write_int32(len(value.data))
    writer.write_byte(value.subtype)
    writer.write_bytes(value.data)


def _read_binary(reader: ByteReader, context: DecodeContext) -> Binary:
    start = reader.position
    length = reader.read_int32()
    if length < 0:
        raise LengthMismatchError(
            f"Invalid binary length {length}", declared=length, offset=start
        )
    subtype_offset = reader.position
    subtype = _binary_subtype(reader.read_byte(), subtype_offset)
    return Binary(subtype=subtype, data=reader.read_bytes(length))


def _binary_subtype(code: int, offset: int) -> BinarySubtype:
    if code in LEGACY_BINARY_SUBTYPES:
        subtype = LEGACY_BINARY_SUBTYPES[code]
        logger.debug(
            "Normalized legacy binary subtype 0x%02X to %s at offset %d", code, subtype.name, offset
        )
        return subtype
    try:
        return BinarySubtype(code)
    except ValueError:
        raise UnknownTagError(code, kind="binary subtype", offset=offset) from None


def _write_object_id(writer: ByteWriter, value: ObjectId) -> None:
    writer.write_uint32_be(value.timestamp)
    writer.write_uint64_be(value.counter)


def _read_object_id(reader: ByteReader, context: DecodeContext) -> ObjectId:
    timestamp = reader.read_uint32_be()
    return ObjectId(timestamp=timestamp, counter=reader.read_uint64_be())


def _write_bool(writer: ByteWriter, value: Bool) -> None:
    writer.write_byte(1 if value.value else 0)


def _read_bool(reader: ByteReader, context: DecodeContext) -> Bool:
    return Bool(value=reader.read_byte() != 0)


def datetime_to_millis(value: datetime) -> int:
    """Convert an aware datetime to milliseconds since the Unix epoch.

    Sub-millisecond precision is rounded half to even, using integer arithmetic
    so dates far from the epoch round exactly.
    """
    delta = value - _EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    millis, remainder = divmod(micros, 1000)
    if remainder > 500 or (remainder == 500 and millis % 2):
        millis += 1
    return millis


def millis_to_datetime(millis: int, offset: int | None = None) -> datetime:
    """Convert milliseconds since the Unix epoch to an aware UTC datetime.

    Raises:
        DecodeError: If the instant is outside the range of ``datetime``
    """
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError as e:
        raise DecodeError(f"UTC datetime {millis} ms is out of range", offset=offset) from e


def _write_utc(writer: ByteWriter, value: UTCDateTime) -> None:
    millis = datetime_to_millis(value.value)
    # Both ends of datetime's range can round, or shift by the UTC offset,
    # to an instant that datetime cannot hold
    try:
        millis_to_datetime(millis)
    except DecodeError as e:
        raise EncodeError(
            f"UTC datetime {value.value.isoformat()} is {millis} ms, outside the decodable range"
        ) from e
    writer.write_int64(millis)


def _read_utc(reader: ByteReader, context: DecodeContext) -> UTCDateTime:
    offset = reader.position
    return UTCDateTime(value=millis_to_datetime(reader.read_int64(), offset))


def _write_nothing(writer: ByteWriter, value: BsonValue) -> None:
    pass


def _read_null(reader: ByteReader, context: DecodeContext) -> Null:
    return Null()


def _read_min_key(reader: ByteReader, context: DecodeContext) -> MinKey:
    return MinKey()


def _read_max_key(reader: ByteReader, context: DecodeContext) -> MaxKey:
    return MaxKey()


def _write_regex(writer: ByteWriter, value: Regex) -> None:
    writer.write_cstring(value.pattern)
    writer.write_cstring(value.options)


def _read_regex(reader: ByteReader, context: DecodeContext) -> Regex:
    pattern = reader.read_cstring()
    return Regex(pattern=pattern, options=reader.read_cstring())


def _write_code(writer: ByteWriter, value: Javascript) -> None:
    writer.write_string(value.code)


def _read_code(reader: ByteReader, context: DecodeContext) -> Javascript:
    return Javascript(code=reader.read_string())


def _write_code_with_scope(writer: ByteWriter, value: Javascript) -> None:
    # int32 total (including itself), code string, scope document
    inner = ByteWriter()
    inner.write_string(value.code)
    write_document(inner, document_names(value.scope), write_element)
    writer.write_int32(len(inner) + 4)
    writer.write_bytes(inner.to_bytes())


def _read_code_with_scope(reader: ByteReader, context: DecodeContext) -> Javascript:
    start = reader.position
    total = reader.read_int32()
    if total < 4:
        raise LengthMismatchError(
            f"Invalid code-with-scope length {total}", declared=total, offset=start
        )
    body = reader.sub_reader(total - 4)
    code = body.read_string()
    scope, _ = read_fields(body, context.nested(body.position))
    if body.remaining():
        raise LengthMismatchError(
            f"Code with scope declares {total} bytes but uses {total - body.remaining()}",
            declared=total,
            actual=total - body.remaining(),
            offset=start,
        )
    return Javascript(code=code, scope=scope)


def _has_scope(value: Javascript) -> bool:
    return bool(value.scope)


def _has_no_scope(value: Javascript) -> bool:
    return not value.scope


def _write_symbol(writer: ByteWriter, value: Symbol) -> None:
    writer.write_string(value.value)


def _read_symbol(reader: ByteReader, context: DecodeContext) -> Symbol:
    return Symbol(value=reader.read_string())


def _write_int32(writer: ByteWriter, value: Int32) -> None:
    writer.write_int32(value.value)


def _read_int32(reader: ByteReader, context: DecodeContext) -> Int32:
    return Int32(value=reader.read_int32())


def _write_int64(writer: ByteWriter, value: Int64 | ReplicationTimestamp) -> None:
    writer.write_int64(value.value)


def _read_int64(reader: ByteReader, context: DecodeContext) -> Int64:
    return Int64(value=reader.read_int64())


def _read_timestamp(reader: ByteReader, context: DecodeContext) -> ReplicationTimestamp:
    return ReplicationTimestamp(value=reader.read_int64())


ELEMENT_CODECS: tuple[ElementCodec, ...] = (
    ElementCodec(ElementType.DOUBLE, Float, _write_float, _read_float),
    ElementCodec(ElementType.STRING, String, _write_string, _read_string),
    ElementCodec(ElementType.DOCUMENT, Doc, _write_doc, _read_doc),
    ElementCodec(ElementType.ARRAY, Array, _write_array, _read_array),
    ElementCodec(ElementType.BINARY, Binary, _write_binary, _read_binary),
    ElementCodec(ElementType.OBJECT_ID, ObjectId, _write_object_id, _read_object_id),
    ElementCodec(ElementType.BOOLEAN, Bool, _write_bool, _read_bool),
    ElementCodec(ElementType.UTC_DATETIME, UTCDateTime, _write_utc, _read_utc),
    ElementCodec(ElementType.NULL, Null, _write_nothing, _read_null),
    ElementCodec(ElementType.REGEX, Regex, _write_regex, _read_regex),
    ElementCodec(ElementType.JAVASCRIPT, Javascript, _write_code, _read_code, _has_no_scope),
    ElementCodec(ElementType.SYMBOL, Symbol, _write_symbol, _read_symbol),
    ElementCodec(
        ElementType.JAVASCRIPT_WITH_SCOPE,
        Javascript,
        _write_code_with_scope,
        _read_code_with_scope,
        _has_scope,
    ),
    ElementCodec(ElementType.INT32, Int32, _write_int32, _read_int32),
    ElementCodec(ElementType.TIMESTAMP, ReplicationTimestamp, _write_int64, _read_timestamp),
    ElementCodec(ElementType.INT64, Int64, _write_int64, _read_int64),
    ElementCodec(ElementType.MAX_KEY, MaxKey, _write_nothing, _read_max_key),
    ElementCodec(ElementType.MIN_KEY, MinKey, _write_nothing, _read_min_key),
)

_CODECS_BY_TAG: dict[int, ElementCodec] = {codec.tag: codec for codec in ELEMENT_CODECS}
_CODECS_BY_TYPE: dict[type, list[ElementCodec]] = {}
for _codec in ELEMENT_CODECS:
    _CODECS_BY_TYPE.setdefault(_codec.value_type, []).append(_codec)
