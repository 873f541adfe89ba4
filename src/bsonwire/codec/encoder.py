"""BSON encoder.

This module provides the functions that turn Fields and Documents into BSON
bytes. Encoding is total over valid values; the only failures are violated
preconditions such as a NUL inside a field name.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, TypeVar

from ..exceptions import EncodeError
from ..models import Document, Field, Value
from .elements import write_element
from .framing import write_document
from .primitives import ByteWriter

T = TypeVar("T")


def encode_field(field: Field) -> bytes:
    """Encode a single element: tag byte, name cstring and payload.

    Args:
        field: Field to encode

    Returns:
        Element bytes, without any document framing

    Raises:
        EncodeError: If the name contains NUL or the value is not a BSON value

    Example:
        >>> from bsonwire import Field, Int32, encode_field
        >>> encode_field(Field(name="a", value=Int32(value=1)))
        b'\\x10a\\x00\\x01\\x00\\x00\\x00'
    """
    _check_field(field)
    writer = ByteWriter()
    _guarded(lambda: write_element(writer, field.name, field.value))
    return writer.to_bytes()


def encode_document_with_size(document: Document) -> tuple[bytes, int]:
    """Encode a document and also return its declared length.

    Returns:
        Tuple of (encoded bytes, value of the leading int32 length field)
    """
    writer = ByteWriter()
    length = _guarded(lambda: write_document(writer, _items(document), write_element))
    return writer.to_bytes(), length


def encode_document(document: Document) -> bytes:
    """Encode a document to BSON.

    Fields are written in the given order. The result starts with its own
    total length as a little-endian int32 and ends with a NUL byte.

    Args:
        document: Sequence of Fields

    Returns:
        BSON bytes

    Raises:
        EncodeError: If a field name contains NUL, a value is not a BSON value,
            or nesting is too deep for the interpreter stack

    Example:
        >>> from bsonwire import Int32, String, document, encode_document
        >>> encode_document(document(("a", Int32(value=1)), ("b", String(value="x"))))
        b'\\x15\\x00\\x00\\x00\\x10a\\x00\\x01\\x00\\x00\\x00\\x02b\\x00\\x02\\x00\\x00\\x00x\\x00\\x00'
    """
    return encode_document_with_size(document)[0]


def _items(document: Iterable[Field]) -> Iterator[tuple[str, Value]]:
    for field in document:
        _check_field(field)
        yield field.name, field.value


def _check_field(field: object) -> None:
    if not isinstance(field, Field):
        raise EncodeError(f"Expected a Field, got {type(field).__name__}: {field!r}")


def _guarded(write: Callable[[], T]) -> T:
    try:
        return write()
    except RecursionError as e:
        raise EncodeError("Document nesting exceeds the interpreter stack") from e
