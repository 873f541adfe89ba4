"""BSON decoder.

This module provides the functions that parse BSON bytes back into Fields and
Documents. Malformed input always raises a DecodeError subclass naming the
problem and the byte offset where it was found; nothing is skipped or repaired.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, TypeVar

from ..exceptions import LengthMismatchError, MaxDepthExceededError
from ..models import Document, Field
from ..options import DEFAULT_CODEC_OPTIONS, CodecOptions
from .elements import DecodeContext, read_element, read_fields
from .primitives import ByteReader

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decode_field(
    data: bytes | bytearray | memoryview,
    offset: int = 0,
    options: CodecOptions | None = None,
) -> tuple[Field, int]:
    """Decode a single element starting at ``offset``.

    Args:
        data: Buffer holding the element
        offset: Position of the element's tag byte
        options: Decoder options (default: ``DEFAULT_CODEC_OPTIONS``)

    Returns:
        Tuple of (Field, number of bytes consumed)

    Raises:
        UnknownTagError: If the tag byte (or a binary subtype) is not recognized
        TruncatedInputError: If the element runs past the end of ``data``
        DecodeError: For any other malformed input
    """
    reader, context = _start(data, offset, options)

    def read() -> Field:
        name, value = read_element(reader, context)
        return Field(name=name, value=value)

    field = _guarded(read)
    return field, reader.position - offset


def decode_document_with_size(
    data: bytes | bytearray | memoryview,
    offset: int = 0,
    options: CodecOptions | None = None,
) -> tuple[Document, int]:
    """Decode one document starting at ``offset``, ignoring anything after it.

    Returns:
        Tuple of (Document, declared length in bytes)

    Raises:
        LengthMismatchError: If the declared length disagrees with the contents
        TruncatedInputError: If ``data`` ends before the declared length
        DecodeError: For any other malformed input
    """
    reader, context = _start(data, offset, options)
    return _guarded(lambda: read_fields(reader, context))


def decode_document(
    data: bytes | bytearray | memoryview, options: CodecOptions | None = None
) -> Document:
    """Decode a buffer holding exactly one BSON document.

    Args:
        data: BSON bytes
        options: Decoder options (default: ``DEFAULT_CODEC_OPTIONS``)

    Returns:
        The document's fields, in wire order

    Raises:
        LengthMismatchError: If the declared length is not the buffer length
        DecodeError: If the data is malformed in any other way

    Example:
        >>> from bsonwire import decode_document
        >>> decode_document(b"\\x0c\\x00\\x00\\x00\\x10a\\x00\\x01\\x00\\x00\\x00\\x00")
        (Field(name='a', value=Int32(value=1)),)
    """
    document, length = decode_document_with_size(data, 0, options)
    if length != len(data):
        raise LengthMismatchError(
            f"Document declares {length} bytes but the buffer holds {len(data)}",
            declared=length,
            actual=len(data),
            offset=length,
        )
    return document


def decode_iter(
    data: bytes | bytearray | memoryview, options: CodecOptions | None = None
) -> Iterator[Document]:
    """Lazily decode a buffer of concatenated BSON documents.

    Raises:
        DecodeError: As soon as a malformed document is reached
    """
    if not isinstance(data, bytes):
        data = bytes(data)
    position = 0
    count = 0
    while position < len(data):
        document, length = decode_document_with_size(data, position, options)
        position += length
        count += 1
        yield document
    logger.debug("Decoded %d documents from %d bytes", count, len(data))


def decode_all(
    data: bytes | bytearray | memoryview, options: CodecOptions | None = None
) -> list[Document]:
    """Decode a buffer of concatenated BSON documents.

    Example:
        >>> from bsonwire import decode_all, encode_document
        >>> decode_all(encode_document(()) + encode_document(()))
        [(), ()]
    """
    return list(decode_iter(data, options))


def _start(
    data: bytes | bytearray | memoryview, offset: int, options: CodecOptions | None
) -> tuple[ByteReader, DecodeContext]:
    options = options or DEFAULT_CODEC_OPTIONS
    reader = ByteReader(data, offset, unicode_errors=options.unicode_decode_error_handler)
    return reader, DecodeContext(options)


def _guarded(read: Callable[[], T]) -> T:
    try:
        return read()
    except RecursionError as e:
        raise MaxDepthExceededError("Document nesting exceeds the interpreter stack") from e
