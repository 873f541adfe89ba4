"""Document framing shared by embedded documents and arrays.

A document on the wire is ``int32 total_length``, a run of elements, and a NUL
terminator, where ``total_length`` counts all of it. Arrays use the same frame
with names generated from element positions, so both go through one writer and
one reader here. The element codec itself is passed in, which keeps this
module independent of the tag table.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Sequence

from ..exceptions import LengthMismatchError
from .primitives import ByteReader, ByteWriter

# Length field (4 bytes) + terminator (1 byte)
FRAME_OVERHEAD = 5

ElementWriter = Callable[[ByteWriter, str, Any], None]
ElementReader = Callable[[ByteReader], tuple[str, Any]]


def document_names(fields: Iterable[Any]) -> Iterator[tuple[str, Any]]:
    """Name strategy for documents: each field keeps its own name."""
    for field in fields:
        yield field.name, field.value


def array_names(values: Iterable[Any]) -> Iterator[tuple[str, Any]]:
    """Name strategy for arrays: names are the decimal element positions."""
    for index, value in enumerate(values):
        yield str(index), value


def write_document(
    writer: ByteWriter, items: Iterable[tuple[str, Any]], write_element: ElementWriter
) -> int:
    """Write a framed document and return its declared length.

    Elements are written to a scratch buffer first so the length prefix can be
    computed before anything reaches ``writer``.

    Args:
        writer: Destination buffer
        items: ``(name, value)`` pairs in wire order
        write_element: Callable that writes one element to a buffer

    Returns:
        The declared length, which equals the number of bytes written
    """
    body = ByteWriter()
    for name, value in items:
        write_element(body, name, value)

    length = len(body) + FRAME_OVERHEAD
    writer.write_int32(length)
    writer.write_bytes(body.to_bytes())
    writer.write_byte(0)
    return length


def read_document(
    reader: ByteReader, read_element: ElementReader
) -> tuple[list[tuple[str, Any]], int]:
    """Read one framed document.

    The reader is advanced by exactly the declared length. Elements are parsed
    from a reader bounded to that span, so a payload can never run past the end
    of its document.

    Returns:
        Tuple of (list of ``(name, value)`` pairs, declared length)

    Raises:
        LengthMismatchError: If the frame is shorter than 5 bytes, lacks its
            terminator, or has bytes left after the end-of-elements marker
        TruncatedInputError: If the input ends before the declared length
    """
    start = reader.position
    length = reader.read_int32()
    if length < FRAME_OVERHEAD:
        raise LengthMismatchError(
            f"Invalid document length {length}", declared=length, offset=start
        )

    body = reader.sub_reader(length - 4)
    if body.byte_at(body.end - 1) != 0:
        raise LengthMismatchError(
            f"Document of declared length {length} is not NUL-terminated",
            declared=length,
            offset=body.end - 1,
        )

    items: list[tuple[str, Any]] = []
    while body.peek_byte() != 0:
        items.append(read_element(body))

    terminator = body.position
    body.read_byte()
    if body.remaining():
        raise LengthMismatchError(
            f"Document declares {length} bytes but its elements end after "
            f"{terminator + 1 - start}",
            declared=length,
            actual=terminator + 1 - start,
            offset=terminator,
        )
    return items, length


def check_array_names(names: Sequence[str]) -> int | None:
    """Return the index of the first non-canonical array name, or None."""
    for index, name in enumerate(names):
        if name != str(index):
            return index
    return None
