"""Byte-level packing and unpacking of BSON primitives.

This module provides the fixed-width and length-prefixed building blocks used by
the element codec. Integers and doubles are little-endian; the only big-endian
values are the two ObjectId parts.

The ``encode_*``/``decode_*`` functions at the bottom are thin wrappers for
callers that build their own framing around BSON data.
"""

from __future__ import annotations

import struct
from typing import Any, Callable, TypeVar

from ..exceptions import (
    DecodeError,
    EncodeError,
    LengthMismatchError,
    TruncatedInputError,
    UnterminatedStringError,
)

T = TypeVar("T")

_INT32 = struct.Struct("<i")
_INT64 = struct.Struct("<q")
_DOUBLE = struct.Struct("<d")
_UINT32_BE = struct.Struct(">I")
_UINT64_BE = struct.Struct(">Q")

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class ByteWriter:
    """Appends BSON primitives to a growing byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_int32(1)
        >>> writer.write_cstring("a")
        >>> writer.to_bytes()
        b'\\x01\\x00\\x00\\x00a\\x00'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def write_byte(self, value: int) -> None:
        """Write a single unsigned byte (0-255)."""
        if not 0 <= value <= 0xFF:
            raise EncodeError(f"Byte value out of range: {value}")
        self._buffer.append(value)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes."""
        self._buffer.extend(data)

    def write_int32(self, value: int) -> None:
        """Write a signed 32-bit little-endian integer.

        Raises:
            EncodeError: If value doesn't fit in 32 bits
        """
        if not INT32_MIN <= value <= INT32_MAX:
            raise EncodeError(f"Value {value} does not fit in a signed 32-bit integer")
        self._buffer.extend(_INT32.pack(value))

    def write_int64(self, value: int) -> None:
        """Write a signed 64-bit little-endian integer.

        Raises:
            EncodeError: If value doesn't fit in 64 bits
        """
        if not INT64_MIN <= value <= INT64_MAX:
            raise EncodeError(f"Value {value} does not fit in a signed 64-bit integer")
        self._buffer.extend(_INT64.pack(value))

    def write_uint32_be(self, value: int) -> None:
        """Write an unsigned 32-bit big-endian integer."""
        try:
            self._buffer.extend(_UINT32_BE.pack(value))
        except struct.error as e:
            raise EncodeError(f"Value {value} does not fit in an unsigned 32-bit integer") from e

    def write_uint64_be(self, value: int) -> None:
        """Write an unsigned 64-bit big-endian integer."""
        try:
            self._buffer.extend(_UINT64_BE.pack(value))
        except struct.error as e:
            raise EncodeError(f"Value {value} does not fit in an unsigned 64-bit integer") from e

    def write_double(self, value: float) -> None:
        """Write a 64-bit IEEE-754 little-endian float."""
        self._buffer.extend(_DOUBLE.pack(value))

    def write_cstring(self, value: str) -> None:
        """Write UTF-8 text followed by a NUL byte.

        Raises:
            EncodeError: If the text contains a NUL or is not encodable as UTF-8
        """
        data = _encode_utf8(value)
        if b"\x00" in data:
            # The NUL would end the string early and shift every following byte.
            raise EncodeError(f"cstring may not contain NUL bytes: {value!r}")
        self._buffer.extend(data)
        self._buffer.append(0)

    def write_string(self, value: str) -> None:
        """Write a length-prefixed UTF-8 string.

        The prefix counts the payload plus its trailing NUL.
        """
        data = _encode_utf8(value)
        self.write_int32(len(data) + 1)
        self._buffer.extend(data)
        self._buffer.append(0)

    def to_bytes(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._buffer)


class ByteReader:
    """Reads BSON primitives from a bounded window of a byte buffer.

    Positions are always absolute offsets into the original buffer, so errors
    raised from nested readers point at the right byte.

    Example:
        >>> reader = ByteReader(b"\\x01\\x00\\x00\\x00a\\x00")
        >>> reader.read_int32()
        1
        >>> reader.read_cstring()
        'a'
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        start: int = 0,
        end: int | None = None,
        *,
        unicode_errors: str = "strict",
    ) -> None:
        """Initialize a reader over ``data[start:end]``.

        Args:
            data: Buffer to read from
            start: Absolute offset of the first readable byte
            end: Absolute offset one past the last readable byte (default: end of data)
            unicode_errors: Error handler passed to ``bytes.decode`` for text
        """
        self._data = data if isinstance(data, bytes) else bytes(data)
        self._end = len(self._data) if end is None else end
        if not 0 <= start <= self._end <= len(self._data):
            raise DecodeError(
                f"Invalid window [{start}, {self._end}) for a buffer of {len(self._data)} bytes",
                offset=start,
            )
        self._position = start
        self._unicode_errors = unicode_errors

    @property
    def position(self) -> int:
        """Current absolute read offset."""
        return self._position

    @property
    def end(self) -> int:
        """Absolute offset one past the last readable byte."""
        return self._end

    def remaining(self) -> int:
        """Return the number of unread bytes in this window."""
        return self._end - self._position

    def _require(self, num_bytes: int) -> None:
        if num_bytes < 0:
            raise LengthMismatchError(
                f"Negative length {num_bytes}", declared=num_bytes, offset=self._position
            )
        if self._position + num_bytes > self._end:
            raise TruncatedInputError(num_bytes, self.remaining(), offset=self._position)

    def byte_at(self, offset: int) -> int:
        """Return the byte at an absolute offset inside this window."""
        if not self._position <= offset < self._end:
            raise TruncatedInputError(1, 0, offset=offset)
        return self._data[offset]

    def peek_byte(self) -> int:
        """Return the next byte without consuming it."""
        self._require(1)
        return self._data[self._position]

    def read_byte(self) -> int:
        """Read a single unsigned byte."""
        self._require(1)
        value = self._data[self._position]
        self._position += 1
        return value

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read exactly ``num_bytes`` raw bytes.

        Raises:
            TruncatedInputError: If not enough bytes are available
        """
        self._require(num_bytes)
        value = self._data[self._position : self._position + num_bytes]
        self._position += num_bytes
        return value

    def _unpack(self, fmt: struct.Struct) -> int | float:
        self._require(fmt.size)
        (value,) = fmt.unpack_from(self._data, self._position)
        self._position += fmt.size
        return value

    def read_int32(self) -> int:
        return int(self._unpack(_INT32))

    def read_int64(self) -> int:
        return int(self._unpack(_INT64))

    def read_uint32_be(self) -> int:
        return int(self._unpack(_UINT32_BE))

    def read_uint64_be(self) -> int:
        return int(self._unpack(_UINT64_BE))

    def read_double(self) -> float:
        return float(self._unpack(_DOUBLE))

    def read_cstring(self) -> str:
        """Read UTF-8 text up to (and consuming) the next NUL byte.

        Raises:
            UnterminatedStringError: If no NUL occurs before the end of the window
        """
        start = self._position
        terminator = self._data.find(b"\x00", start, self._end)
        if terminator < 0:
            raise UnterminatedStringError("Unterminated cstring", offset=start)
        self._position = terminator + 1
        return self._decode_utf8(self._data[start:terminator], start)

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 string.

        Raises:
            LengthMismatchError: If the length is < 1 or the terminator is missing
            TruncatedInputError: If the payload runs past the end of the window
        """
        start = self._position
        length = self.read_int32()
        if length < 1:
            raise LengthMismatchError(
                f"Invalid string length {length}", declared=length, offset=start
            )
        payload_offset = self._position
        payload = self.read_bytes(length - 1)
        if self.read_byte() != 0:
            raise LengthMismatchError(
                f"String of declared length {length} is not NUL-terminated",
                declared=length,
                offset=start,
            )
        return self._decode_utf8(payload, payload_offset)

    def sub_reader(self, num_bytes: int) -> ByteReader:
        """Return a reader over the next ``num_bytes`` bytes and skip past them.

        Raises:
            TruncatedInputError: If fewer than ``num_bytes`` bytes remain
        """
        self._require(num_bytes)
        child = ByteReader(
            self._data,
            self._position,
            self._position + num_bytes,
            unicode_errors=self._unicode_errors,
        )
        self._position += num_bytes
        return child

    def _decode_utf8(self, raw: bytes, offset: int) -> str:
        try:
            return raw.decode("utf-8", self._unicode_errors)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 in string: {e.reason}", offset=offset + e.start) from e


def _encode_utf8(value: str) -> bytes:
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodeError(f"Text is not encodable as UTF-8: {e}") from e


# --- Functional forms ---


def _encode_with(write: Callable[[ByteWriter, Any], None], value: Any) -> bytes:
    writer = ByteWriter()
    write(writer, value)
    return writer.to_bytes()


def _decode_with(read: Callable[[ByteReader], T], data: bytes, offset: int) -> tuple[T, int]:
    reader = ByteReader(data, offset)
    value = read(reader)
    return value, reader.position - offset


def encode_byte(value: int) -> bytes:
    """Encode a single unsigned byte."""
    return _encode_with(ByteWriter.write_byte, value)


def decode_byte(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a single unsigned byte.

    Returns:
        Tuple of (value, 1)
    """
    return _decode_with(ByteReader.read_byte, data, offset)


def encode_int32(value: int) -> bytes:
    """Encode a signed 32-bit little-endian integer."""
    return _encode_with(ByteWriter.write_int32, value)


def decode_int32(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a signed 32-bit little-endian integer.

    Returns:
        Tuple of (value, bytes consumed)
    """
    return _decode_with(ByteReader.read_int32, data, offset)


def encode_int64(value: int) -> bytes:
    """Encode a signed 64-bit little-endian integer."""
    return _encode_with(ByteWriter.write_int64, value)


def decode_int64(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a signed 64-bit little-endian integer.

    Returns:
        Tuple of (value, bytes consumed)
    """
    return _decode_with(ByteReader.read_int64, data, offset)


def encode_double(value: float) -> bytes:
    """Encode a little-endian IEEE-754 double."""
    return _encode_with(ByteWriter.write_double, value)


def decode_double(data: bytes, offset: int = 0) -> tuple[float, int]:
    """Decode a little-endian IEEE-754 double. NaN and infinities pass through.

    Returns:
        Tuple of (value, 8)
    """
    return _decode_with(ByteReader.read_double, data, offset)


def encode_cstring(value: str) -> bytes:
    """Encode text as UTF-8 followed by a NUL byte."""
    return _encode_with(ByteWriter.write_cstring, value)


def decode_cstring(data: bytes, offset: int = 0) -> tuple[str, int]:
    """Decode a NUL-terminated UTF-8 string.

    Returns:
        Tuple of (text, bytes consumed including the NUL)
    """
    return _decode_with(ByteReader.read_cstring, data, offset)


def encode_string(value: str) -> bytes:
    """Encode text as int32 length, UTF-8 bytes and a trailing NUL."""
    return _encode_with(ByteWriter.write_string, value)


def decode_string(data: bytes, offset: int = 0) -> tuple[str, int]:
    """Decode a length-prefixed UTF-8 string.

    Returns:
        Tuple of (text, bytes consumed including prefix and NUL)
    """
    return _decode_with(ByteReader.read_string, data, offset)
