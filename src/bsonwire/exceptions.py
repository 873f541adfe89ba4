"""Exception hierarchy for bsonwire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BsonError for easy catching of any bsonwire-specific error.
"""

from __future__ import annotations


class BsonError(Exception):
    """Base exception for all bsonwire errors."""

    pass


class EncodeError(BsonError):
    """Raised when a value cannot be written as BSON.

    Examples:
        - Field name or regex part contains a NUL byte
        - Payload is not a BSON value model
        - Length does not fit in a signed 32-bit integer
        - Text cannot be encoded as UTF-8
    """

    pass


class DecodeError(BsonError):
    """Raised when BSON data is malformed.

    Attributes:
        offset: Byte offset into the input where the problem was detected,
            or None if unknown
    """

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at byte offset {offset})"
        super().__init__(message)
        self.offset = offset


class TruncatedInputError(DecodeError):
    """Raised when fewer bytes remain than a field or declared length requires."""

    def __init__(self, needed: int, available: int, *, offset: int | None = None) -> None:
        super().__init__(
            f"Truncated input: need {needed} bytes, only {available} available", offset=offset
        )
        self.needed = needed
        self.available = available


class UnterminatedStringError(DecodeError):
    """Raised when no NUL terminator is found before the end of the input."""

    pass


class UnknownTagError(DecodeError):
    """Raised for an element type or binary subtype byte outside the known set.

    Attributes:
        tag: The offending byte value
        kind: Either "element type" or "binary subtype"
    """

    def __init__(self, tag: int, *, kind: str = "element type", offset: int | None = None) -> None:
        super().__init__(f"Unknown BSON {kind} 0x{tag:02X}", offset=offset)
        self.tag = tag
        self.kind = kind


class LengthMismatchError(DecodeError):
    """Raised when a declared length disagrees with the bytes actually present.

    Examples:
        - Document does not end with a NUL terminator
        - Bytes left over between the end-of-fields marker and the declared end
        - String terminator missing where the length prefix says it should be
        - Scoped JavaScript total length differs from its contents
    """

    def __init__(
        self,
        message: str,
        *,
        declared: int | None = None,
        actual: int | None = None,
        offset: int | None = None,
    ) -> None:
        super().__init__(message, offset=offset)
        self.declared = declared
        self.actual = actual


class ArrayKeyError(DecodeError):
    """Raised in strict mode when an array key is not the expected index."""

    pass


class MaxDepthExceededError(DecodeError):
    """Raised when documents are nested deeper than the configured limit."""

    pass
