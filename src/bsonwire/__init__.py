"""bsonwire: BSON Binary Codec

A Python library that encodes documents to the BSON 1.0 wire format and parses
them back, byte for byte compatible with any conforming BSON reader or writer.

Key Features:
- Pydantic-based immutable value model covering every BSON 1.0 element type
- One tag table driving both encoding and decoding
- Strict framing checks with precise error offsets on malformed input
- Pure Python implementation (no C extensions)

Quick Start:
    >>> from bsonwire import Int32, String, document, encode_document, decode_document
    >>>
    >>> doc = document(("a", Int32(value=1)), ("b", String(value="x")))
    >>> data = encode_document(doc)
    >>> decode_document(data) == doc
    True

Wire format reference: https://bsonspec.org
"""

from __future__ import annotations

from .codec import (
    decode_all,
    decode_byte,
    decode_cstring,
    decode_document,
    decode_document_with_size,
    decode_double,
    decode_field,
    decode_int32,
    decode_int64,
    decode_iter,
    decode_string,
    encode_byte,
    encode_cstring,
    encode_document,
    encode_document_with_size,
    encode_double,
    encode_field,
    encode_int32,
    encode_int64,
    encode_string,
    ElementType,
)
from .exceptions import (
    ArrayKeyError,
    BsonError,
    DecodeError,
    EncodeError,
    LengthMismatchError,
    MaxDepthExceededError,
    TruncatedInputError,
    UnknownTagError,
    UnterminatedStringError,
)
from .models import (
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
    document,
)
from .options import DEFAULT_CODEC_OPTIONS, CodecOptions
from .utils import encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode_document",
    "decode_document",
    "encode_field",
    "decode_field",
    "encode_document_with_size",
    "decode_document_with_size",
    "decode_iter",
    "decode_all",
    "ElementType",
    # Primitives
    "encode_byte",
    "decode_byte",
    "encode_int32",
    "decode_int32",
    "encode_int64",
    "decode_int64",
    "encode_double",
    "decode_double",
    "encode_cstring",
    "decode_cstring",
    "encode_string",
    "decode_string",
    # Data model
    "BsonValue",
    "Value",
    "Field",
    "Document",
    "document",
    "Float",
    "String",
    "Doc",
    "Array",
    "Binary",
    "BinarySubtype",
    "ObjectId",
    "Bool",
    "UTCDateTime",
    "Null",
    "Regex",
    "Javascript",
    "Symbol",
    "Int32",
    "Int64",
    "ReplicationTimestamp",
    "MinKey",
    "MaxKey",
    # Options
    "CodecOptions",
    "DEFAULT_CODEC_OPTIONS",
    # Exceptions
    "BsonError",
    "EncodeError",
    "DecodeError",
    "TruncatedInputError",
    "UnterminatedStringError",
    "UnknownTagError",
    "LengthMismatchError",
    "ArrayKeyError",
    "MaxDepthExceededError",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Version
    "__version__",
]
