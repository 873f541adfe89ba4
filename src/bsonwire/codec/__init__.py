"""BSON binary codec.

This module provides encoding and decoding of documents and single fields,
plus the primitive encoders for callers that build their own framing.
"""

from __future__ import annotations

from .decoder import (
    decode_all,
    decode_document,
    decode_document_with_size,
    decode_field,
    decode_iter,
)
from .elements import ELEMENT_CODECS, ElementType
from .encoder import encode_document, encode_document_with_size, encode_field
from .primitives import (
    ByteReader,
    ByteWriter,
    decode_byte,
    decode_cstring,
    decode_double,
    decode_int32,
    decode_int64,
    decode_string,
    encode_byte,
    encode_cstring,
    encode_double,
    encode_int32,
    encode_int64,
    encode_string,
)

__all__ = [
    "encode_document",
    "encode_document_with_size",
    "encode_field",
    "decode_document",
    "decode_document_with_size",
    "decode_field",
    "decode_iter",
    "decode_all",
    "ElementType",
    "ELEMENT_CODECS",
    "ByteReader",
    "ByteWriter",
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
]
