"""Decoder configuration.

Encoding has nothing to configure: the wire layout of every value is fixed.
Decoding has a few knobs for how forgiving to be with input from elsewhere.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CodecOptions(BaseModel):
    """Options controlling how BSON data is decoded.

    Attributes:
        strict_array_keys: Reject arrays whose element names are not exactly
            "0", "1", "2", ... in order. By default names are ignored.
        max_depth: Maximum nesting of documents, arrays and scopes.
        unicode_decode_error_handler: Error handler for invalid UTF-8, as
            accepted by ``bytes.decode``.

    Example:
        >>> from bsonwire import CodecOptions, decode_document
        >>> strict = CodecOptions(strict_array_keys=True)
        >>> decode_document(data, options=strict)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strict_array_keys: bool = False
    max_depth: int = Field(default=100, ge=1)
    unicode_decode_error_handler: Literal["strict", "replace", "ignore"] = "strict"


DEFAULT_CODEC_OPTIONS = CodecOptions()
