"""Encoded size calculation utilities.

This module provides functions to measure how many bytes a document, or each
of its fields, occupies on the wire.
"""

from __future__ import annotations

from ..codec.encoder import encode_document_with_size, encode_field
from ..models import Document


def encoded_size(document: Document) -> int:
    """Calculate the encoded size of a document in bytes.

    This is the value of the document's leading length field.

    Example:
        >>> encoded_size(document(("a", Int32(value=1))))
        12
    """
    _, length = encode_document_with_size(document)
    return length


def field_sizes(document: Document) -> list[tuple[str, int]]:
    """Get the encoded size in bytes of each top-level field.

    Sizes include the tag byte and the name. A list is returned rather than a
    dict because documents may repeat a name.

    Example:
        >>> field_sizes(document(("a", Int32(value=1)), ("b", String(value="x"))))
        [('a', 7), ('b', 9)]
    """
    return [(field.name, len(encode_field(field))) for field in document]
