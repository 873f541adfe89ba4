"""Tests for encoded size utilities."""

from __future__ import annotations

from bsonwire import Document, Doc, Int32, Null, document, encode_document, encoded_size, field_sizes


def test_encoded_size(sample_document: Document) -> None:
    """Test size matches the length prefix."""
    assert encoded_size(sample_document) == 21


def test_encoded_size_empty() -> None:
    """Test the empty document is five bytes."""
    assert encoded_size(()) == 5


def test_encoded_size_matches_encoding() -> None:
    """Test size agrees with the encoder for nested documents."""
    doc = document(("outer", Doc(document=document(("inner", Null())))), ("n", Int32(value=3)))
    assert encoded_size(doc) == len(encode_document(doc))


def test_field_sizes(sample_document: Document) -> None:
    """Test per-field sizes include tag and name."""
    assert field_sizes(sample_document) == [("a", 7), ("b", 9)]


def test_field_sizes_sum() -> None:
    """Test field sizes plus framing give the document size."""
    doc = document(("x", Null()), ("x", Int32(value=0)), ("longer_name", Null()))
    sizes = field_sizes(doc)

    assert [name for name, _ in sizes] == ["x", "x", "longer_name"]
    assert sum(size for _, size in sizes) + 5 == encoded_size(doc)


def test_field_sizes_empty() -> None:
    """Test an empty document has no fields."""
    assert field_sizes(()) == []
