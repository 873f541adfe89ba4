"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from bsonwire import Document, Int32, String, document


@pytest.fixture
def sample_document() -> Document:
    """Two-field document used throughout the suite."""
    return document(("a", Int32(value=1)), ("b", String(value="x")))


@pytest.fixture
def sample_bytes() -> bytes:
    """Exact BSON encoding of ``sample_document``."""
    return (
        b"\x15\x00\x00\x00"  # total length 21
        b"\x10a\x00\x01\x00\x00\x00"  # a: int32 1
        b"\x02b\x00\x02\x00\x00\x00x\x00"  # b: string "x"
        b"\x00"
    )
