"""Immutable data model for BSON documents.

This module provides the value variants, Field and Document types consumed
and produced by the codec.
"""

from __future__ import annotations

from .base import BsonValue
from .values import (
    Array,
    Binary,
    BinarySubtype,
    Bool,
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

__all__ = [
    "BsonValue",
    "Value",
    "Field",
    "Document",
    "document",
    # Value variants
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
]
