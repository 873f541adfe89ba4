"""BSON file dump CLI command."""

from __future__ import annotations

import json
from pathlib import Path

from ..codec.decoder import decode_iter
from ..models import (
    Array,
    Binary,
    Bool,
    Doc,
    Document,
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
)
from ..options import CodecOptions
from ..utils.sizing import encoded_size, field_sizes


def dump_file(file_path: Path, options: CodecOptions | None = None) -> int:
    """Print every document in a file of concatenated BSON.

    Args:
        file_path: Path to the BSON file
        options: Decoder options

    Returns:
        Number of documents printed
    """
    data = file_path.read_bytes()

    count = 0
    for document in decode_iter(data, options):
        count += 1
        dump_document(document, count)

    print(f"{count} document{'s' if count != 1 else ''} in {file_path} ({len(data)} bytes).")
    return count


def dump_document(document: Document, index: int) -> None:
    """Print one document with the encoded size of each top-level field.

    Args:
        document: Decoded document
        index: 1-based position of the document in its file
    """
    print(f"{'=' * 19} document {index}: {encoded_size(document)} bytes {'=' * 19}")
    print(render_document(document))

    if document:
        print()
        print(f"{'Field':<30} {'Bytes':>8}")
        print("-" * 39)
        for name, size in field_sizes(document):
            print(f"{name:<30} {size:>8}")
    print()


def render_document(document: Document) -> str:
    """Render a document in a compact extended-JSON-like notation."""
    members = ", ".join(f"{json.dumps(field.name)}: {render_value(field.value)}" for field in document)
    return "{" + members + "}"


def render_value(value: Value) -> str:
    """Render a single value."""
    if isinstance(value, (Float, Int32)):
        return repr(value.value)
    if isinstance(value, String):
        return json.dumps(value.value)
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Null):
        return "null"
    if isinstance(value, Doc):
        return render_document(value.document)
    if isinstance(value, Array):
        return "[" + ", ".join(render_value(item) for item in value.values) + "]"
    if isinstance(value, Binary):
        return f"Binary({value.subtype.name}, {value.data.hex()!r})"
    if isinstance(value, ObjectId):
        return f"ObjectId({str(value)!r})"
    if isinstance(value, UTCDateTime):
        return f"Date({value.value.isoformat()!r})"
    if isinstance(value, Regex):
        return f"/{value.pattern}/{value.options}"
    if isinstance(value, Javascript):
        if value.scope:
            return f"Code({json.dumps(value.code)}, {render_document(value.scope)})"
        return f"Code({json.dumps(value.code)})"
    if isinstance(value, Symbol):
        return f"Symbol({json.dumps(value.value)})"
    if isinstance(value, Int64):
        return f"NumberLong({value.value})"
    if isinstance(value, ReplicationTimestamp):
        return f"Timestamp({value.value})"
    if isinstance(value, MinKey):
        return "MinKey"
    if isinstance(value, MaxKey):
        return "MaxKey"
    raise TypeError(f"Unsupported value type {type(value).__name__}")
