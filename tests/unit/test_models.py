"""Unit tests for the BSON value model."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from bsonwire import (
    Array,
    Binary,
    BinarySubtype,
    Doc,
    Field,
    Int32,
    Int64,
    MaxKey,
    MinKey,
    Null,
    ObjectId,
    ReplicationTimestamp,
    String,
    UTCDateTime,
    document,
)


class TestValueModels:
    """Test construction and validation of value variants."""

    def test_values_are_frozen(self) -> None:
        """Test values cannot be mutated."""
        value = Int32(value=1)
        with pytest.raises(ValidationError):
            value.value = 2  # type: ignore[misc]

    def test_extra_fields_rejected(self) -> None:
        """Test misspelled attributes fail validation."""
        with pytest.raises(ValidationError):
            String(value="x", extra=1)  # type: ignore[call-arg]

    def test_int32_bounds(self) -> None:
        """Test Int32 only accepts signed 32-bit values."""
        assert Int32(value=2**31 - 1).value == 2**31 - 1
        assert Int32(value=-(2**31)).value == -(2**31)

        with pytest.raises(ValidationError):
            Int32(value=2**31)
        with pytest.raises(ValidationError):
            Int32(value=-(2**31) - 1)

    def test_int64_bounds(self) -> None:
        """Test Int64 and ReplicationTimestamp use signed 64-bit bounds."""
        with pytest.raises(ValidationError):
            Int64(value=2**63)
        with pytest.raises(ValidationError):
            ReplicationTimestamp(value=-(2**63) - 1)

    def test_naive_datetime_rejected(self) -> None:
        """Test UTCDateTime requires a timezone-aware datetime."""
        with pytest.raises(ValidationError):
            UTCDateTime(value=datetime(2024, 1, 1))

        aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert UTCDateTime(value=aware).value == aware

    def test_binary_defaults(self) -> None:
        """Test Binary defaults to an empty generic blob."""
        blob = Binary()
        assert blob.subtype == BinarySubtype.GENERIC
        assert blob.data == b""

    def test_binary_subtype_from_int(self) -> None:
        """Test subtypes may be given as their byte value."""
        assert Binary(subtype=0x80, data=b"x").subtype is BinarySubtype.USER_DEFINED

        with pytest.raises(ValidationError):
            Binary(subtype=0x03, data=b"x")

    def test_unit_variants_distinct(self) -> None:
        """Test Null, MinKey and MaxKey are different values."""
        assert Null() == Null()
        assert Null() != MinKey()
        assert MinKey() != MaxKey()

    def test_same_payload_different_variant(self) -> None:
        """Test equality includes the variant, not just the payload."""
        assert Int64(value=1) != ReplicationTimestamp(value=1)

    def test_hashable(self) -> None:
        """Test values can be used in sets."""
        values = {Int32(value=1), Int32(value=1), String(value="1")}
        assert len(values) == 2


class TestObjectId:
    """Test the ObjectId helpers."""

    def test_from_bytes(self) -> None:
        """Test the wire form splits into big-endian parts."""
        oid = ObjectId.from_bytes(bytes(range(1, 13)))

        assert oid.timestamp == 0x01020304
        assert oid.counter == 0x05060708090A0B0C
        assert oid.to_bytes() == bytes(range(1, 13))

    def test_hex(self) -> None:
        """Test the hexadecimal string form."""
        text = "507f1f77bcf86cd799439011"
        oid = ObjectId.from_hex(text)

        assert str(oid) == text
        assert oid.timestamp == 0x507F1F77

    def test_wrong_length(self) -> None:
        """Test inputs of the wrong size."""
        with pytest.raises(ValueError, match="12 bytes"):
            ObjectId.from_bytes(b"\x00" * 11)
        with pytest.raises(ValueError, match="24 characters"):
            ObjectId.from_hex("abc")

    def test_part_bounds(self) -> None:
        """Test each part must fit its width."""
        with pytest.raises(ValidationError):
            ObjectId(timestamp=2**32, counter=0)
        with pytest.raises(ValidationError):
            ObjectId(timestamp=0, counter=-1)


class TestFieldsAndDocuments:
    """Test Field and document construction."""

    def test_document_helper(self) -> None:
        """Test document() keeps pair order."""
        doc = document(("b", Int32(value=2)), ("a", Int32(value=1)))

        assert doc == (
            Field(name="b", value=Int32(value=2)),
            Field(name="a", value=Int32(value=1)),
        )

    def test_field_rejects_non_values(self) -> None:
        """Test a Field payload must be a BSON value variant."""
        with pytest.raises(ValidationError):
            Field(name="x", value=42)  # type: ignore[arg-type]

    def test_field_keeps_variant(self) -> None:
        """Test the union keeps the exact variant it was given."""
        assert type(Field(name="k", value=MinKey()).value) is MinKey
        assert type(Field(name="t", value=ReplicationTimestamp(value=5)).value) is (
            ReplicationTimestamp
        )

    def test_containers_coerce_lists(self) -> None:
        """Test lists are accepted where tuples are stored."""
        doc = Doc(document=[Field(name="a", value=Null())])
        array = Array(values=[Int32(value=1), String(value="x")])

        assert doc.document == (Field(name="a", value=Null()),)
        assert array.values == (Int32(value=1), String(value="x"))

    def test_nested_equality(self) -> None:
        """Test structurally equal nested values compare equal."""
        left = Doc(document=document(("a", Array(values=(Int32(value=1),)))))
        right = Doc(document=document(("a", Array(values=(Int32(value=1),)))))

        assert left == right
        assert hash(left) == hash(right)
