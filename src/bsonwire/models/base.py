"""Base class and pydantic configuration shared by all BSON value models.

This module provides the BsonValue class that every value variant inherits from.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BsonValue(BaseModel):
    """Base class for all BSON value variants.

    Values are immutable once constructed: they are frozen pydantic models, so
    they compare by content, hash consistently and can be shared between threads
    without copying.

    Example:
        >>> from bsonwire.models import Int32
        >>> Int32(value=7) == Int32(value=7)
        True
    """

    model_config = ConfigDict(
        # Values are plain data; never mutate after construction
        frozen=True,
        # Reject misspelled fields
        extra="forbid",
        # Allow lax coercion (e.g. list -> tuple) like the rest of the package
        strict=False,
    )
