"""Item identity for a DynamoDB table.

A table is keyed either by a single partition attribute or by a
partition + sort pair. The schema picks the variant once; every key
that flows through the store is one of the two value objects below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .errors import DdbValidation


@dataclass(frozen=True, slots=True)
class SimpleKey:
    value: Any


@dataclass(frozen=True, slots=True)
class CompositeKey:
    partition: Any
    sort: Any


Key = Union[SimpleKey, CompositeKey]


def _require_name(name: str, *, what: str) -> None:
    if not isinstance(name, str) or not name:
        raise ValueError(f"Invalid {what} name {name!r}: must be a non-empty string")


@dataclass(frozen=True, slots=True)
class KeySchema:
    partition_key: str
    sort_key: str | None = None

    def __post_init__(self) -> None:
        # Key names only travel inside Key/ExclusiveStartKey maps and cursor
        # JSON, never in expressions, so any non-empty attribute name works.
        _require_name(self.partition_key, what="partition key")
        if self.sort_key is not None:
            _require_name(self.sort_key, what="sort key")
            if self.sort_key == self.partition_key:
                raise ValueError("sort key must differ from partition key")

    @property
    def is_composite(self) -> bool:
        return self.sort_key is not None

    @property
    def fields(self) -> tuple[str, ...]:
        """Key attribute names in canonical order (partition, then sort)."""
        if self.sort_key is None:
            return (self.partition_key,)
        return (self.partition_key, self.sort_key)

    def derive_key(self, item: Mapping[str, Any]) -> Key:
        """Extract the key of a full item (or of any mapping holding the key attributes)."""
        missing = [f for f in self.fields if f not in item]
        if missing:
            raise DdbValidation(message=f"Item is missing key attribute(s): {', '.join(missing)}")

        if self.sort_key is None:
            return SimpleKey(item[self.partition_key])
        return CompositeKey(item[self.partition_key], item[self.sort_key])

    # `LastEvaluatedKey` and decoded cursors are shaped exactly like items'
    # key attributes, so they go through the same extraction.
    from_params = derive_key

    def lookup_params(self, key: Key) -> dict[str, Any]:
        """Shape a key for GetItem / ExclusiveStartKey."""
        if self.sort_key is None:
            if not isinstance(key, SimpleKey):
                raise DdbValidation(message="Expected a simple key for this table")
            return {self.partition_key: key.value}

        if not isinstance(key, CompositeKey):
            raise DdbValidation(message="Expected a composite key for this table")
        return {self.partition_key: key.partition, self.sort_key: key.sort}

    def coerce(self, raw: Any) -> Key:
        """Accept a Key, a bare partition value (simple tables), or a key mapping."""
        if isinstance(raw, (SimpleKey, CompositeKey)):
            # Validate the variant against this schema.
            self.lookup_params(raw)
            return raw

        if isinstance(raw, Mapping):
            return self.derive_key(raw)

        if self.sort_key is None and raw is not None:
            return SimpleKey(raw)

        raise DdbValidation(message=f"Cannot interpret {raw!r} as a key for this table")
