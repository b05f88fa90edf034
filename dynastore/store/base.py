"""
Base store interface.

Every backend implements this interface on its own; there is no shared
state in the base class, so stores are interchangeable behind it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

ItemT = TypeVar("ItemT")
KeyT = TypeVar("KeyT")
QueryT = TypeVar("QueryT")


@dataclass
class Edge(Generic[ItemT]):
    node: ItemT
    cursor: str


@dataclass
class Page(Generic[ItemT]):
    cursor: str | None
    edges: list[Edge[ItemT]] = field(default_factory=list)
    items: list[ItemT] = field(default_factory=list)


class Store(ABC, Generic[ItemT, KeyT, QueryT]):
    """Base store interface."""

    @abstractmethod
    async def get(self, key: KeyT) -> ItemT | None:
        """Get an item by key; None when it does not exist."""

    @abstractmethod
    async def create(self, item: ItemT) -> None:
        """Store a new item."""

    @abstractmethod
    async def update(self, item: ItemT) -> None:
        """Replace an existing item."""

    @abstractmethod
    async def find(self, query: QueryT | Any = None) -> Page[ItemT]:
        """Return one page of items matching the query."""

    async def clear(self) -> None:
        pass

    async def setup(self) -> None:
        pass

    async def teardown(self) -> None:
        pass
