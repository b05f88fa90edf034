from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure the repo root is on sys.path so `import dynastore` works without installing.
ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

from dynastore.db.dynamodb.table import ScanResult  # noqa: E402


class RecordingClient:
    """In-process StoreClient that records calls and returns canned responses."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.get_result: dict[str, Any] | None = None
        self.scan_result = ScanResult()

    async def get_item(self, table_name: str, key: dict[str, Any]) -> dict[str, Any] | None:
        self.calls.append(("get_item", table_name, key))
        return self.get_result

    async def put_item(self, table_name: str, item: dict[str, Any]) -> None:
        self.calls.append(("put_item", table_name, item))

    async def scan(self, table_name: str, compiled) -> ScanResult:
        self.calls.append(("scan", table_name, compiled.scan_kwargs()))
        return self.scan_result

    def ops(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def client() -> RecordingClient:
    return RecordingClient()
