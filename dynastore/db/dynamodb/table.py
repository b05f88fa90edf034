from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .client import table_resource
from .retry import RetryPolicy, ddb_call


@dataclass(slots=True)
class ScanResult:
    items: list[dict[str, Any]] = field(default_factory=list)
    last_evaluated_key: dict[str, Any] | None = None


class DynamoTable:
    """Blocking wrapper over a boto3 ``Table`` with error mapping and retry."""

    def __init__(self, *, table_name: str, table: Any = None, retry_policy: RetryPolicy | None = None):
        self.table_name = str(table_name)
        self._table = table if table is not None else table_resource(self.table_name)
        self._retry_policy = retry_policy

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any] | None:
        def _op():
            resp = self._table.get_item(Key=key)
            return resp.get("Item")

        return ddb_call(
            "GetItem",
            _op,
            table_name=self.table_name,
            key=key,
            retry_policy=self._retry_policy,
        )

    def put_item(self, *, item: dict[str, Any]) -> None:
        def _op():
            self._table.put_item(Item=item)

        ddb_call("PutItem", _op, table_name=self.table_name, retry_policy=self._retry_policy)

    def scan_page(self, **kwargs: Any) -> ScanResult:
        """One Scan request; ``kwargs`` are boto3 Scan parameters minus TableName."""

        def _op():
            return self._table.scan(**kwargs)

        resp = ddb_call(
            "Scan",
            _op,
            table_name=self.table_name,
            key=kwargs.get("ExclusiveStartKey"),
            retry_policy=self._retry_policy,
        )
        return ScanResult(
            items=resp.get("Items") or [],
            last_evaluated_key=resp.get("LastEvaluatedKey") or None,
        )
