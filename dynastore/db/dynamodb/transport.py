"""The store's view of DynamoDB: three async calls.

`StoreClient` is what `DynamoDBStore` talks to. `BotoStoreClient` is the
production implementation; tests substitute their own.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Protocol

import anyio.to_thread

from ...settings import StoreSettings
from .client import table_resource
from .retry import RetryPolicy
from .table import DynamoTable, ScanResult

if TYPE_CHECKING:
    from ...query import CompiledQuery


class StoreClient(Protocol):
    async def get_item(self, table_name: str, key: dict[str, Any]) -> dict[str, Any] | None: ...

    async def put_item(self, table_name: str, item: dict[str, Any]) -> None: ...

    async def scan(self, table_name: str, compiled: CompiledQuery) -> ScanResult: ...


class BotoStoreClient:
    """Runs boto3 calls on a worker thread so the event loop never blocks.

    Retry/backoff for throttling lives here (see `ddb_call`); callers see
    either a result or a mapped `DdbTransportError`.
    """

    def __init__(
        self,
        *,
        retry_policy: RetryPolicy | None = None,
        settings: StoreSettings | None = None,
        table_factory: Callable[[str], Any] | None = None,
    ):
        self._retry_policy = retry_policy
        # Region, endpoint and timeouts for the boto3 resource; None means the
        # module-level settings.
        self._settings = settings
        # name -> boto3 Table; overrides the resource built from settings.
        self._table_factory = table_factory

    def table(self, table_name: str) -> DynamoTable:
        if self._table_factory:
            table = self._table_factory(table_name)
        else:
            table = table_resource(table_name, self._settings)
        return DynamoTable(table_name=table_name, table=table, retry_policy=self._retry_policy)

    async def get_item(self, table_name: str, key: dict[str, Any]) -> dict[str, Any] | None:
        return await anyio.to_thread.run_sync(partial(self.table(table_name).get_item, key=key))

    async def put_item(self, table_name: str, item: dict[str, Any]) -> None:
        await anyio.to_thread.run_sync(partial(self.table(table_name).put_item, item=item))

    async def scan(self, table_name: str, compiled: CompiledQuery) -> ScanResult:
        return await anyio.to_thread.run_sync(
            partial(self.table(table_name).scan_page, **compiled.scan_kwargs())
        )
