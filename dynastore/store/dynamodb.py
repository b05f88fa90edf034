from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..cursor import CursorCodec, schema_fingerprint
from ..db.dynamodb.transport import BotoStoreClient, StoreClient
from ..db.dynamodb.retry import RetryPolicy
from ..errors import DdbInternal
from ..filters import FilterSpecs, freeze_filter_specs
from ..keys import Key, KeySchema
from ..observability.logging import configure_logging, get_logger
from ..query import CompiledQuery, Query, compile_query
from ..settings import StoreSettings
from ..settings import settings as default_settings
from .base import Edge, Page, Store

log = get_logger("dynamodb_store")

Item = dict[str, Any]


class DynamoDBStore(Store[Item, Any, Query]):
    """Store backed by a single DynamoDB table.

    Reads are point lookups by key; ``find`` is one bounded Scan per call,
    with the caller carrying the continuation cursor between pages. Writes
    are unconditional PutItem calls, so ``create`` and ``update`` behave the
    same. Pages are not a snapshot: concurrent writes may show up as
    duplicates or gaps across pages.
    """

    def __init__(
        self,
        *,
        client: StoreClient,
        table_name: str,
        partition_key: str,
        sort_key: str | None = None,
        filters: FilterSpecs | None = None,
        reject_unknown_filters: bool = False,
        cursor_fingerprint: bool = False,
    ):
        self.client = client
        self.table_name = str(table_name)
        self.key_schema = KeySchema(partition_key=partition_key, sort_key=sort_key)
        self.filters = freeze_filter_specs(filters)
        self.reject_unknown_filters = bool(reject_unknown_filters)
        self.codec = CursorCodec(
            self.key_schema,
            fingerprint=schema_fingerprint(self.table_name, self.key_schema) if cursor_fingerprint else None,
        )

    @classmethod
    def from_settings(
        cls,
        settings: StoreSettings | None = None,
        *,
        client: StoreClient | None = None,
        filters: FilterSpecs | None = None,
        setup_logging: bool = False,
    ) -> DynamoDBStore:
        settings = settings or default_settings

        if setup_logging:
            configure_logging(level=settings.log_level)

        if not settings.ddb_table_name:
            raise DdbInternal(message="DDB_TABLE_NAME is not set", operation="Config")

        if client is None:
            client = BotoStoreClient(
                retry_policy=RetryPolicy(max_attempts=settings.ddb_retry_max_attempts),
                settings=settings,
            )

        return cls(
            client=client,
            table_name=settings.ddb_table_name,
            partition_key=settings.ddb_partition_key,
            sort_key=settings.ddb_sort_key,
            filters=filters,
            reject_unknown_filters=settings.ddb_reject_unknown_filters,
            cursor_fingerprint=settings.ddb_cursor_fingerprint,
        )

    # --- item (de)serialization hooks ---

    def serialize_item(self, item: Item) -> Any:
        return item

    def deserialize_item(self, item: Any) -> Item:
        return item

    # --- keys / cursors ---

    def item_key(self, item: Mapping[str, Any]) -> Key:
        return self.key_schema.derive_key(item)

    def key_to_cursor(self, key: Key) -> str:
        return self.codec.encode(key)

    def cursor_to_key(self, cursor: str) -> Key:
        return self.codec.decode(cursor)

    # --- operations ---

    async def get(self, key: Any) -> Item | None:
        params = self.key_schema.lookup_params(self.key_schema.coerce(key))
        raw = await self.client.get_item(self.table_name, params)
        if not raw:
            return None
        return self.deserialize_item(raw)

    async def create(self, item: Item) -> None:
        await self.update(item)

    async def update(self, item: Item) -> None:
        await self.client.put_item(self.table_name, self.serialize_item(item))

    def compile(self, query: Query | Mapping[str, Any] | None = None) -> CompiledQuery:
        return compile_query(
            query,
            self.filters,
            codec=self.codec,
            reject_unknown_filters=self.reject_unknown_filters,
        )

    async def find(self, query: Query | Mapping[str, Any] | None = None) -> Page[Item]:
        compiled = self.compile(query)

        log.debug(
            "ddb_scan",
            table=self.table_name,
            filtered=compiled.is_filtered,
            limit=compiled.limit,
            resumed=compiled.exclusive_start_key is not None,
        )
        result = await self.client.scan(self.table_name, compiled)

        items = [self.deserialize_item(raw) for raw in result.items]
        edges = [Edge(node=item, cursor=self.key_to_cursor(self.item_key(item))) for item in items]

        cursor = None
        if result.last_evaluated_key:
            cursor = self.key_to_cursor(self.key_schema.from_params(result.last_evaluated_key))

        log.debug("ddb_scan_page", table=self.table_name, count=len(items), has_more=cursor is not None)
        return Page(cursor=cursor, edges=edges, items=items)
