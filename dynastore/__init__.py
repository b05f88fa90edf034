"""Key/value store facade over a single DynamoDB table.

Point lookups, unconditional upserts, and cursor-paginated, filterable
scans. Filters are configured per field as comparator -> clause builder
and compiled into one DynamoDB filter expression per request.
"""

from .cursor import CursorCodec
from .errors import (
    DdbError,
    DdbInternal,
    DdbRequestRejected,
    DdbThrottled,
    DdbTransportError,
    DdbUnavailable,
    DdbValidation,
    InvalidCursor,
    UnsupportedFilter,
)
from .filters import (
    Clause,
    begins_with_filter,
    eq_filter,
    exact_filters,
    gt_filter,
    gte_filter,
    in_filter,
    lt_filter,
    lte_filter,
    ne_filter,
    ord_filters,
    prefix_filters,
)
from .keys import CompositeKey, Key, KeySchema, SimpleKey
from .query import CompiledQuery, Query, compile_query
from .store import DynamoDBStore, Edge, Page, Store

__all__ = [
    "Clause",
    "CompiledQuery",
    "CompositeKey",
    "CursorCodec",
    "DdbError",
    "DdbInternal",
    "DdbRequestRejected",
    "DdbThrottled",
    "DdbTransportError",
    "DdbUnavailable",
    "DdbValidation",
    "DynamoDBStore",
    "Edge",
    "InvalidCursor",
    "Key",
    "KeySchema",
    "Page",
    "Query",
    "SimpleKey",
    "Store",
    "UnsupportedFilter",
    "begins_with_filter",
    "compile_query",
    "eq_filter",
    "exact_filters",
    "gt_filter",
    "gte_filter",
    "in_filter",
    "lt_filter",
    "lte_filter",
    "ne_filter",
    "ord_filters",
    "prefix_filters",
]
