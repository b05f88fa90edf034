from .base import Edge, Page, Store
from .dynamodb import DynamoDBStore

__all__ = ["DynamoDBStore", "Edge", "Page", "Store"]
