"""Document store port — the only persistence surface the core depends on.

Learn: The identity store is treated as an opaque keyed store with a
secondary-index query. Adapters (memory, DynamoDB) implement this protocol;
services never see boto3 or any other SDK type.

Items are plain dicts keyed by "id". Query expressions use the DynamoDB
key-condition syntax restricted to equality: "email = :email", optionally
joined with AND.
"""

from typing import Any, Optional, Protocol

Item = dict[str, Any]


class StoreError(Exception):
    """The store could not complete an operation (unavailable, throttled, ...)."""


class ConditionFailedError(StoreError):
    """A conditional write was rejected because its condition did not hold."""


class DocumentStore(Protocol):
    backend: str

    async def get(self, table: str, key: Item) -> Optional[Item]:
        """Fetch one item by primary key, or None."""
        ...

    async def put(
        self, table: str, item: Item, *, if_not_exists: Optional[str] = None
    ) -> Item:
        """Write an item. With if_not_exists="id", refuse to overwrite."""
        ...

    async def query(
        self,
        table: str,
        expression: str,
        values: dict[str, Any],
        *,
        index: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Item]:
        """Return items matching an equality key condition."""
        ...
