"""DynamoDB document store adapter.

Learn: boto3 is synchronous. Each call is pushed to a worker thread with
asyncio.to_thread so a slow round trip only delays the request that made it,
never the event loop. botocore exceptions are translated into StoreError so
nothing above this module has to know about the SDK.
"""

import asyncio
from typing import Any, Optional

import structlog

from grove.db.store import ConditionFailedError, Item, StoreError

logger = structlog.get_logger()


class DynamoDocumentStore:
    backend = "dynamodb"

    def __init__(
        self,
        region: str,
        endpoint_url: Optional[str] = None,
        *,
        resource=None,
    ):
        if resource is not None:
            self._resource = resource
            return

        import boto3

        self._resource = boto3.resource(
            "dynamodb",
            region_name=region,
            endpoint_url=endpoint_url or None,
        )
        logger.info("grove.dynamodb_configured", region=region, endpoint=endpoint_url or "default")

    async def get(self, table: str, key: Item) -> Optional[Item]:
        response = await self._call(table, "get_item", Key=key)
        return response.get("Item")

    async def put(
        self, table: str, item: Item, *, if_not_exists: Optional[str] = None
    ) -> Item:
        kwargs: dict[str, Any] = {"Item": item}
        if if_not_exists:
            kwargs["ConditionExpression"] = "attribute_not_exists(#pk)"
            kwargs["ExpressionAttributeNames"] = {"#pk": if_not_exists}
        await self._call(table, "put_item", **kwargs)
        return item

    async def query(
        self,
        table: str,
        expression: str,
        values: dict[str, Any],
        *,
        index: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Item]:
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": expression,
            "ExpressionAttributeValues": values,
        }
        if index:
            kwargs["IndexName"] = index
        if limit:
            kwargs["Limit"] = limit
        response = await self._call(table, "query", **kwargs)
        return list(response.get("Items", []))

    async def _call(self, table: str, operation: str, **kwargs) -> dict:
        from botocore.exceptions import BotoCoreError, ClientError

        method = getattr(self._resource.Table(table), operation)
        try:
            return await asyncio.to_thread(method, **kwargs)
        except ClientError as e:
            code = (e.response.get("Error") or {}).get("Code", "")
            if code == "ConditionalCheckFailedException":
                raise ConditionFailedError(f"{operation} on {table}: condition failed") from e
            logger.warning("grove.dynamodb_error", table=table, operation=operation, code=code)
            raise StoreError(f"{operation} on {table} failed ({code})") from e
        except BotoCoreError as e:
            logger.warning("grove.dynamodb_unavailable", table=table, operation=operation)
            raise StoreError(f"{operation} on {table} failed: store unavailable") from e
