"""Document store adapters — memory store behaviour and DynamoDB error mapping."""

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from grove.db.dynamodb import DynamoDocumentStore
from grove.db.memory import MemoryDocumentStore, parse_expression
from grove.db.store import ConditionFailedError, StoreError


# ═══════════════════════════════════════════════════════════
# Memory store
# ═══════════════════════════════════════════════════════════


def test_parse_expression():
    assert parse_expression("email = :email") == [("email", ":email")]
    assert parse_expression("a = :a AND #b = :b") == [("a", ":a"), ("b", ":b")]
    with pytest.raises(StoreError):
        parse_expression("begins_with(email, :e)")


@pytest.mark.asyncio
async def test_memory_get_put_returns_copies():
    store = MemoryDocumentStore()
    await store.put("users", {"id": "1", "email": "a@test.com"})

    item = await store.get("users", {"id": "1"})
    item["email"] = "changed@test.com"

    assert (await store.get("users", {"id": "1"}))["email"] == "a@test.com"
    assert await store.get("users", {"id": "missing"}) is None
    assert await store.get("other", {"id": "1"}) is None


@pytest.mark.asyncio
async def test_memory_query_and_limit():
    store = MemoryDocumentStore()
    await store.put("users", {"id": "1", "email": "dup@test.com"})
    await store.put("users", {"id": "2", "email": "dup@test.com"})
    await store.put("users", {"id": "3", "email": "other@test.com"})

    both = await store.query("users", "email = :e", {":e": "dup@test.com"}, index="email-index")
    assert {i["id"] for i in both} == {"1", "2"}

    first = await store.query("users", "email = :e", {":e": "dup@test.com"}, limit=1)
    assert len(first) == 1

    assert await store.query("users", "email = :e", {":e": "none@test.com"}) == []


@pytest.mark.asyncio
async def test_memory_query_missing_value_is_store_error():
    store = MemoryDocumentStore()
    with pytest.raises(StoreError):
        await store.query("users", "email = :email", {})


@pytest.mark.asyncio
async def test_memory_conditional_put_refuses_overwrite():
    store = MemoryDocumentStore()
    await store.put("users", {"id": "1", "v": 1}, if_not_exists="id")
    with pytest.raises(ConditionFailedError):
        await store.put("users", {"id": "1", "v": 2}, if_not_exists="id")

    await store.put("users", {"id": "1", "v": 3})
    assert (await store.get("users", {"id": "1"}))["v"] == 3


# ═══════════════════════════════════════════════════════════
# DynamoDB adapter (fake boto3 resource)
# ═══════════════════════════════════════════════════════════


class FakeTable:
    def __init__(self, calls, error=None, response=None):
        self.calls = calls
        self.error = error
        self.response = response or {}

    def _record(self, op, kwargs):
        self.calls.append((op, kwargs))
        if self.error:
            raise self.error
        return self.response

    def get_item(self, **kwargs):
        return self._record("get_item", kwargs)

    def put_item(self, **kwargs):
        return self._record("put_item", kwargs)

    def query(self, **kwargs):
        return self._record("query", kwargs)


class FakeResource:
    def __init__(self, error=None, response=None):
        self.calls = []
        self.tables = []
        self.error = error
        self.response = response

    def Table(self, name):
        self.tables.append(name)
        return FakeTable(self.calls, self.error, self.response)


def _client_error(code):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, "PutItem")


@pytest.mark.asyncio
async def test_dynamo_query_passes_index_and_limit():
    resource = FakeResource(response={"Items": [{"id": "1", "email": "a@test.com"}]})
    store = DynamoDocumentStore("us-east-1", resource=resource)

    items = await store.query(
        "grove_system_users", "email = :email", {":email": "a@test.com"}, index="email-index", limit=1
    )

    assert items == [{"id": "1", "email": "a@test.com"}]
    op, kwargs = resource.calls[0]
    assert op == "query"
    assert resource.tables == ["grove_system_users"]
    assert kwargs["IndexName"] == "email-index"
    assert kwargs["Limit"] == 1
    assert kwargs["KeyConditionExpression"] == "email = :email"


@pytest.mark.asyncio
async def test_dynamo_conditional_put():
    resource = FakeResource()
    store = DynamoDocumentStore("us-east-1", resource=resource)

    await store.put("t", {"id": "1"}, if_not_exists="id")

    _, kwargs = resource.calls[0]
    assert kwargs["ConditionExpression"] == "attribute_not_exists(#pk)"
    assert kwargs["ExpressionAttributeNames"] == {"#pk": "id"}


@pytest.mark.asyncio
async def test_dynamo_get_missing_item():
    store = DynamoDocumentStore("us-east-1", resource=FakeResource(response={}))
    assert await store.get("t", {"id": "nope"}) is None


@pytest.mark.asyncio
async def test_dynamo_condition_failure_is_mapped():
    store = DynamoDocumentStore(
        "us-east-1", resource=FakeResource(error=_client_error("ConditionalCheckFailedException"))
    )
    with pytest.raises(ConditionFailedError):
        await store.put("t", {"id": "1"}, if_not_exists="id")


@pytest.mark.asyncio
async def test_dynamo_sdk_errors_become_store_errors():
    store = DynamoDocumentStore(
        "us-east-1", resource=FakeResource(error=_client_error("ProvisionedThroughputExceededException"))
    )
    with pytest.raises(StoreError):
        await store.get("t", {"id": "1"})

    store = DynamoDocumentStore(
        "us-east-1",
        resource=FakeResource(error=EndpointConnectionError(endpoint_url="http://localhost:8000")),
    )
    with pytest.raises(StoreError):
        await store.query("t", "email = :e", {":e": "x"})
