import pytest
from azure.cosmos import exceptions

from conftest import FakeContainer, FakeCosmosClient
from src.shared.cosmos_client import CosmosDBClient
from src.specs.common.errors import ConfigurationError


def build_client(container: FakeContainer, name: str = "blog post") -> CosmosDBClient:
    return CosmosDBClient(database_name="blog", client=FakeCosmosClient({name: container}))


def test_missing_configuration_raises(monkeypatch):
    monkeypatch.delenv("COSMOS_DB_CONNECTION_STRING", raising=False)
    monkeypatch.delenv("COSMOS_DB_NAME", raising=False)
    with pytest.raises(ConfigurationError):
        CosmosDBClient()


def test_container_env_var_name():
    assert CosmosDBClient.container_env_var("blog post") == "COSMOS_DB_CONTAINER_BLOG_POST"
    assert CosmosDBClient.container_env_var("agentRuns") == "COSMOS_DB_CONTAINER_AGENTRUNS"


def test_container_name_override(monkeypatch):
    monkeypatch.setenv("COSMOS_DB_CONTAINER_BLOG_POST", "posts-prod")
    container = FakeContainer([{"id": "a"}])
    client = build_client(container, name="posts-prod")
    assert client.get_item("blog post", "a") == {"id": "a"}


def test_get_item_found_and_missing():
    container = FakeContainer([{"id": "a", "title": "A"}])
    client = build_client(container)
    assert client.get_item("blog post", "a")["title"] == "A"
    assert client.get_item("blog post", "missing-123") is None
    assert container.queries[0]["parameters"] == [{"name": "@id", "value": "a"}]


def test_get_item_propagates_store_failures():
    failure = exceptions.CosmosHttpResponseError(status_code=503, message="unavailable")
    client = build_client(FakeContainer(fail_with=failure))
    with pytest.raises(exceptions.CosmosHttpResponseError):
        client.get_item("blog post", "a")


def test_list_items_returns_page_and_token():
    items = [{"id": str(i)} for i in range(5)]
    client = build_client(FakeContainer(items))

    first = client.list_items("blog post", max_count=2)
    assert [item["id"] for item in first["items"]] == ["0", "1"]
    assert first["total_count"] == 2
    assert first["continuation_token"]

    second = client.list_items("blog post", max_count=2, continuation_token=first["continuation_token"])
    assert [item["id"] for item in second["items"]] == ["2", "3"]


def test_iter_items_walks_every_page():
    items = [{"id": str(i)} for i in range(7)]
    container = FakeContainer(items)
    client = build_client(container)
    assert [item["id"] for item in client.iter_items("blog post", page_size=3)] == [str(i) for i in range(7)]
    assert len(container.queries) == 3


def test_iter_items_on_empty_container():
    client = build_client(FakeContainer([]))
    assert list(client.iter_items("blog post", page_size=3)) == []
