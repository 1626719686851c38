from typing import Any, Dict, List, Optional

import azure.functions as func
import pytest
from azure.cosmos import exceptions

from src.shared.post_store import PostStore


class FakePager:
    def __init__(self, pages: List[List[Dict[str, Any]]], start: int):
        self._pages = pages
        self._index = start
        self.continuation_token: Optional[str] = None

    def __iter__(self):
        return self

    def __next__(self) -> List[Dict[str, Any]]:
        if self._index >= len(self._pages):
            raise StopIteration
        page = self._pages[self._index]
        self._index += 1
        self.continuation_token = str(self._index) if self._index < len(self._pages) else None
        return page


class FakeItemPaged:
    def __init__(self, items: List[Dict[str, Any]], page_size: int):
        self._items = items
        self._pages = [items[i:i + page_size] for i in range(0, len(items), page_size)]

    def __iter__(self):
        return iter(self._items)

    def by_page(self, continuation_token: Optional[str] = None) -> FakePager:
        return FakePager(self._pages, int(continuation_token or 0))


class FakeContainer:
    def __init__(self, items: Optional[List[Dict[str, Any]]] = None, fail_with: Optional[Exception] = None):
        self.items = items or []
        self.fail_with = fail_with
        self.queries: List[Dict[str, Any]] = []

    def query_items(self, query: str, parameters=None, enable_cross_partition_query=False, max_item_count=None):
        self.queries.append({"query": query, "parameters": parameters, "max_item_count": max_item_count})
        if self.fail_with:
            raise self.fail_with
        matches = self.items
        if parameters:
            wanted = parameters[0]["value"]
            matches = [item for item in self.items if item.get("id") == wanted]
        return FakeItemPaged(matches, max_item_count or 100)

    def read_item(self, item: str, partition_key: str) -> Dict[str, Any]:
        raise exceptions.CosmosResourceNotFoundError(status_code=404, message=f"{item} not found")


class FakeDatabase:
    def __init__(self, containers: Dict[str, FakeContainer]):
        self.containers = containers

    def get_container_client(self, name: str) -> FakeContainer:
        return self.containers[name]


class FakeCosmosClient:
    def __init__(self, containers: Dict[str, FakeContainer]):
        self.database = FakeDatabase(containers)

    def get_database_client(self, name: str) -> FakeDatabase:
        return self.database


class InMemoryCosmos:
    """Stands in for CosmosDBClient at the PostStore seam."""

    def __init__(self, documents: Optional[List[Dict[str, Any]]] = None, fail_with: Optional[Exception] = None):
        self.documents = {doc["id"]: doc for doc in documents or []}
        self.fail_with = fail_with

    def get_item(self, container_name: str, item_id: str):
        if self.fail_with:
            raise self.fail_with
        return self.documents.get(item_id)

    def iter_items(self, container_name: str, page_size: Optional[int] = None):
        if self.fail_with:
            raise self.fail_with
        yield from self.documents.values()


def make_store(*documents: Dict[str, Any], fail_with: Optional[Exception] = None) -> PostStore:
    return PostStore(InMemoryCosmos(list(documents), fail_with=fail_with), page_size=10)


def make_request(
    url: str = "https://example.com/posts/hello",
    route_path: Optional[str] = "hello",
    params: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> func.HttpRequest:
    route_params = {"path": route_path} if route_path is not None else {}
    return func.HttpRequest(
        method="GET",
        url=url,
        headers=headers if headers is not None else {"host": "example.com"},
        params=params or {},
        route_params=route_params,
        body=b"",
    )


@pytest.fixture
def sample_post() -> Dict[str, Any]:
    return {
        "id": "hello",
        "title": "Hello",
        "description": "A first post",
        "content": "Line one\nLine two",
        "coverImageUrl": "https://cdn.example.com/cover.png",
        "publishDate": "2024-05-01T08:30:00Z",
        "_rid": "abc==",
        "_ts": 1714552200,
    }
