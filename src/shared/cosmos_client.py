# Standardized Cosmos DB client implementation

import os
import re
import time
import logging
from functools import lru_cache
from typing import Optional, List, Dict, Any, Iterator
from azure.cosmos import CosmosClient, exceptions
from azure.cosmos.container import ContainerProxy
from src.specs.common.errors import ConfigurationError

class CosmosDBClient:
    # Store failures surface to the caller on the first attempt
    MAX_RETRIES = 0
    DEFAULT_PAGE_SIZE = 100

    def __init__(
        self,
        connection_string: Optional[str] = None,
        database_name: Optional[str] = None,
        client: Optional[CosmosClient] = None,
    ):
        """Initialize the Cosmos DB client from explicit settings or the environment"""
        self.connection_string = connection_string or os.environ.get("COSMOS_DB_CONNECTION_STRING")
        self.database_name = database_name or os.environ.get("COSMOS_DB_NAME")

        if not self.database_name or (client is None and not self.connection_string):
            raise ConfigurationError("Missing Cosmos DB connection string or database name")

        self.client = client or CosmosClient.from_connection_string(
            self.connection_string,
            retry_total=self.MAX_RETRIES
        )
        self.database = self.client.get_database_client(self.database_name)

    @staticmethod
    def container_env_var(container_name: str) -> str:
        """App setting that overrides a container name, e.g. COSMOS_DB_CONTAINER_BLOG_POST"""
        suffix = re.sub(r"[^A-Z0-9]+", "_", container_name.upper()).strip("_")
        return f"COSMOS_DB_CONTAINER_{suffix}"

    def get_container(self, container_name: str) -> ContainerProxy:
        """
        Get a container by name with environment variable override

        Args:
            container_name: Base name of the container

        Returns:
            ContainerProxy for the container
        """
        env_container_name = os.environ.get(self.container_env_var(container_name))
        actual_name = env_container_name or container_name
        return self.database.get_container_client(actual_name)

    def get_item(
        self,
        container_name: str,
        item_id: str,
        partition_key: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Get an item by ID

        Args:
            container_name: Name of the container
            item_id: ID of the item to retrieve
            partition_key: Optional partition key (defaults to item_id)

        Returns:
            The item if found, None if not found

        Raises:
            Exception: For any store failure other than a missing item
        """
        container = self.get_container(container_name)

        try:
            # The partition key path is not known here, so look the item up by id first
            logging.debug(f"Querying for item '{item_id}' in container '{container_name}'")
            query = "SELECT * FROM c WHERE c.id = @id"
            items = list(container.query_items(
                query=query,
                parameters=[{"name": "@id", "value": item_id}],
                enable_cross_partition_query=True
            ))

            if items:
                logging.debug(f"Found item via query: {items[0]['id']}")
                return items[0]

            # Fallback to direct read if query finds nothing
            logging.debug(f"No items found via query, attempting direct read")
            result = container.read_item(
                item=item_id,
                partition_key=partition_key or item_id
            )
            logging.debug(f"Successfully retrieved item via direct read: {result['id']}")
            return result

        except exceptions.CosmosResourceNotFoundError:
            logging.debug(f"Item not found: {item_id}")
            return None
        except Exception as e:
            logging.error(
                "Unexpected error reading item",
                extra={
                    "container": container_name,
                    "itemId": item_id,
                    "error": str(e),
                    "databaseName": self.database_name,
                }
            )
            raise

    def list_items(
        self,
        container_name: str,
        max_count: Optional[int] = None,
        continuation_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        List one page of items in a container

        Args:
            container_name: Name of the container
            max_count: Optional maximum number of items to return
            continuation_token: Optional token from a previous request for pagination

        Returns:
            Dictionary containing:
                - items: List of items retrieved
                - continuation_token: Token for getting next page (None on the last page)
                - total_count: Number of items in this page
        """
        start_time = time.time()
        container = self.get_container(container_name)

        results = container.query_items(
            query="SELECT * FROM c",
            enable_cross_partition_query=True,
            max_item_count=max_count or self.DEFAULT_PAGE_SIZE
        )
        pager = results.by_page(continuation_token)
        try:
            items: List[Dict[str, Any]] = list(next(pager))
        except StopIteration:
            items = []
        response_continuation = pager.continuation_token

        logging.debug(
            f"Retrieved {len(items)} items from container '{container_name}' "
            f"in {time.time() - start_time:.2f}s"
        )

        return {
            "items": items,
            "continuation_token": response_continuation,
            "total_count": len(items)
        }

    def iter_items(self, container_name: str, page_size: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        """Yield every item in a container, one page at a time"""
        token: Optional[str] = None
        pages = 0
        while True:
            page = self.list_items(container_name, max_count=page_size, continuation_token=token)
            pages += 1
            yield from page["items"]
            token = page["continuation_token"]
            if not token:
                break
        logging.debug(f"Scanned container '{container_name}' in {pages} page(s)")

# Singleton instance with caching
@lru_cache(maxsize=1)
def get_cosmos_client() -> CosmosDBClient:
    """Get or create the singleton CosmosDBClient instance"""
    return CosmosDBClient()
