import math
import os
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from src.shared.cosmos_client import CosmosDBClient, get_cosmos_client
from src.shared.logging_utils import info as log_info, warning as log_warning
from src.specs.common.datetime_utils import as_utc, parse_iso_datetime
from src.specs.common.site import DEFAULT_SITEMAP_PAGE_SIZE, POSTS_CONTAINER
from src.specs.documents.post_document_spec import (
    KnownTimestamp,
    PostDocument,
    Timestamp,
    UnknownTimestamp,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _from_epoch(seconds: Union[int, float], nanoseconds: Union[int, float] = 0) -> Timestamp:
    try:
        seconds, nanoseconds = float(seconds), float(nanoseconds)
        if not math.isfinite(seconds) or not math.isfinite(nanoseconds):
            return UnknownTimestamp()
        value = _EPOCH + timedelta(seconds=seconds, microseconds=nanoseconds / 1000)
    except OverflowError:
        return UnknownTimestamp()
    return KnownTimestamp(value=value)


def to_timestamp(raw: Any) -> Timestamp:
    """Convert a stored publishDate value; never raises."""
    if isinstance(raw, datetime):
        return KnownTimestamp(value=as_utc(raw))
    if isinstance(raw, bool):
        return UnknownTimestamp()
    if isinstance(raw, (int, float)):
        return _from_epoch(raw)
    if isinstance(raw, str):
        parsed = parse_iso_datetime(raw)
        return KnownTimestamp(value=parsed) if parsed else UnknownTimestamp()
    if isinstance(raw, Mapping):
        # Firestore export shape: {"_seconds": ..., "_nanoseconds": ...}
        seconds = raw.get("seconds", raw.get("_seconds"))
        nanos = raw.get("nanoseconds", raw.get("_nanoseconds", 0)) or 0
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            return UnknownTimestamp()
        if isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
            nanos = 0
        return _from_epoch(seconds, nanos)
    return UnknownTimestamp()


def to_post(document: Dict[str, Any]) -> PostDocument:
    """Build a PostDocument from a stored record; malformed fields raise ValidationError."""
    fields = dict(document)
    raw_date = document.get("publishDate")
    fields["publishDate"] = to_timestamp(raw_date)
    if raw_date is not None and isinstance(fields["publishDate"], UnknownTimestamp):
        log_warning(document.get("id"), "post_store:unreadable_publish_date", rawType=type(raw_date).__name__)
    return PostDocument(**fields)


class PostStore:
    """Read-only access to the "blog post" collection."""

    def __init__(self, client: CosmosDBClient, container_name: str = POSTS_CONTAINER, page_size: Optional[int] = None):
        self._client = client
        self._container_name = container_name
        self._page_size = page_size or int(os.getenv("SITEMAP_PAGE_SIZE", DEFAULT_SITEMAP_PAGE_SIZE))

    def get_post(self, post_id: str) -> Optional[PostDocument]:
        document = self._client.get_item(self._container_name, post_id)
        if document is None:
            return None
        return to_post(document)

    def iter_posts(self) -> Iterator[PostDocument]:
        count = 0
        for document in self._client.iter_items(self._container_name, page_size=self._page_size):
            count += 1
            yield to_post(document)
        log_info(None, "post_store:scan_complete", container=self._container_name, count=count)


@lru_cache(maxsize=1)
def get_post_store() -> PostStore:
    """Process-wide store handle, created on first request."""
    return PostStore(get_cosmos_client())
