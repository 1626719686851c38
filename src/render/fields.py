"""Display fields derived from a post, with fallbacks for anything missing.

Every function here is total: empty, whitespace-only and absent values are
treated alike and the result is never empty.
"""
from datetime import datetime
from typing import Optional

from src.specs.common.datetime_utils import as_utc, format_calendar_date, utc_now
from src.specs.common.site import (
    DEFAULT_DESCRIPTION,
    DESCRIPTION_ELLIPSIS,
    DESCRIPTION_MAX_CHARS,
    NON_PUBLIC_IMAGE_SCHEMES,
    PLACEHOLDER_IMAGE_URL,
    UNTITLED_POST,
)
from src.specs.documents.post_document_spec import KnownTimestamp, PostDocument


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def derive_title(post: PostDocument) -> str:
    if _present(post.title):
        return post.title.strip()
    return UNTITLED_POST


def derive_description(post: PostDocument) -> str:
    if _present(post.description):
        return post.description.strip()
    if _present(post.content):
        return f"{post.content[:DESCRIPTION_MAX_CHARS]}{DESCRIPTION_ELLIPSIS}"
    return DEFAULT_DESCRIPTION


def resolve_image_url(post: PostDocument) -> str:
    if not _present(post.coverImageUrl):
        return PLACEHOLDER_IMAGE_URL
    url = post.coverImageUrl.strip()
    if url.lower().startswith(NON_PUBLIC_IMAGE_SCHEMES):
        return PLACEHOLDER_IMAGE_URL
    return url


def derive_publish_date(post: PostDocument, now: Optional[datetime] = None) -> datetime:
    if isinstance(post.publishDate, KnownTimestamp):
        return as_utc(post.publishDate.value)
    return as_utc(now) if now is not None else utc_now()


def derive_lastmod(post: PostDocument, today: Optional[datetime] = None) -> str:
    """Sitemap lastmod, a calendar date such as 2024-05-01."""
    return format_calendar_date(derive_publish_date(post, now=today))
