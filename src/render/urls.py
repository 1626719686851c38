from urllib.parse import quote

from src.specs.common.site import POSTS_PATH_PREFIX

# Same unreserved set as JavaScript's encodeURIComponent
_PATH_SEGMENT_SAFE = "-_.!~*'()"


def encode_path_segment(value: str) -> str:
    return quote(value, safe=_PATH_SEGMENT_SAFE)


def post_url(base_url: str, post_id: str) -> str:
    """Canonical URL of a post, e.g. https://example.com/posts/a%20b."""
    return f"{base_url.rstrip('/')}{POSTS_PATH_PREFIX}{encode_path_segment(post_id)}"
