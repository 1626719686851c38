from typing import Optional
from urllib.parse import urlsplit

import azure.functions as func


def _first_header_value(req: func.HttpRequest, name: str) -> Optional[str]:
    # Proxies may append, e.g. "https, http"
    value = req.headers.get(name)
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def request_base_url(req: func.HttpRequest) -> str:
    """scheme://host the client used, honouring the front door's forwarded headers."""
    parts = urlsplit(req.url)
    scheme = _first_header_value(req, "x-forwarded-proto") or parts.scheme or "https"
    host = (
        _first_header_value(req, "x-forwarded-host")
        or _first_header_value(req, "host")
        or parts.netloc
    )
    return f"{scheme}://{host}"


def extract_post_id(req: func.HttpRequest, allow_query_fallback: bool = False) -> Optional[str]:
    """Post id from the last routed path segment, or ?id= for the legacy route.

    The host percent-decodes route and query values before they reach us.
    """
    route_path = req.route_params.get("path") or ""
    segments = [segment for segment in route_path.split("/") if segment]
    raw = segments[-1] if segments else None
    if raw is None and allow_query_fallback:
        raw = req.params.get("id")
    if not raw:
        return None
    post_id = raw.strip()
    return post_id or None
