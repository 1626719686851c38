from time import perf_counter
from typing import Optional

import azure.functions as func

from src.http.request_utils import request_base_url
from src.render.sitemap import build_entries, render_sitemap_xml
from src.shared.logging_utils import info as log_info, error as log_error
from src.shared.post_store import PostStore, get_post_store
from src.specs.common.site import SITEMAP_CACHE_CONTROL, SITEMAP_ERROR_MESSAGE


bp = func.Blueprint()


def handle_sitemap(req: func.HttpRequest, store: Optional[PostStore] = None) -> func.HttpResponse:
    start = perf_counter()
    try:
        entries = build_entries(request_base_url(req), (store or get_post_store()).iter_posts())
        xml = render_sitemap_xml(entries)
    except Exception as exc:
        log_error(None, "sitemap:failed", exc_info=True, error=str(exc))
        return func.HttpResponse(SITEMAP_ERROR_MESSAGE, status_code=500, mimetype="text/plain")

    duration_ms = int((perf_counter() - start) * 1000)
    log_info(None, "sitemap:rendered", urls=len(entries), durationMs=duration_ms)
    return func.HttpResponse(
        body=xml,
        status_code=200,
        mimetype="application/xml",
        charset="UTF-8",
        headers={
            "Content-Type": "application/xml; charset=UTF-8",
            "Cache-Control": SITEMAP_CACHE_CONTROL,
        },
    )


@bp.function_name(name="sitemap")
@bp.route(route="sitemap.xml", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def sitemap(req: func.HttpRequest) -> func.HttpResponse:
    return handle_sitemap(req)
