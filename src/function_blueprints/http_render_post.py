from typing import Optional

import azure.functions as func

from src.http.request_utils import extract_post_id, request_base_url
from src.render.post_page import build_post_page, render_post_html
from src.render.urls import post_url
from src.shared.logging_utils import info as log_info, error as log_error
from src.shared.post_store import PostStore, get_post_store
from src.specs.common.errors import ResourceNotFoundError
from src.specs.common.site import (
    POST_CACHE_CONTROL,
    POST_ERROR_MESSAGE,
    POST_NOT_FOUND_MESSAGE,
)


bp = func.Blueprint()


def _not_found() -> func.HttpResponse:
    return func.HttpResponse(POST_NOT_FOUND_MESSAGE, status_code=404, mimetype="text/plain")


def handle_render_post(
    req: func.HttpRequest,
    store: Optional[PostStore] = None,
    allow_query_fallback: bool = False,
) -> func.HttpResponse:
    post_id = None
    try:
        post_id = extract_post_id(req, allow_query_fallback=allow_query_fallback)
        if not post_id:
            log_info(None, "render_post:missing_id", url=req.url)
            return _not_found()

        post = (store or get_post_store()).get_post(post_id)
        if post is None:
            raise ResourceNotFoundError("blog post", post_id)

        canonical_url = post_url(request_base_url(req), post_id)
        html = render_post_html(build_post_page(post, canonical_url))
    except ResourceNotFoundError as exc:
        log_info(post_id, "render_post:not_found", error=exc.to_dict())
        return _not_found()
    except Exception as exc:
        log_error(post_id, "render_post:failed", exc_info=True, error=str(exc))
        return func.HttpResponse(POST_ERROR_MESSAGE, status_code=500, mimetype="text/plain")

    log_info(post_id, "render_post:rendered", bytes=len(html))
    return func.HttpResponse(
        body=html,
        status_code=200,
        mimetype="text/html",
        charset="utf-8",
        headers={"Cache-Control": POST_CACHE_CONTROL},
    )


@bp.function_name(name="render_post")
@bp.route(route="posts/{*path}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def render_post(req: func.HttpRequest) -> func.HttpResponse:
    return handle_render_post(req)


@bp.function_name(name="render_post_legacy")
@bp.route(route="renderPost", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def render_post_legacy(req: func.HttpRequest) -> func.HttpResponse:
    return handle_render_post(req, allow_query_fallback=True)
