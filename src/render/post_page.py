import json
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from src.render.escape import escape_html, escape_with_line_breaks
from src.render.fields import (
    derive_description,
    derive_publish_date,
    derive_title,
    resolve_image_url,
)
from src.specs.common.datetime_utils import format_iso_datetime, format_readable_date
from src.specs.common.site import AUTHOR_NAME, BLOG_NAME, ROBOTS_DIRECTIVES
from src.specs.documents.post_document_spec import PostDocument


class PostPage(BaseModel):
    """Everything the post template needs, already derived."""
    title: str
    description: str
    image_url: str
    canonical_url: str
    publish_iso: str
    publish_readable: str
    content: str = ""


def build_post_page(post: PostDocument, canonical_url: str, now: Optional[datetime] = None) -> PostPage:
    published = derive_publish_date(post, now=now)
    return PostPage(
        title=derive_title(post),
        description=derive_description(post),
        image_url=resolve_image_url(post),
        canonical_url=canonical_url,
        publish_iso=format_iso_datetime(published),
        publish_readable=format_readable_date(published),
        content=post.content or "",
    )


def structured_data(page: PostPage) -> Dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "mainEntityOfPage": {"@type": "WebPage", "@id": page.canonical_url},
        "headline": page.title,
        "description": page.description,
        "image": page.image_url,
        "author": {"@type": "Person", "name": AUTHOR_NAME},
        "publisher": {"@type": "Organization", "name": BLOG_NAME},
        "datePublished": page.publish_iso,
    }


def to_json_ld(data: Dict[str, Any]) -> str:
    """Serialize for an inline <script> block."""
    payload = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    # Keep "</script>" and friends inside strings from ending the block
    return payload.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def render_post_html(page: PostPage) -> str:
    title = escape_html(page.title)
    description = escape_html(page.description)
    image_url = escape_html(page.image_url)
    canonical_url = escape_html(page.canonical_url)
    body_html = f"<p>{escape_with_line_breaks(page.content)}</p>"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title} | {BLOG_NAME}</title>
  <meta name="description" content="{description}" />
  <meta name="robots" content="{ROBOTS_DIRECTIVES}" />
  <link rel="canonical" href="{canonical_url}" />

  <meta property="og:title" content="{title}" />
  <meta property="og:description" content="{description}" />
  <meta property="og:image" content="{image_url}" />
  <meta property="og:url" content="{canonical_url}" />
  <meta property="og:type" content="article" />

  <script type="application/ld+json">{to_json_ld(structured_data(page))}</script>

  <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="bg-gray-50 text-gray-800">
  <header class="bg-white shadow-sm">
    <div class="max-w-4xl mx-auto px-4 sm:px-6 lg:px-8 py-4">
      <a href="/" class="text-xl font-bold text-gray-900 hover:text-blue-600">&larr; Back to All Articles</a>
    </div>
  </header>

  <main class="max-w-4xl mx-auto px-4 sm:px-6 lg:px-8 py-12">
    <article>
      <img src="{image_url}" alt="{title}" class="w-full h-96 object-cover rounded-lg mb-8" />
      <h1 class="text-5xl font-extrabold mb-4 text-gray-900">{title}</h1>
      <p class="text-md text-gray-500 mb-8">Published on {escape_html(page.publish_readable)}</p>
      <div class="mb-10 p-4 bg-gray-100 border-l-4 border-blue-500 rounded-r-lg">
        <p class="text-lg text-gray-700 italic"><strong class="font-semibold not-italic text-gray-900">Summary:</strong> {description}</p>
      </div>
      <div class="prose prose-lg max-w-none leading-8">{body_html}</div>
    </article>
  </main>
</body>
</html>"""
