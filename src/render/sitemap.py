from datetime import datetime
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape

from pydantic import BaseModel

from src.render.fields import derive_lastmod
from src.render.urls import post_url
from src.specs.common.site import SITEMAP_NAMESPACE
from src.specs.documents.post_document_spec import PostDocument


class SitemapEntry(BaseModel):
    loc: str
    changefreq: str
    priority: str
    lastmod: Optional[str] = None


def build_entries(base_url: str, posts: Iterable[PostDocument], today: Optional[datetime] = None) -> List[SitemapEntry]:
    entries = [SitemapEntry(loc=f"{base_url}/", changefreq="daily", priority="1.0")]
    for post in posts:
        entries.append(
            SitemapEntry(
                loc=post_url(base_url, post.id),
                lastmod=derive_lastmod(post, today=today),
                changefreq="weekly",
                priority="0.80",
            )
        )
    return entries


def _render_entry(entry: SitemapEntry) -> str:
    lines = ["  <url>", f"    <loc>{escape(entry.loc)}</loc>"]
    if entry.lastmod:
        lines.append(f"    <lastmod>{entry.lastmod}</lastmod>")
    lines.append(f"    <changefreq>{entry.changefreq}</changefreq>")
    lines.append(f"    <priority>{entry.priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def render_sitemap_xml(entries: Iterable[SitemapEntry]) -> str:
    body = "\n".join(_render_entry(entry) for entry in entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n'
        f"{body}\n"
        "</urlset>"
    )
