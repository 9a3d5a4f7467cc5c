"""Sitemap XML generator — pure logic, no HTTP dependency.

Generates a sitemap (protocol 0.9) with xhtml alternate links and image
entries from the selected pages, one <url> per page and language.
Values are escaped once, by the serializer.
"""

from __future__ import annotations

import html
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence
from xml.dom.minidom import Document, Element

from modules.sitemap.config import SitemapConfig
from modules.sitemap.errors import SitemapBuildTimeout
from modules.sitemap.models import Annotation, Image, Language, Page

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NS = "http://www.w3.org/1999/xhtml"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"
MAX_URLS_PER_SITEMAP = 50_000


def format_lastmod(page: Page) -> str:
    """ISO 8601 timestamp, publish date first, naive values taken as UTC."""
    value = page.date or page.modified
    if value is None:
        value = datetime.fromtimestamp(0, tz=timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


def _add_text(doc: Document, parent: Element, tag: str, text: str) -> Element:
    el = doc.createElement(tag)
    el.appendChild(doc.createTextNode(text))
    parent.appendChild(el)
    return el


def _add_image(
    doc: Document,
    parent: Element,
    image: Image,
    code: str,
    license_url: Optional[str],
) -> None:
    img_el = doc.createElement("image:image")
    parent.appendChild(img_el)

    _add_text(doc, img_el, "image:loc", image.url)

    # caption is language specific, alt text is the fallback
    meta = image.meta(code)
    caption = meta.caption or meta.alt
    if caption:
        cap_el = doc.createElement("image:caption")
        # "]]>" cannot live inside a CDATA section, escape as text instead
        if "]]>" in caption:
            cap_el.appendChild(doc.createTextNode(caption))
        else:
            cap_el.appendChild(doc.createCDATASection(caption))
        img_el.appendChild(cap_el)

    if license_url:
        _add_text(doc, img_el, "image:license", license_url)


def _add_url(
    doc: Document,
    page: Page,
    code: str,
    codes: Sequence[str],
    annotation: Annotation,
    config: SitemapConfig,
    url_for: Callable[[Page, str], str],
) -> Element:
    url_el = doc.createElement("url")

    _add_text(doc, url_el, "loc", url_for(page, code))
    _add_text(doc, url_el, "lastmod", format_lastmod(page))

    # the current language is listed too, but only when a second one exists
    alternates = [c for c in codes if page.content_exists(c)] if len(codes) > 1 else []
    if len(alternates) > 1:
        for alt_code in alternates:
            link = doc.createElement("xhtml:link")
            link.setAttribute("hreflang", alt_code)
            link.setAttribute("href", url_for(page, alt_code))
            link.setAttribute("rel", "alternate")
            url_el.appendChild(link)

    if config.priority.enabled and annotation.priority is not None:
        _add_text(doc, url_el, "priority", f"{annotation.priority:.1f}")

    if config.frequency.enabled and annotation.frequency:
        _add_text(doc, url_el, "changefreq", annotation.frequency)

    if config.include_images and page.has_images:
        for image in page.images:
            _add_image(doc, url_el, image, code, config.images_license)

    return url_el


def generate_sitemap_xml(
    pages: Sequence[Page],
    languages: Sequence[Language],
    annotations: Dict[str, Annotation],
    config: SitemapConfig,
    url_for: Callable[[Page, str], str],
    stylesheet_url: str,
    deadline: Optional[float] = None,
) -> str:
    """Generate the sitemap XML string.

    ``deadline`` is a time.monotonic() value; the walk raises
    SitemapBuildTimeout once it is passed.
    """
    doc = Document()
    doc.appendChild(doc.createProcessingInstruction(
        "xml-stylesheet", f'type="text/xsl" href="{html.escape(stylesheet_url)}"'
    ))

    urlset = doc.createElement("urlset")
    urlset.setAttribute("xmlns", SITEMAP_NS)
    urlset.setAttribute("xmlns:xhtml", XHTML_NS)
    urlset.setAttribute("xmlns:image", IMAGE_NS)
    doc.appendChild(urlset)

    codes: List[str] = [lang.code for lang in languages]

    count = 0
    for page in pages:
        if deadline is not None and time.monotonic() > deadline:
            raise SitemapBuildTimeout(
                f"Sitemap build exceeded its deadline after {count} URLs."
            )
        annotation = annotations.get(page.id) or Annotation()
        for code in codes:
            if page.content_exists(code):
                urlset.appendChild(
                    _add_url(doc, page, code, codes, annotation, config, url_for)
                )
                count += 1

    if count > MAX_URLS_PER_SITEMAP:
        logger.warning(
            "sitemap holds %d URLs, above the protocol limit of %d",
            count, MAX_URLS_PER_SITEMAP,
        )

    return doc.toprettyxml(indent="  ", encoding="UTF-8").decode("utf-8")
