"""Site provider: page index, languages and URL building.

load_site() reads a JSON description of the site tree:

    {
      "url": "https://example.com",
      "languages": [{"code": "en", "default": true}, {"code": "de"}],
      "pages": [
        {"slug": "home", "template": "home", "modified": "2024-05-01T10:00:00Z"},
        {"slug": "blog", "children": [{"slug": "first-post", "languages": ["en"]}]}
      ],
      "options": {"sitemap.priority": true, "sitemap.ignored.templates": ["error"]}
    }

"options" seeds core.runtime for options that JSON can express.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from modules.sitemap.models import Image, ImageMeta, Language, Page

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost"
DEFAULT_LANGUAGE = Language(code="en", url="", default=True)


# =============================================================================
# SCHEMAS
# =============================================================================
class ImageMetaSchema(BaseModel):
    caption: str = ""
    alt: str = ""


class ImageSchema(BaseModel):
    url: str
    meta: Dict[str, ImageMetaSchema] = Field(default_factory=dict)


class LanguageSchema(BaseModel):
    code: str
    url: Optional[str] = None
    default: bool = False


class PageSchema(BaseModel):
    slug: str
    template: str = "default"
    visible: bool = True
    modified: Optional[datetime] = None
    date: Optional[datetime] = None
    languages: Optional[List[str]] = None
    images: List[ImageSchema] = Field(default_factory=list)
    children: List["PageSchema"] = Field(default_factory=list)


PageSchema.model_rebuild()


class SiteSchema(BaseModel):
    url: str = DEFAULT_BASE_URL
    home: str = "home"
    languages: List[LanguageSchema] = Field(default_factory=list)
    pages: List[PageSchema] = Field(default_factory=list)
    options: Dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# SITE
# =============================================================================
class UrlBuilder:
    """Resolves relative paths against the site URL."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url.rstrip("/")

    def url(self, path: str = "") -> str:
        if urlparse(path).scheme:
            return path
        path = path.strip("/")
        return f"{self.base_url}/{path}" if path else self.base_url


class Site:
    def __init__(
        self,
        pages: List[Page],
        languages: Optional[List[Language]] = None,
        url_builder: Optional[UrlBuilder] = None,
        options: Optional[Dict[str, Any]] = None,
    ):
        self._pages = list(pages)
        self._languages = list(languages or [DEFAULT_LANGUAGE])
        self._by_code = {lang.code: lang for lang in self._languages}
        self.url_builder = url_builder or UrlBuilder()
        self.options = dict(options or {})

    def index(self) -> List[Page]:
        """All pages, in pre-order."""
        return list(self._pages)

    def languages(self) -> List[Language]:
        return list(self._languages)

    def url(self, path: str = "") -> str:
        return self.url_builder.url(path)

    def url_for(self, page: Page, code: str) -> str:
        lang = self._by_code.get(code)
        prefix = lang.prefix.strip("/") if lang else ""
        return self.url("/".join(part for part in (prefix, page.path) if part))


def _build_pages(
    schemas: List[PageSchema],
    parent_id: str,
    depth: int,
    home: str,
    codes: List[str],
    url_builder: UrlBuilder,
    fallback_modified: datetime,
    out: List[Page],
) -> None:
    for schema in schemas:
        page_id = f"{parent_id}/{schema.slug}" if parent_id else schema.slug
        is_home = not parent_id and schema.slug == home
        images = tuple(
            Image(
                url=url_builder.url(img.url),
                metadata={
                    code: ImageMeta(caption=m.caption, alt=m.alt)
                    for code, m in img.meta.items()
                },
            )
            for img in schema.images
        )
        out.append(Page(
            id=page_id,
            intended_template=schema.template,
            depth=0 if is_home else depth,
            is_home_page=is_home,
            visible=schema.visible,
            modified=schema.modified or fallback_modified,
            date=schema.date,
            languages=frozenset(codes if schema.languages is None else schema.languages),
            images=images,
        ))
        _build_pages(
            schema.children, page_id, depth + 1, home, codes,
            url_builder, fallback_modified, out,
        )


def load_site(path: str, base_url: Optional[str] = None) -> Site:
    """Load a Site from a JSON description file."""
    with open(path, encoding="utf-8") as f:
        schema = SiteSchema.model_validate(json.load(f))

    url_builder = UrlBuilder(base_url or schema.url)
    languages = [
        Language(code=lang.code, url=lang.url, default=lang.default)
        for lang in schema.languages
    ] or [DEFAULT_LANGUAGE]
    codes = [lang.code for lang in languages]
    fallback_modified = datetime.fromtimestamp(os.path.getmtime(path), tz=timezone.utc)

    pages: List[Page] = []
    _build_pages(
        schema.pages, "", 1, schema.home, codes,
        url_builder, fallback_modified, pages,
    )
    logger.info("load_site '%s' → %d pages, %d languages", path, len(pages), len(languages))
    return Site(pages, languages, url_builder, schema.options)
