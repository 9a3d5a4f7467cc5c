"""Sitemap data model: read-only views of the site plus the annotation side table."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class Language:
    code: str
    url: Optional[str] = None
    default: bool = False

    @property
    def prefix(self) -> str:
        """URL prefix of the language ("/en" unless configured otherwise)."""
        if self.url is None:
            return f"/{self.code}"
        return self.url.rstrip("/")


@dataclass(frozen=True)
class ImageMeta:
    caption: str = ""
    alt: str = ""


@dataclass(frozen=True)
class Image:
    url: str
    metadata: Dict[str, ImageMeta] = field(default_factory=dict, hash=False)

    def meta(self, code: str) -> ImageMeta:
        return self.metadata.get(code) or ImageMeta()


@dataclass(frozen=True)
class Page:
    """A page of the site tree, as handed over by the content provider."""

    # Identity
    id: str
    intended_template: str = "default"

    # Tree
    depth: int = 1
    is_home_page: bool = False
    visible: bool = True

    # Dates
    modified: Optional[datetime] = None
    date: Optional[datetime] = None

    # Content
    languages: FrozenSet[str] = frozenset()
    images: Tuple[Image, ...] = ()

    def content_exists(self, code: str) -> bool:
        return code in self.languages

    @property
    def has_images(self) -> bool:
        return bool(self.images)

    @property
    def path(self) -> str:
        """Relative URL path ("" for the home page)."""
        return "" if self.is_home_page else self.id


@dataclass
class Annotation:
    """Sitemap attributes computed for one page during a build."""

    priority: Optional[float] = None
    frequency: Optional[str] = None
