"""Sitemap generation engine — pure logic, no HTTP dependency.

Orchestrates page selection, the process transform, annotation and
XML generation for one build.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

from modules.sitemap.config import SitemapConfig
from modules.sitemap.errors import ProcessResultTypeError
from modules.sitemap.models import Annotation, Page
from modules.sitemap.site import Site
from modules.sitemap.strategies import annotate_pages
from modules.sitemap.xml_generator import generate_sitemap_xml

logger = logging.getLogger(__name__)

STYLESHEET_PATH = "sitemap.xsl"


class SitemapEngine:
    """Main engine for sitemap generation.

    Takes the site provider and a resolved configuration, produces the
    sitemap XML string.
    """

    def __init__(self, site: Site, config: SitemapConfig):
        self.site = site
        self.config = config
        self.last_stats: Dict = {}

    def select_pages(self, pages: List[Page]) -> List[Page]:
        config = self.config
        return [
            p for p in pages
            if (config.include_invisible or p.visible)
            and p.id not in config.ignored_pages
            and p.intended_template not in config.ignored_templates
        ]

    def apply_process(self, pages: List[Page]) -> List[Page]:
        if self.config.process is None:
            return pages
        result = self.config.process(pages)
        if not isinstance(result, (list, tuple)) or not all(
            isinstance(p, Page) for p in result
        ):
            raise ProcessResultTypeError("process option must return a collection of pages")
        return list(result)

    def generate_xml(self, deadline: Optional[float] = None) -> str:
        if deadline is None and self.config.build_timeout:
            deadline = time.monotonic() + self.config.build_timeout

        pages = self.select_pages(self.site.index())
        pages = self.apply_process(pages)
        annotations = annotate_pages(pages, self.config)
        self.last_stats = self.get_stats(pages, annotations)

        return generate_sitemap_xml(
            pages,
            self.site.languages(),
            annotations,
            self.config,
            url_for=self.site.url_for,
            stylesheet_url=self.site.url(STYLESHEET_PATH),
            deadline=deadline,
        )

    def get_stats(self, pages: List[Page], annotations: Dict[str, Annotation]) -> Dict:
        """Return summary statistics for a selected page list."""
        if not pages:
            return {"total": 0, "avg_priority": 0, "by_template": {}, "by_changefreq": {}}
        by_template: Dict[str, int] = {}
        by_freq: Dict[str, int] = {}
        prios = []
        for p in pages:
            by_template[p.intended_template] = by_template.get(p.intended_template, 0) + 1
            annotation = annotations.get(p.id)
            if annotation is None:
                continue
            if annotation.frequency:
                by_freq[annotation.frequency] = by_freq.get(annotation.frequency, 0) + 1
            if annotation.priority is not None:
                prios.append(annotation.priority)
        return {
            "total": len(pages),
            "avg_priority": round(sum(prios) / len(prios), 3) if prios else 0,
            "by_template": dict(sorted(by_template.items(), key=lambda x: -x[1])),
            "by_changefreq": dict(sorted(by_freq.items(), key=lambda x: -x[1])),
        }
