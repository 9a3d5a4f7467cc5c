"""Sitemap service: cache lookup, single-flight build, stylesheet.

All methods take explicit collaborators (site, cache) so the service can
be driven by the FastAPI app or by any host.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from pathlib import Path
from typing import List, Optional

from core import runtime
from core.logger import ContextLogger
from modules.sitemap.cache import CACHE_KEY, MemoryCache, SingleFlight, SitemapCache
from modules.sitemap.config import OPT_CACHE_TTL, load_config
from modules.sitemap.engine import SitemapEngine
from modules.sitemap.errors import ConfigurationTypeError, SitemapError
from modules.sitemap.site import Site, load_site

logger = logging.getLogger(__name__)

STYLESHEET_FILE = Path(__file__).parent / "sitemap.xsl"

ENV_SITE_FILE = "SITEMAP_SITE_FILE"
ENV_BASE_URL = "SITEMAP_BASE_URL"


def read_stylesheet() -> str:
    """Bundled sitemap.xsl, independent of the site and its options."""
    return STYLESHEET_FILE.read_text(encoding="utf-8")


def cache_ttl() -> Optional[float]:
    """sitemap.cache.ttl, read on every cache access."""
    value = runtime.get_option(OPT_CACHE_TTL)
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        raise ConfigurationTypeError(f'The option "{OPT_CACHE_TTL}" must be a number.') from None


class SitemapService:
    def __init__(self, site: Site, cache: Optional[SitemapCache] = None):
        self.site = site
        self.cache = cache if cache is not None else MemoryCache(ttl=cache_ttl)
        self._flight = SingleFlight()
        self.last_logs: List[str] = []

    @classmethod
    def from_env(cls) -> "SitemapService":
        """Build the service from SITEMAP_SITE_FILE / SITEMAP_BASE_URL."""
        path = os.getenv(ENV_SITE_FILE, "")
        base_url = os.getenv(ENV_BASE_URL) or None
        if path:
            site = load_site(path, base_url)
            # options injected by the host win over the site file
            runtime.init({**site.options, **runtime.get_options()})
        else:
            logger.warning("%s not set, serving an empty site", ENV_SITE_FILE)
            site = Site([])
            if base_url:
                site.url_builder.base_url = base_url.rstrip("/")
        return cls(site)

    def stylesheet(self) -> str:
        return read_stylesheet()

    def render(self) -> str:
        """Cached sitemap, or a fresh build stored under the fixed key."""
        cached = self.cache.get(CACHE_KEY) if self.cache.exists(CACHE_KEY) else None
        if cached is not None:
            return cached

        config = load_config()
        return self._flight.do(
            CACHE_KEY, self.cache, self._build, timeout=config.build_timeout
        )

    def _build(self) -> str:
        log = ContextLogger(build_id=uuid.uuid4().hex, site_url=self.site.url())
        started = time.monotonic()
        log.info("sitemap build started")
        try:
            engine = SitemapEngine(self.site, load_config())
            xml = engine.generate_xml()
        except SitemapError as e:
            log.error(f"sitemap build aborted: {e}")
            raise
        finally:
            self.last_logs = log.get_logs()

        stats = engine.last_stats
        log.info(
            f"sitemap built: {stats.get('total', 0)} pages, "
            f"avg priority {stats.get('avg_priority', 0)}, "
            f"{len(xml)} chars in {time.monotonic() - started:.3f}s"
        )
        self.last_logs = log.get_logs()
        return xml

    def invalidate(self) -> bool:
        delete = getattr(self.cache, "delete", None)
        if delete is None:
            return False
        return delete(CACHE_KEY)
