"""XML Sitemap module: page selection, annotation and XML generation."""

from modules.sitemap.errors import (
    ConfigurationCallableError,
    ConfigurationTypeError,
    ProcessResultTypeError,
    SitemapBuildTimeout,
    SitemapError,
)
from modules.sitemap.service import SitemapService

__all__ = [
    "SitemapService",
    "SitemapError",
    "ConfigurationTypeError",
    "ConfigurationCallableError",
    "ProcessResultTypeError",
    "SitemapBuildTimeout",
]
