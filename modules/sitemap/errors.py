"""Sitemap errors: all fatal to the current request, none retried."""


class SitemapError(Exception):
    """Base class for sitemap generation failures."""


class ConfigurationTypeError(SitemapError, TypeError):
    """An option has the wrong type (ex: ignored pages not an array)."""


class ConfigurationCallableError(SitemapError, TypeError):
    """An override is neither a boolean nor callable."""


class ProcessResultTypeError(SitemapError, TypeError):
    """The process transform did not return a collection of pages."""


class SitemapBuildTimeout(SitemapError):
    """The build (or the wait for a concurrent build) ran past its deadline."""
