"""Sitemap scoring strategies — priority and changefreq heuristics.

The default changefreq is derived from the default priority, recomputed
from the page itself: a custom priority function does not change it.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable

from modules.sitemap.config import OptionMode, SitemapConfig
from modules.sitemap.errors import ConfigurationTypeError
from modules.sitemap.models import Annotation, Page

logger = logging.getLogger(__name__)

PRIORITY_BASE = 1.6

CHANGEFREQ_VALUES = frozenset({"daily", "weekly", "monthly"})


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def default_priority(page: Page) -> float:
    """1.0 for the home page, 1.6 / (depth + 1) otherwise."""
    if page.is_home_page:
        return 1.0
    return _clamp(round(PRIORITY_BASE / (page.depth + 1), 1))


def default_frequency(page: Page) -> str:
    priority = default_priority(page)
    if priority == 1.0:
        return "daily"
    if priority >= 0.5:
        return "weekly"
    return "monthly"


def _custom_priority(page: Page, func) -> float:
    raw = func(page)
    try:
        value = round(float(raw), 1)
    except (TypeError, ValueError):
        raise ConfigurationTypeError(
            f"Priority for page '{page.id}' must be a number, got {raw!r}."
        ) from None
    clamped = _clamp(value)
    if clamped != value:
        logger.warning("priority %s for '%s' clamped to %s", value, page.id, clamped)
    return clamped


def _custom_frequency(page: Page, func) -> str:
    value = func(page)
    if value not in CHANGEFREQ_VALUES:
        raise ConfigurationTypeError(
            f"Frequency for page '{page.id}' must be one of "
            f"{sorted(CHANGEFREQ_VALUES)}, got {value!r}."
        )
    return value


def annotate_pages(pages: Iterable[Page], config: SitemapConfig) -> Dict[str, Annotation]:
    """Compute priority/changefreq for each page, keyed by page id."""
    annotations: Dict[str, Annotation] = {}
    for page in pages:
        annotation = Annotation()

        if config.frequency.mode is OptionMode.DEFAULT:
            annotation.frequency = default_frequency(page)
        elif config.frequency.mode is OptionMode.CUSTOM:
            annotation.frequency = _custom_frequency(page, config.frequency.func)

        if config.priority.mode is OptionMode.DEFAULT:
            annotation.priority = default_priority(page)
        elif config.priority.mode is OptionMode.CUSTOM:
            annotation.priority = _custom_priority(page, config.priority.func)

        annotations[page.id] = annotation
    return annotations
