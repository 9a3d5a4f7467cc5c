"""Sitemap configuration: resolved once per build from core.runtime options.

Boolean-or-callable options are turned into an AttributeOption
(OFF | DEFAULT | CUSTOM) and rejected eagerly when invalid.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Optional

from core.runtime import get_option
from modules.sitemap.errors import ConfigurationCallableError, ConfigurationTypeError

OPT_INCLUDE_INVISIBLE = "sitemap.include.invisible"
OPT_IGNORED_PAGES = "sitemap.ignored.pages"
OPT_IGNORED_TEMPLATES = "sitemap.ignored.templates"
OPT_PROCESS = "sitemap.process"
OPT_PRIORITY = "sitemap.priority"
OPT_FREQUENCY = "sitemap.frequency"
OPT_INCLUDE_IMAGES = "sitemap.include.images"
OPT_IMAGES_LICENSE = "sitemap.images.license"
OPT_CACHE_TTL = "sitemap.cache.ttl"
OPT_BUILD_TIMEOUT = "sitemap.build.timeout"

DEFAULT_BUILD_TIMEOUT = 30.0

_ARRAY_TYPES = (list, tuple, set, frozenset)


class OptionMode(enum.Enum):
    OFF = "off"
    DEFAULT = "default"
    CUSTOM = "custom"


@dataclass(frozen=True)
class AttributeOption:
    mode: OptionMode = OptionMode.OFF
    func: Optional[Callable[[Any], Any]] = None

    @property
    def enabled(self) -> bool:
        return self.mode is not OptionMode.OFF

    @classmethod
    def parse(cls, value: Any) -> "AttributeOption":
        if not value:
            return cls(OptionMode.OFF)
        if isinstance(value, bool):
            return cls(OptionMode.DEFAULT)
        if not callable(value):
            raise ConfigurationCallableError(f"{value!r} is not callable.")
        return cls(OptionMode.CUSTOM, value)


@dataclass(frozen=True)
class SitemapConfig:
    include_invisible: bool = False
    ignored_pages: FrozenSet[str] = frozenset()
    ignored_templates: FrozenSet[str] = frozenset()
    process: Optional[Callable] = None
    priority: AttributeOption = field(default_factory=AttributeOption)
    frequency: AttributeOption = field(default_factory=AttributeOption)
    include_images: bool = True
    images_license: Optional[str] = None
    cache_ttl: Optional[float] = None
    build_timeout: float = DEFAULT_BUILD_TIMEOUT


def _array_option(name: str) -> FrozenSet[str]:
    # only a missing option defaults to empty, an explicit None is rejected
    value = get_option(name, [])
    if not isinstance(value, _ARRAY_TYPES):
        raise ConfigurationTypeError(f'The option "{name}" must be an array.')
    return frozenset(str(v) for v in value)


def load_config() -> SitemapConfig:
    """Read and validate every sitemap option from the runtime context."""
    ignored_pages = _array_option(OPT_IGNORED_PAGES)
    ignored_templates = _array_option(OPT_IGNORED_TEMPLATES)

    process = get_option(OPT_PROCESS)
    if process is not None and not callable(process):
        raise ConfigurationCallableError(f"{process!r} is not callable.")

    cache_ttl = get_option(OPT_CACHE_TTL)
    build_timeout = get_option(OPT_BUILD_TIMEOUT, DEFAULT_BUILD_TIMEOUT)
    try:
        cache_ttl = float(cache_ttl) if cache_ttl is not None else None
        build_timeout = float(build_timeout)
    except (TypeError, ValueError):
        raise ConfigurationTypeError(
            f'The options "{OPT_CACHE_TTL}" and "{OPT_BUILD_TIMEOUT}" must be numbers.'
        ) from None

    return SitemapConfig(
        include_invisible=bool(get_option(OPT_INCLUDE_INVISIBLE, False)),
        ignored_pages=ignored_pages,
        ignored_templates=ignored_templates,
        process=process,
        priority=AttributeOption.parse(get_option(OPT_PRIORITY, False)),
        frequency=AttributeOption.parse(get_option(OPT_FREQUENCY, False)),
        include_images=bool(get_option(OPT_INCLUDE_IMAGES, True)),
        images_license=get_option(OPT_IMAGES_LICENSE) or None,
        cache_ttl=cache_ttl,
        build_timeout=build_timeout,
    )
