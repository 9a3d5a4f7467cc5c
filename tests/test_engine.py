import time

import pytest

from core import runtime
from modules.sitemap.config import SitemapConfig, load_config
from modules.sitemap.engine import SitemapEngine
from modules.sitemap.errors import ProcessResultTypeError, SitemapBuildTimeout

from conftest import locs, parse


def ids(pages):
    return [p.id for p in pages]


def test_select_hides_invisible_pages(site):
    engine = SitemapEngine(site, SitemapConfig())
    assert ids(engine.select_pages(site.index())) == [
        "home", "blog", "blog/first-post", "error",
    ]


def test_select_can_include_invisible_pages(site):
    engine = SitemapEngine(site, SitemapConfig(include_invisible=True))
    assert "drafts" in ids(engine.select_pages(site.index()))


def test_select_ignored_pages_keep_order(site):
    engine = SitemapEngine(site, SitemapConfig(ignored_pages=frozenset({"blog"})))
    assert ids(engine.select_pages(site.index())) == ["home", "blog/first-post", "error"]


def test_ignored_templates_win_over_visibility(site):
    config = SitemapConfig(include_invisible=True, ignored_templates=frozenset({"error"}))
    engine = SitemapEngine(site, config)
    selected = engine.select_pages(site.index())
    assert all(p.intended_template != "error" for p in selected)


def test_process_transform(site):
    config = SitemapConfig(process=lambda pages: [p for p in pages if p.depth < 2])
    xml = SitemapEngine(site, config).generate_xml()
    assert not any("first-post" in loc for loc in locs(parse(xml)))


@pytest.mark.parametrize("result", [None, "home", [1, 2], {"home": 1}])
def test_process_must_return_pages(site, result):
    config = SitemapConfig(process=lambda pages: result)
    with pytest.raises(ProcessResultTypeError, match="collection"):
        SitemapEngine(site, config).generate_xml()


def test_stats(site):
    runtime.init({"sitemap.priority": True, "sitemap.frequency": True})
    engine = SitemapEngine(site, load_config())
    engine.generate_xml()
    stats = engine.last_stats
    assert stats["total"] == 4
    assert stats["by_changefreq"] == {"weekly": 3, "daily": 1}
    assert stats["avg_priority"] == round((1.0 + 0.8 + 0.5 + 0.8) / 4, 3)


def test_stats_empty(site):
    engine = SitemapEngine(site, SitemapConfig())
    assert engine.get_stats([], {})["total"] == 0


def test_deadline_aborts_build(site):
    engine = SitemapEngine(site, SitemapConfig())
    with pytest.raises(SitemapBuildTimeout):
        engine.generate_xml(deadline=time.monotonic() - 1)


def test_stylesheet_url_uses_site(site):
    xml = SitemapEngine(site, SitemapConfig()).generate_xml()
    assert '<?xml-stylesheet type="text/xsl" href="https://example.com/sitemap.xsl"?>' in xml
