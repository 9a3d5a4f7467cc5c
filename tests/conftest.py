from datetime import datetime, timezone
from xml.etree import ElementTree as ET

import pytest

from core import runtime
from modules.sitemap.models import Image, ImageMeta, Language, Page
from modules.sitemap.site import Site, UrlBuilder

NS = {
    "sm": "http://www.sitemaps.org/schemas/sitemap/0.9",
    "xhtml": "http://www.w3.org/1999/xhtml",
    "image": "http://www.google.com/schemas/sitemap-image/1.1",
}

MODIFIED = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_runtime():
    runtime.init({})
    yield
    runtime.init({})


@pytest.fixture
def make_page():
    def _make(page_id, **kwargs):
        kwargs.setdefault("languages", frozenset({"en", "de"}))
        kwargs.setdefault("modified", MODIFIED)
        return Page(id=page_id, **kwargs)
    return _make


@pytest.fixture
def languages():
    return [Language("en", default=True), Language("de")]


@pytest.fixture
def pages(make_page):
    return [
        make_page("home", intended_template="home", depth=0, is_home_page=True),
        make_page("blog", intended_template="blog", depth=1),
        make_page(
            "blog/first-post",
            intended_template="article",
            depth=2,
            languages=frozenset({"en"}),
            images=(
                Image(
                    url="https://example.com/media/cover.jpg",
                    metadata={"en": ImageMeta(caption="", alt="A red cover")},
                ),
            ),
        ),
        make_page("drafts", depth=1, visible=False),
        make_page("error", intended_template="error", depth=1),
    ]


@pytest.fixture
def site(pages, languages):
    return Site(pages, languages, UrlBuilder("https://example.com"))


def parse(xml):
    return ET.fromstring(xml.encode("utf-8"))


def locs(root):
    return [el.text for el in root.findall("sm:url/sm:loc", NS)]
