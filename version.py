# XML Sitemap - version shown by the API (/health + OpenAPI)
# On each release: bump VERSION, update RELEASE_NOTE and prepend to RELEASE_HISTORY.

VERSION = "1.0.0"
RELEASE_NOTE = "Single-flight sitemap build with a bounded build time, JSON site loader, FastAPI routes."

# Previous release notes (most recent first)
RELEASE_HISTORY = [
    {"version": "1.0.0-beta.1", "date": "2026-09-28", "note": "sitemap.xml and sitemap.xsl routes, multilingual alternate links, image entries."},
]
