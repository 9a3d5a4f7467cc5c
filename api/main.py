# =============================================================================
# XML SITEMAP API - FastAPI
# Routes exposing the sitemap module (modules/sitemap) over HTTP
# =============================================================================

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from modules.sitemap import SitemapBuildTimeout, SitemapError, SitemapService
from modules.sitemap.service import read_stylesheet
from version import VERSION

logger = logging.getLogger(__name__)


# =============================================================================
# SCHEMAS
# =============================================================================
class HealthResponse(BaseModel):
    status: str
    version: str


# =============================================================================
# APP
# =============================================================================
def create_app(service: Optional[SitemapService] = None) -> FastAPI:
    """Build the app; without a service one is created from the environment
    on the first request."""
    app = FastAPI(title="XML Sitemap", version=VERSION)
    state = {"service": service}

    def _get_service() -> SitemapService:
        if state["service"] is None:
            state["service"] = SitemapService.from_env()
        return state["service"]

    @app.get("/sitemap.xsl")
    def sitemap_stylesheet():
        """Static XSL stylesheet: no cache, no site, no options."""
        return Response(read_stylesheet(), media_type="text/xsl")

    @app.get("/sitemap.xml")
    def sitemap_xml():
        """Cached or freshly generated sitemap."""
        try:
            xml = _get_service().render()
        except SitemapBuildTimeout as e:
            logger.error("sitemap.xml timed out: %s", e)
            raise HTTPException(status_code=503, detail=str(e))
        except SitemapError as e:
            logger.error("sitemap.xml failed: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        return Response(xml, media_type="text/xml")

    @app.get("/health", response_model=HealthResponse)
    def health():
        """Health check."""
        return HealthResponse(status="ok", version=VERSION)

    return app


app = create_app()
