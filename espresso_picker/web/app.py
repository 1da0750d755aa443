# espresso_picker/web/app.py

"""HTTP endpoints: sitemap and configuration debug report."""

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response

from espresso_picker.config.settings import Settings
from espresso_picker.services.debug_env import debug_info
from espresso_picker.services.sitemap import generate_sitemap
from espresso_picker.services.supabase_client import SupabaseClient

logger = logging.getLogger("espresso_picker.web")


def create_app(client: SupabaseClient | None = None) -> FastAPI:
    """Build the FastAPI app around a (possibly injected) Supabase client."""
    app = FastAPI(title="espresso_picker", docs_url=None, redoc_url=None)
    app.state.client = client or SupabaseClient()

    @app.get("/debug-env")
    async def debug_env() -> JSONResponse:
        return JSONResponse(content=debug_info())

    @app.get("/sitemap.xml")
    async def sitemap() -> Response:
        xml = await generate_sitemap(app.state.client)
        return Response(
            content=xml,
            media_type="application/xml",
            headers={
                "Cache-Control": f"public, max-age={Settings.SITEMAP_MAX_AGE}"
            },
        )

    return app


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Serve the endpoints with uvicorn until interrupted."""
    import uvicorn

    host = host or Settings.SERVER_HOST
    port = port or Settings.SERVER_PORT
    logger.info("Serving HTTP endpoints on %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_config=None)
