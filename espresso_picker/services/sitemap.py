# espresso_picker/services/sitemap.py

"""XML sitemap generation for the static and per-machine pages."""

import logging
from datetime import datetime, timezone
from xml.sax.saxutils import escape

from espresso_picker.config.settings import Settings
from espresso_picker.services.supabase_client import (
    RemoteStoreError,
    SupabaseClient,
)

logger = logging.getLogger("espresso_picker.sitemap")

_SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


async def collect_machine_ids(client: SupabaseClient) -> list[str]:
    """Machine ids from the remote store, or the static fallback list."""
    if not client.configured:
        logger.info("No Supabase credentials, using fallback machine pages")
        return list(Settings.FALLBACK_MACHINE_IDS)
    try:
        return await client.fetch_machine_ids()
    except RemoteStoreError as exc:
        logger.error("Error fetching machines for sitemap: %s", exc)
        return list(Settings.FALLBACK_MACHINE_IDS)


def build_page_urls(machine_ids: list[str]) -> list[str]:
    """Absolute URLs for the static routes followed by each machine page."""
    base = Settings.SITE_URL.rstrip("/")
    static_pages = [f"{base}{route}" for route in Settings.STATIC_ROUTES]
    machine_pages = [f"{base}/machines/{mid}" for mid in machine_ids]
    return static_pages + machine_pages


def _iso_timestamp(moment: datetime) -> str:
    """``2026-10-18T09:30:00.000Z`` style UTC timestamp."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def render_sitemap(urls: list[str], now: datetime | None = None) -> str:
    """Render a ``urlset`` document with one entry per URL."""
    lastmod = _iso_timestamp(now or datetime.now(timezone.utc))
    entries = "\n".join(
        "  <url>\n"
        f"    <loc>{escape(url)}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n"
        f"    <changefreq>{Settings.SITEMAP_CHANGEFREQ}</changefreq>\n"
        f"    <priority>{Settings.SITEMAP_PRIORITY}</priority>\n"
        "  </url>"
        for url in urls
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{_SITEMAP_NS}">\n'
        f"{entries}\n"
        "</urlset>"
    )


async def generate_sitemap(
    client: SupabaseClient, now: datetime | None = None
) -> str:
    """Collect machine ids and render the full sitemap document."""
    machine_ids = await collect_machine_ids(client)
    urls = build_page_urls(machine_ids)
    logger.info("Generated sitemap with %d URLs", len(urls))
    return render_sitemap(urls, now)
