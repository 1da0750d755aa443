# espresso_picker/config/settings.py

"""Central configuration for the espresso_picker site."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the espresso_picker site."""

    # --- Remote store (Supabase) ---
    SUPABASE_URL: str = os.getenv("PUBLIC_SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("PUBLIC_SUPABASE_ANON_KEY", "")
    MACHINES_TABLE: str = "espresso_machines"
    IMAGE_BUCKET: str = "espresso-machine-images"
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": "application/json",
        "cache-control": "no-cache",
    }

    # --- Catalog cache ---
    CACHE_KEY: str = "machinesCache"
    STALE_AFTER_SECONDS: float = 60 * 60    # Background refresh gate

    # --- Images ---
    SIGNED_URL_TTL: int = 60 * 60 * 24  # Signed URL validity (secs)
    IMAGE_WIDTH: int = 800
    THUMBNAIL_WIDTH: int = 400
    IMAGE_QUALITY: int = 100
    IMAGE_RESIZE_MODE: str = "contain"

    # --- Site / sitemap ---
    SITE_URL: str = "https://espressopicker.com"
    STATIC_ROUTES: list[str] = ["/", "/compare/"]
    FALLBACK_MACHINE_IDS: list[str] = [
        "breville-barista-express-impress",
        "gaggia-classic-pro",
        "breville-bambino-plus",
        "rancilio-silvia",
        "la-pavoni-europiccola",
    ]
    SITEMAP_CHANGEFREQ: str = "weekly"
    SITEMAP_PRIORITY: str = "0.8"
    SITEMAP_MAX_AGE: int = 3600         # Cache-Control max-age (secs)

    # --- HTTP server ---
    SERVER_HOST: str = os.getenv("ESPRESSO_PICKER_HOST", "127.0.0.1")
    SERVER_PORT: int = int(os.getenv("ESPRESSO_PICKER_PORT", "8000"))

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = BASE_DIR / "logs"
