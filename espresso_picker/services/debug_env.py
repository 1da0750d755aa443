# espresso_picker/services/debug_env.py

"""Configuration presence report for deployment debugging."""

import os
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any


def debug_info(
    env: Mapping[str, str] | None = None, now: datetime | None = None
) -> dict[str, Any]:
    """Report whether the Supabase secrets are set, never their values."""
    env = os.environ if env is None else env
    url = env.get("PUBLIC_SUPABASE_URL", "")
    key = env.get("PUBLIC_SUPABASE_ANON_KEY", "")
    moment = now or datetime.now(timezone.utc)
    return {
        "hasSupabaseUrl": bool(url),
        "hasSupabaseKey": bool(key),
        "supabaseUrlLength": len(url),
        "supabaseKeyLength": len(key),
        "envKeys": sorted(k for k in env if "SUPABASE" in k),
        "timestamp": moment.isoformat(),
    }
