# espresso_picker/services/supabase_client.py

"""Async client for the Supabase REST and Storage APIs."""

import logging
from typing import Any
from urllib.parse import quote

from curl_cffi.requests import AsyncSession

from espresso_picker.config.settings import Settings

logger = logging.getLogger("espresso_picker.supabase")

MACHINE_IMAGE_COLUMNS = "id,image_path,image_caption,image_source"


class RemoteStoreError(Exception):
    """The remote store could not answer a request."""


class SupabaseClient:
    """Lightweight read-only client for the machines table and bucket.

    Every failure (missing credentials, transport error, non-200
    status, undecodable body) is raised as :class:`RemoteStoreError`;
    callers decide whether to swallow it.
    """

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        timeout: int | None = None,
    ) -> None:
        self.url = (url if url is not None else Settings.SUPABASE_URL).rstrip("/")
        self.key = key if key is not None else Settings.SUPABASE_ANON_KEY
        self.timeout = timeout or Settings.REQUEST_TIMEOUT
        if not self.configured:
            logger.warning(
                "PUBLIC_SUPABASE_URL or PUBLIC_SUPABASE_ANON_KEY not set"
            )
        self.headers: dict[str, str] = {
            **Settings.DEFAULT_HEADERS,
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
        }

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        if not self.configured:
            raise RemoteStoreError("Supabase credentials are not configured")

        try:
            async with AsyncSession(
                impersonate=Settings.IMPERSONATE_BROWSER
            ) as session:
                resp = await session.request(
                    method,
                    f"{self.url}{path}",
                    headers=self.headers,
                    params=params,
                    json=payload,
                    timeout=self.timeout,
                )
        except Exception as exc:
            raise RemoteStoreError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code != 200:
            raise RemoteStoreError(
                f"HTTP {resp.status_code} from {path}: {resp.text[:200]}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteStoreError(f"Invalid JSON from {path}") from exc

    # ── Table reads ──────────────────────────────────────

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, str] | None = None,
        order: str | None = None,
    ) -> list[dict[str, Any]]:
        """Query a table through PostgREST.

        *filters* maps column names to PostgREST operator expressions
        such as ``"eq.gaggia-classic-pro"`` or ``"not.is.null"``.
        """
        params: dict[str, str] = {"select": columns}
        if filters:
            params.update(filters)
        if order:
            params["order"] = order

        rows = await self._request("GET", f"/rest/v1/{table}", params=params)
        if not isinstance(rows, list):
            raise RemoteStoreError(f"Expected a row list from {table}")
        logger.debug("Selected %d rows from %s", len(rows), table)
        return rows

    async def fetch_machines(self) -> list[dict[str, Any]]:
        """Full scan of the machines table ordered by brand ascending."""
        return await self.select(Settings.MACHINES_TABLE, order="brand.asc")

    async def fetch_machine_ids(self) -> list[str]:
        rows = await self.select(
            Settings.MACHINES_TABLE,
            columns="id",
            filters={"id": "not.is.null"},
        )
        return [str(row["id"]) for row in rows if row.get("id")]

    async def fetch_image_row(self, machine_id: str) -> dict[str, Any] | None:
        """Image metadata for one machine, ``None`` when it does not exist."""
        rows = await self.select(
            Settings.MACHINES_TABLE,
            columns=MACHINE_IMAGE_COLUMNS,
            filters={"id": f"eq.{machine_id}"},
        )
        return rows[0] if rows else None

    async def fetch_image_rows(
        self, machine_ids: list[str]
    ) -> list[dict[str, Any]]:
        """Image metadata for every listed machine id."""
        if not machine_ids:
            return []
        quoted = ",".join(f'"{mid}"' for mid in machine_ids)
        return await self.select(
            Settings.MACHINES_TABLE,
            columns=MACHINE_IMAGE_COLUMNS,
            filters={"id": f"in.({quoted})"},
        )

    # ── Storage ──────────────────────────────────────────

    async def create_signed_url(
        self,
        path: str,
        expires_in: int = Settings.SIGNED_URL_TTL,
        transform: dict[str, Any] | None = None,
        bucket: str = Settings.IMAGE_BUCKET,
    ) -> str:
        """Sign *path* in *bucket* for *expires_in* seconds."""
        payload: dict[str, Any] = {"expiresIn": expires_in}
        if transform:
            payload["transform"] = transform

        body = await self._request(
            "POST",
            f"/storage/v1/object/sign/{bucket}/{quote(path, safe='/')}",
            payload=payload,
        )
        signed = body.get("signedURL") if isinstance(body, dict) else None
        if not signed:
            raise RemoteStoreError(f"No signed URL returned for {path}")
        return f"{self.url}/storage/v1{signed}"
