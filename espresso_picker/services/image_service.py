# espresso_picker/services/image_service.py

"""Signed, resized machine image URLs."""

import asyncio
import logging
from typing import Any

from espresso_picker.config.settings import Settings
from espresso_picker.models.machine import ImageInfo
from espresso_picker.services.supabase_client import (
    RemoteStoreError,
    SupabaseClient,
)

logger = logging.getLogger("espresso_picker.images")


def _transform(width: int) -> dict[str, Any]:
    return {
        "width": width,
        "resize": Settings.IMAGE_RESIZE_MODE,
        "quality": Settings.IMAGE_QUALITY,
    }


class ImageService:
    """Looks up image paths and signs them for 24 hours.

    Lookups never raise: a missing image or a remote failure yields
    ``None`` (single) or an empty mapping (batch) and is logged.
    """

    def __init__(self, client: SupabaseClient) -> None:
        self.client = client

    async def _sign(self, row: dict[str, Any], width: int) -> ImageInfo | None:
        try:
            url = await self.client.create_signed_url(
                row["image_path"],
                expires_in=Settings.SIGNED_URL_TTL,
                transform=_transform(width),
            )
        except RemoteStoreError as exc:
            logger.error(
                "Image not found for machine %s (path: %s): %s",
                row.get("id"),
                row["image_path"],
                exc,
            )
            return None
        return ImageInfo(
            url=url,
            image_caption=row.get("image_caption"),
            image_source=row.get("image_source"),
        )

    async def fetch_machine_image(
        self, machine_id: str, width: int = Settings.IMAGE_WIDTH
    ) -> ImageInfo | None:
        """Signed image for one machine, ``None`` if it has none."""
        try:
            row = await self.client.fetch_image_row(machine_id)
        except RemoteStoreError as exc:
            logger.warning("No image found for machine %s: %s", machine_id, exc)
            return None

        if not row or not row.get("image_path"):
            logger.warning("No image found for machine %s", machine_id)
            return None

        return await self._sign(row, width)

    async def fetch_machine_images(
        self, machine_ids: list[str], width: int = Settings.THUMBNAIL_WIDTH
    ) -> dict[str, ImageInfo | None]:
        """Signed images for many machines, keyed by machine id.

        Machines without an ``image_path`` are left out; machines whose
        URL could not be signed map to ``None``.
        """
        try:
            rows = await self.client.fetch_image_rows(machine_ids)
        except RemoteStoreError as exc:
            logger.warning("Error fetching machine image data: %s", exc)
            return {}

        with_images = [row for row in rows if row.get("image_path")]
        signed = await asyncio.gather(
            *(self._sign(row, width) for row in with_images)
        )
        return {
            str(row["id"]): info for row, info in zip(with_images, signed)
        }
