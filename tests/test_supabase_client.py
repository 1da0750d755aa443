# tests/test_supabase_client.py

"""Tests for the async Supabase REST/Storage client."""

import unittest
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

from espresso_picker.services.supabase_client import (
    RemoteStoreError,
    SupabaseClient,
)

URL = "https://proj.supabase.co"
KEY = "anon-key"


def _response(status: int = 200, body: Any = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = "" if body is None else str(body)
    resp.json.return_value = body
    return resp


class TestSupabaseClient(unittest.IsolatedAsyncioTestCase):
    """Request building and error mapping."""

    def setUp(self) -> None:
        patcher = patch("espresso_picker.services.supabase_client.AsyncSession")
        self.mock_session_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.session = MagicMock()
        self.session.request = AsyncMock(return_value=_response(body=[]))
        self.mock_session_cls.return_value.__aenter__.return_value = self.session
        self.mock_session_cls.return_value.__aexit__.return_value = False
        self.client = SupabaseClient(url=URL + "/", key=KEY)

    def _last_call(self) -> tuple[tuple[Any, ...], dict[str, Any]]:
        call = self.session.request.await_args
        assert call is not None
        return call.args, call.kwargs

    async def test_fetch_machines_orders_by_brand(self) -> None:
        rows = [{"id": "a", "brand": "Breville"}]
        self.session.request.return_value = _response(body=rows)

        result = await self.client.fetch_machines()

        self.assertEqual(result, rows)
        args, kwargs = self._last_call()
        self.assertEqual(args, ("GET", f"{URL}/rest/v1/espresso_machines"))
        self.assertEqual(kwargs["params"], {"select": "*", "order": "brand.asc"})

    async def test_auth_headers_sent(self) -> None:
        await self.client.fetch_machines()
        _, kwargs = self._last_call()
        self.assertEqual(kwargs["headers"]["apikey"], KEY)
        self.assertEqual(kwargs["headers"]["Authorization"], f"Bearer {KEY}")

    async def test_fetch_machine_ids(self) -> None:
        self.session.request.return_value = _response(
            body=[{"id": "a"}, {"id": None}, {"id": "b"}]
        )
        ids = await self.client.fetch_machine_ids()
        self.assertEqual(ids, ["a", "b"])
        _, kwargs = self._last_call()
        self.assertEqual(kwargs["params"]["id"], "not.is.null")

    async def test_fetch_image_rows_uses_in_filter(self) -> None:
        await self.client.fetch_image_rows(["a", "b"])
        _, kwargs = self._last_call()
        self.assertEqual(kwargs["params"]["id"], 'in.("a","b")')

    async def test_fetch_image_rows_empty_ids_skips_request(self) -> None:
        self.assertEqual(await self.client.fetch_image_rows([]), [])
        self.session.request.assert_not_awaited()

    async def test_fetch_image_row_missing(self) -> None:
        self.assertIsNone(await self.client.fetch_image_row("nope"))

    async def test_non_200_raises(self) -> None:
        self.session.request.return_value = _response(status=500, body="boom")
        with self.assertRaises(RemoteStoreError) as ctx:
            await self.client.fetch_machines()
        self.assertIn("500", str(ctx.exception))

    async def test_transport_error_raises(self) -> None:
        self.session.request.side_effect = ConnectionError("refused")
        with self.assertRaises(RemoteStoreError):
            await self.client.fetch_machines()

    async def test_invalid_json_raises(self) -> None:
        resp = _response()
        resp.json.side_effect = ValueError("not json")
        self.session.request.return_value = resp
        with self.assertRaises(RemoteStoreError):
            await self.client.fetch_machines()

    async def test_non_list_body_raises(self) -> None:
        self.session.request.return_value = _response(body={"message": "x"})
        with self.assertRaises(RemoteStoreError):
            await self.client.fetch_machines()

    async def test_missing_credentials_raise_without_request(self) -> None:
        client = SupabaseClient(url="", key="")
        self.assertFalse(client.configured)
        with self.assertRaises(RemoteStoreError):
            await client.fetch_machines()
        self.session.request.assert_not_awaited()

    async def test_create_signed_url(self) -> None:
        self.session.request.return_value = _response(
            body={"signedURL": "/object/sign/espresso-machine-images/a.png?token=t"}
        )
        url = await self.client.create_signed_url(
            "a.png", expires_in=86400, transform={"width": 400}
        )
        self.assertEqual(
            url,
            f"{URL}/storage/v1/object/sign/espresso-machine-images/a.png?token=t",
        )
        args, kwargs = self._last_call()
        self.assertEqual(args[0], "POST")
        self.assertTrue(
            args[1].endswith("/storage/v1/object/sign/espresso-machine-images/a.png")
        )
        self.assertEqual(
            kwargs["json"], {"expiresIn": 86400, "transform": {"width": 400}}
        )

    async def test_create_signed_url_without_url_raises(self) -> None:
        self.session.request.return_value = _response(body={"error": "nope"})
        with self.assertRaises(RemoteStoreError):
            await self.client.create_signed_url("a.png")


if __name__ == "__main__":
    unittest.main()
