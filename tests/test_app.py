# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import json
import tempfile
import time
import unittest
from pathlib import Path
from typing import Any

from textual import events
from textual.widgets import DataTable, Input, Static

from espresso_picker.services.comparison import SPEC_ROWS
from espresso_picker.storage.catalog_cache import CatalogCache
from espresso_picker.storage.local_store import LocalStore
from espresso_picker.ui.app import EspressoPickerApp

ROWS: list[dict[str, Any]] = [
    {"id": "bambino-plus", "brand": "Breville", "name": "Breville Bambino Plus",
     "price_usd": 499, "boiler_type": "thermojet", "heat_up_seconds": 3},
    {"id": "classic-pro", "brand": "Gaggia", "name": "Gaggia Classic Pro",
     "price_usd": 449, "boiler_type": "single", "heat_up_seconds": 300},
    {"id": "silvia", "brand": "Rancilio", "name": "Rancilio Silvia",
     "price_usd": 1040, "boiler_type": "single", "heat_up_seconds": 900},
]


class FakeRemote:
    """Remote fetcher returning a fixed catalog."""

    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self.rows = rows
        self.calls = 0

    async def __call__(self) -> list[dict[str, Any]]:
        self.calls += 1
        return self.rows


class TestEspressoPickerApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    def setUp(self) -> None:
        self.store = LocalStore(Path(tempfile.mkdtemp()))
        self.remote = FakeRemote(ROWS)

    def _app(self) -> EspressoPickerApp:
        return EspressoPickerApp(cache=CatalogCache(self.store, self.remote))

    async def test_app_composes_without_crash(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            app.query_one("#filter_input", Input)
            app.query_one("#catalog_table", DataTable)
            app.query_one("#compare_table", DataTable)
            app.query_one("#status", Static)
            await pilot.pause()

    async def test_startup_fetches_and_fills_table(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            table = app.query_one("#catalog_table", DataTable)
            self.assertEqual(table.row_count, 3)
        self.assertEqual(self.remote.calls, 1)

    async def test_startup_with_cache_skips_fetch(self) -> None:
        self.store.set_item(
            "machinesCache",
            json.dumps({"data": ROWS[:1], "timestamp": int(time.time() * 1000)}),
        )
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            table = app.query_one("#catalog_table", DataTable)
            self.assertEqual(table.row_count, 1)
        self.assertEqual(self.remote.calls, 0)

    async def test_filter_narrows_rows(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            app.query_one("#filter_input", Input).value = "gaggia"
            await pilot.pause()
            table = app.query_one("#catalog_table", DataTable)
            self.assertEqual(table.row_count, 1)
            self.assertEqual(app.visible_machines[0].id, "classic-pro")

    async def test_compare_two_machines(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            table = app.query_one("#catalog_table", DataTable)

            table.move_cursor(row=0)
            app.action_toggle_compare()
            table.move_cursor(row=2)
            app.action_toggle_compare()
            app.action_compare()
            await pilot.pause()

            self.assertEqual(app.compare_ids, ["bambino-plus", "silvia"])
            compare = app.query_one("#compare_table", DataTable)
            self.assertEqual(compare.row_count, len(SPEC_ROWS))
            self.assertEqual(len(compare.columns), 3)

    async def test_compare_needs_two_machines(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            app.action_compare()
            await pilot.pause()
            compare = app.query_one("#compare_table", DataTable)
            self.assertEqual(compare.row_count, 0)

    async def test_toggle_twice_deselects(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            app.action_toggle_compare()
            app.action_toggle_compare()
            self.assertEqual(app.compare_ids, [])

    async def test_clear_cache_keeps_table(self) -> None:
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            app.action_clear_cache()
            await pilot.pause()
            self.assertIsNone(self.store.get_item("machinesCache"))
            table = app.query_one("#catalog_table", DataTable)
            self.assertEqual(table.row_count, 3)

    async def test_focus_with_stale_cache_refreshes(self) -> None:
        self.store.set_item(
            "machinesCache", json.dumps({"data": ROWS[:1], "timestamp": 0})
        )
        app = self._app()
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            app.on_app_focus(events.AppFocus())
            await app.workers.wait_for_complete()
            await pilot.pause()
            table = app.query_one("#catalog_table", DataTable)
            self.assertEqual(table.row_count, 3)
        self.assertGreaterEqual(self.remote.calls, 1)


if __name__ == "__main__":
    unittest.main()
