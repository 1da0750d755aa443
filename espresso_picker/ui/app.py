# espresso_picker/ui/app.py

"""Terminal UI for browsing and comparing espresso machines."""

import logging
from collections.abc import Callable
from typing import cast

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, DataTable, Footer, Header, Input, Static

from espresso_picker.models.machine import MachineRecord
from espresso_picker.services.comparison import (
    build_comparison,
    find_machines,
    search_machines,
    summary_row,
)
from espresso_picker.storage.catalog_cache import (
    CatalogCache,
    CatalogState,
    build_catalog_cache,
)

logger = logging.getLogger("espresso_picker.ui")

MAX_COMPARE = 4


class EspressoPickerApp(App[object]):
    """Terminal UI for browsing and comparing espresso machines."""

    CSS = """
    #filter_bar { height: 3; }
    #filter_input { width: 1fr; }
    #status { height: 1; padding: 0 1; }
    #catalog_table { height: 1fr; }
    #compare_table { height: 1fr; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("space", "toggle_compare", "Select"),
        Binding("c", "compare", "Compare"),
        Binding("r", "refresh", "Refresh"),
        Binding("x", "clear_cache", "Clear Cache"),
    ]

    def __init__(self, cache: CatalogCache | None = None) -> None:
        super().__init__()
        self.cache = cache or build_catalog_cache()
        self.visible_machines: list[MachineRecord] = []
        self.compare_ids: list[str] = []
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("☕ Espresso Picker", id="title"),
            Horizontal(
                Input(placeholder="Filter by brand or model...", id="filter_input"),
                Button("Compare", variant="primary", id="compare_btn"),
                id="filter_bar",
            ),
            Static("Ready", id="status"),
            DataTable(id="catalog_table", zebra_stripes=True, cursor_type="row"),
            DataTable(id="compare_table", zebra_stripes=True),
            id="main_container",
        )
        yield Footer()

    def _catalog_table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#catalog_table", DataTable),
        )

    def on_mount(self) -> None:
        """Configure tables and start the cache's startup policy."""
        self._catalog_table().add_columns(
            "", "Machine", "Price", "Boiler", "Heat-up", "Grinder"
        )
        self._unsubscribe = self.cache.subscribe(self._on_catalog_change)
        self.run_worker(self.cache.start(), group="catalog")

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    def on_app_focus(self, event: events.AppFocus) -> None:
        """The terminal regained focus: refresh in the background if stale."""
        self.run_worker(self.cache.on_visible(), group="catalog")

    # ── Rendering ────────────────────────────────────────

    def _on_catalog_change(self, state: CatalogState) -> None:
        status = self.query_one("#status", Static)
        if state.loading:
            status.update("⏳ Loading machines...")
        elif not state.machines:
            status.update("No machines available")
        else:
            status.update(f"{len(state.machines)} machines")
        self.populate_table()

    def populate_table(self) -> None:
        """Fill the catalog table with the filtered machine list."""
        table = self._catalog_table()
        table.clear()
        text = self.query_one("#filter_input", Input).value
        self.visible_machines = search_machines(self.cache.machines, text)

        for machine in self.visible_machines:
            row = summary_row(machine)
            selected = "✓" if machine.id in self.compare_ids else ""
            table.add_row(
                Text(selected, style="bold green"),
                row["name"],
                row["price"],
                row["boiler"],
                row["heat_up"],
                row["grinder"],
            )

    def populate_comparison(self) -> None:
        """Render the selected machines side by side."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#compare_table", DataTable),
        )
        table.clear(columns=True)
        machines = find_machines(self.cache.machines, self.compare_ids)
        if not machines:
            return
        table.add_columns("Spec", *(m.display_name for m in machines))
        for row in build_comparison(machines):
            table.add_row(Text(row.label, style="bold"), *row.values)

    # ── Events & actions ─────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "filter_input":
            self.populate_table()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "compare_btn":
            self.action_compare()

    def action_toggle_compare(self) -> None:
        """Add or remove the highlighted machine from the comparison."""
        row = self._catalog_table().cursor_row
        if not 0 <= row < len(self.visible_machines):
            return
        machine_id = self.visible_machines[row].id
        if machine_id in self.compare_ids:
            self.compare_ids.remove(machine_id)
        elif len(self.compare_ids) >= MAX_COMPARE:
            self.notify(
                f"Compare up to {MAX_COMPARE} machines", severity="warning"
            )
            return
        else:
            self.compare_ids.append(machine_id)
        self.populate_table()
        self._catalog_table().move_cursor(row=row)

    def action_compare(self) -> None:
        if len(self.compare_ids) < 2:
            self.notify("Select at least two machines", severity="warning")
            return
        self.populate_comparison()

    def action_refresh(self) -> None:
        self.run_worker(self.cache.refresh(), group="catalog")

    def action_clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Cache cleared from the TUI")
        self.notify("Local cache cleared")
