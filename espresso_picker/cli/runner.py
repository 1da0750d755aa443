# espresso_picker/cli/runner.py

"""Headless CLI commands sharing the TUI's catalog cache."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from espresso_picker.models.machine import MachineRecord
from espresso_picker.services.comparison import (
    build_comparison,
    find_machines,
    summary_row,
)
from espresso_picker.services.debug_env import debug_info
from espresso_picker.services.sitemap import generate_sitemap
from espresso_picker.services.supabase_client import SupabaseClient
from espresso_picker.storage.catalog_cache import (
    CatalogCache,
    build_catalog_cache,
)

logger = logging.getLogger("espresso_picker.cli")

# Stderr console for status messages so stdout stays clean for JSON/XML
_err = Console(stderr=True)


def _print_catalog(machines: list[MachineRecord]) -> None:
    """Render a Rich table of the catalog to stdout."""
    table = Table(
        title="Espresso Machines",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Id", style="dim")
    table.add_column("Machine", max_width=40)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Boiler")
    table.add_column("Heat-up", justify="right")
    table.add_column("Grinder")

    for idx, machine in enumerate(machines, 1):
        row = summary_row(machine)
        table.add_row(
            str(idx),
            row["id"],
            row["name"],
            row["price"],
            row["boiler"],
            row["heat_up"],
            row["grinder"],
        )

    Console().print(table)


async def run_list(
    output_format: str = "table", cache: CatalogCache | None = None
) -> int:
    """Print the catalog, fetching only if nothing is cached yet."""
    cache = cache or build_catalog_cache()
    await cache.start()
    machines = cache.machines

    if not machines:
        _err.print("[yellow]No machines available.[/yellow]")
        return 1

    if output_format == "json":
        json.dump(
            [m.to_dict() for m in machines],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    else:
        _print_catalog(machines)
    return 0


async def run_compare(
    machine_ids: list[str], cache: CatalogCache | None = None
) -> int:
    """Print a side-by-side spec table for the given machine ids."""
    cache = cache or build_catalog_cache()
    await cache.start()
    machines = find_machines(cache.machines, machine_ids)

    missing = [mid for mid in machine_ids if mid not in {m.id for m in machines}]
    if missing:
        _err.print(f"[yellow]Unknown machine(s): {', '.join(missing)}[/yellow]")
    if not machines:
        return 1

    table = Table(title="Comparison", show_lines=True, title_style="bold cyan")
    table.add_column("Spec", style="bold")
    for machine in machines:
        table.add_column(machine.display_name)
    for row in build_comparison(machines):
        table.add_row(row.label, *row.values)

    Console().print(table)
    return 0


async def run_refresh(cache: CatalogCache | None = None) -> int:
    """Force a fetch from the remote store and report the outcome."""
    cache = cache or build_catalog_cache()
    _err.print("[bold]Refreshing machine catalog...[/bold]")
    if await cache.refresh():
        _err.print(f"[green]✓ {len(cache.machines)} machines cached[/green]")
        return 0
    _err.print(
        f"[yellow]Refresh failed, serving {len(cache.machines)} "
        "cached machines (see log)[/yellow]"
    )
    return 1


def run_clear_cache(cache: CatalogCache | None = None) -> int:
    cache = cache or build_catalog_cache()
    cache.clear()
    _err.print("[green]✓ Local cache cleared[/green]")
    return 0


async def run_sitemap(client: SupabaseClient | None = None) -> int:
    """Write the sitemap XML to stdout."""
    xml = await generate_sitemap(client or SupabaseClient())
    sys.stdout.write(xml + "\n")
    return 0


def run_debug_env() -> int:
    json.dump(debug_info(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0
