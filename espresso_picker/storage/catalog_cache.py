# espresso_picker/storage/catalog_cache.py

"""Catalog cache: persisted snapshot plus a best-effort refresh policy."""

import json
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import Any

from espresso_picker.config.settings import Settings
from espresso_picker.models.cache_entry import CacheEntry
from espresso_picker.models.machine import MachineRecord
from espresso_picker.services.supabase_client import (
    RemoteStoreError,
    SupabaseClient,
)
from espresso_picker.storage.local_store import LocalStore

Fetcher = Callable[[], Awaitable[list[dict[str, Any]]]]


@dataclass
class CatalogState:
    """What the UI renders: the machine list plus loading flags."""

    machines: list[MachineRecord] = field(
        default_factory=lambda: list[MachineRecord]()
    )
    loading: bool = False
    error: str | None = None
    last_updated: int = 0  # ms since epoch of the last successful fetch


class CatalogCache:
    """Serves the freshest available catalog without ever failing.

    Reads always come from the persisted snapshot regardless of its
    age; the age only decides whether a background refresh is worth
    trying. Every failure (storage, network, decode) degrades to the
    persisted data, else an empty list, and is reported through the
    injected logger only.

    Refreshes are not deduplicated: two overlapping calls both write
    the snapshot and the last one to finish wins.
    """

    def __init__(
        self,
        store: LocalStore,
        fetcher: Fetcher,
        *,
        cache_key: str = Settings.CACHE_KEY,
        stale_after: float = Settings.STALE_AFTER_SECONDS,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._cache_key = cache_key
        self._stale_after_ms = int(stale_after * 1000)
        self._clock = clock
        self._logger = logger or logging.getLogger("espresso_picker.cache")
        self._subscribers: list[Callable[[CatalogState], None]] = []
        self.state = CatalogState(machines=self.load())

    @property
    def machines(self) -> list[MachineRecord]:
        return self.state.machines

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ── Observers ────────────────────────────────────────

    def subscribe(
        self, callback: Callable[[CatalogState], None]
    ) -> Callable[[], None]:
        """Register *callback* for state changes.

        The callback runs once immediately with the current state.
        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)
        self._notify_one(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify_one(self, callback: Callable[[CatalogState], None]) -> None:
        try:
            callback(self.state)
        except Exception:
            self._logger.error("Catalog subscriber failed", exc_info=True)

    def _set_state(self, **changes: Any) -> None:
        self.state = replace(self.state, **changes)
        for callback in list(self._subscribers):
            self._notify_one(callback)

    # ── Persistence ──────────────────────────────────────

    def _read_entry(self) -> CacheEntry | None:
        """Read the persisted snapshot; ``None`` if absent or unusable."""
        try:
            raw = self._store.get_item(self._cache_key)
        except (OSError, ValueError) as exc:
            self._logger.warning(
                "Failed to read machines from local storage: %s", exc
            )
            return None
        if raw is None:
            return None

        try:
            return CacheEntry.from_dict(json.loads(raw))
        except (AttributeError, TypeError, ValueError) as exc:
            self._logger.warning(
                "Discarding unreadable machines cache: %s", exc
            )
            return None

    def _write_entry(self, machines: list[MachineRecord], timestamp: int) -> None:
        entry = CacheEntry(data=list(machines), timestamp=timestamp)
        try:
            self._store.set_item(
                self._cache_key,
                json.dumps(entry.to_dict(), ensure_ascii=False),
            )
        except (OSError, TypeError, ValueError) as exc:
            self._logger.warning(
                "Failed to save machines to local storage: %s", exc
            )

    # ── Public API ───────────────────────────────────────

    def load(self) -> list[MachineRecord]:
        """Return the persisted machines regardless of age.

        Returns an empty list when nothing is persisted or the
        snapshot cannot be read.
        """
        entry = self._read_entry()
        if entry is None:
            return []
        self._logger.debug("Loading %d machines from cache", len(entry.data))
        return entry.data

    def cache_age(self) -> int | None:
        """Milliseconds since the persisted snapshot was written."""
        entry = self._read_entry()
        if entry is None:
            return None
        return self._now_ms() - entry.timestamp

    async def refresh(self, silent: bool = False) -> bool:
        """Fetch the full catalog and replace the persisted snapshot.

        A silent refresh leaves ``loading``/``error`` untouched. On
        any failure the in-memory list falls back to the persisted
        snapshot (or empty) and ``False`` is returned; nothing is
        raised.
        """
        if not silent:
            self._set_state(loading=True, error=None)

        try:
            self._logger.info("Fetching machines from remote store")
            rows = await self._fetcher()
            if not rows:
                raise RemoteStoreError("No machines found in remote store")
            machines = [MachineRecord.from_row(row) for row in rows]
        except Exception as exc:
            self._logger.error(
                "Error fetching machines: %s", exc, exc_info=True
            )
            cached = self.load()
            if cached:
                self._logger.info(
                    "Using %d cached machines due to fetch failure",
                    len(cached),
                )
            else:
                self._logger.info("No cached machines available")
            changes: dict[str, Any] = {"machines": cached}
            if not silent:
                changes.update(loading=False, error=None)
            self._set_state(**changes)
            return False

        now = self._now_ms()
        self._set_state(
            machines=machines, loading=False, error=None, last_updated=now
        )
        self._write_entry(machines, now)
        self._logger.info("Successfully loaded %d machines", len(machines))
        return True

    def clear(self) -> None:
        """Delete the persisted snapshot; in-memory state is kept."""
        try:
            self._store.remove_item(self._cache_key)
        except OSError as exc:
            self._logger.warning("Failed to clear machines cache: %s", exc)
            return
        self._logger.info("Machines cache cleared")

    # ── Refresh policy ───────────────────────────────────

    async def start(self) -> None:
        """Startup policy: fetch only when nothing is persisted."""
        if self.load():
            self._logger.info("Using cached data, skipping initial fetch")
            return
        self._logger.info("No cached data found, attempting initial fetch")
        await self.refresh()

    async def on_visible(self) -> bool:
        """Silently refresh if the snapshot is older than the threshold.

        Called when the UI becomes visible again. Returns True when a
        refresh was attempted.
        """
        entry = self._read_entry()
        if entry is None or not entry.data:
            return False
        age = self._now_ms() - entry.timestamp
        if age <= self._stale_after_ms:
            return False
        self._logger.info(
            "Cached data is %.0f minutes old, refreshing in background",
            age / 60000,
        )
        await self.refresh(silent=True)
        return True


def build_catalog_cache(client: SupabaseClient | None = None) -> CatalogCache:
    """Wire a cache to on-disk storage and the Supabase machines table."""
    client = client or SupabaseClient()
    return CatalogCache(LocalStore(), client.fetch_machines)
