# espresso_picker/models/cache_entry.py

"""Persisted catalog snapshot model."""

from dataclasses import dataclass
from typing import Any

from espresso_picker.models.machine import MachineRecord


@dataclass
class CacheEntry:
    """A complete, timestamped snapshot of the machine catalog.

    ``timestamp`` is milliseconds since the epoch, the unit the
    persisted ``{"data": [...], "timestamp": n}`` document uses.
    """

    data: list[MachineRecord]
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the persisted JSON document shape."""
        return {
            "data": [m.to_dict() for m in self.data],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CacheEntry":
        """Rebuild an entry from a decoded JSON document.

        Raises ``TypeError``/``ValueError``/``AttributeError`` when the
        document is not shaped like a snapshot.
        """
        rows = payload.get("data") or []
        if not isinstance(rows, list):
            raise TypeError("snapshot data is not a list")
        return cls(
            data=[MachineRecord.from_row(row) for row in rows],
            timestamp=int(payload.get("timestamp") or 0),
        )
