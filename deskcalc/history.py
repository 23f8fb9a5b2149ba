"""Calculation history for deskcalc.

Keeps the completed calculations of a session:
- Most recent first, capped (oldest entries are evicted)
- JSON serialization with ISO-8601 timestamps
- File-backed store for persistence between sessions
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from .collaborators import HistoryStore


logger = logging.getLogger(__name__)

MAX_HISTORY_ITEMS = 50
HISTORY_FILE_VERSION = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class HistoryEntry:
    """A single completed calculation."""

    expression: str
    result: float
    timestamp: datetime = field(default_factory=_utcnow)

    def __str__(self) -> str:
        return self.expression

    @property
    def left_side(self) -> str:
        """Expression without its "= result" part."""
        return self.expression.split(" = ")[0]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "expression": self.expression,
            "result": self.result,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        """Create from dictionary.

        Args:
            data: Dictionary representation.

        Returns:
            HistoryEntry instance.
        """
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            # fromisoformat only accepts a "Z" suffix from Python 3.11
            if timestamp.endswith("Z"):
                timestamp = timestamp[:-1] + "+00:00"
            timestamp = datetime.fromisoformat(timestamp)
        elif timestamp is None:
            timestamp = _utcnow()

        return cls(
            expression=data["expression"],
            result=float(data["result"]),
            timestamp=timestamp,
        )


class CalculationHistory:
    """Manages calculation history, most recent first."""

    def __init__(self, max_size: int = MAX_HISTORY_ITEMS):
        self._entries: List[HistoryEntry] = []
        self._max_size = max_size

    def add(self, expression: str, result: float) -> HistoryEntry:
        """Add a calculation to the front of the history."""
        entry = HistoryEntry(expression=expression, result=result)
        self._entries.insert(0, entry)

        # Evict the oldest past the cap
        del self._entries[self._max_size:]
        return entry

    def replace(self, entries: Iterable[HistoryEntry]) -> None:
        """Replace the whole history (e.g. after loading from a store)."""
        self._entries = list(entries)[: self._max_size]

    def clear(self) -> None:
        """Clear all history."""
        self._entries.clear()

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def recent(self, count: int = 10) -> List[HistoryEntry]:
        """Get the N most recent calculations."""
        return self._entries[:count]

    def search(self, term: str) -> List[HistoryEntry]:
        """Search history for expressions containing term."""
        return [e for e in self._entries if term in e.expression]

    def get_by_index(self, index: int) -> Optional[HistoryEntry]:
        """Get a specific calculation by index (0 is the most recent)."""
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def size(self) -> int:
        """Return current history size."""
        return len(self._entries)


class JsonHistoryStore(HistoryStore):
    """Stores history in a JSON file."""

    def __init__(self, history_file: str):
        """Initialize with the path of the history file.

        Args:
            history_file: JSON file to read and write; created on first save.
        """
        self.history_file = Path(history_file)

    def save(self, entries: List[HistoryEntry]) -> None:
        data = {
            "version": HISTORY_FILE_VERSION,
            "entries": [e.to_dict() for e in entries],
        }
        try:
            self.history_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.history_file, "w") as f:
                json.dump(data, f, indent=2)
        except (OSError, TypeError) as e:
            logger.warning("Could not save history to %s: %s", self.history_file, e)

    def load(self) -> List[HistoryEntry]:
        if not self.history_file.exists():
            return []

        try:
            with open(self.history_file) as f:
                data = json.load(f)
            return [HistoryEntry.from_dict(item) for item in data.get("entries", [])]
        except (json.JSONDecodeError, OSError, KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not load history from %s: %s", self.history_file, e)
            return []
