"""Session-scoped record of completed generation runs."""

from typing import Dict, Iterator, List, Optional, Tuple

from pantry_chef.models.models import HistoryEntry


class HistoryLedger:
    """Append-only list of HistoryEntry snapshots, newest first.

    Entries are frozen and never removed; the ledger grows for the lifetime
    of the process and is not persisted.
    """

    def __init__(self) -> None:
        self._entries: List[HistoryEntry] = []
        self._by_id: Dict[str, HistoryEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries())

    def append(self, entry: HistoryEntry) -> None:
        """Record entry as the most recent run.

        Raises:
            ValueError: If an entry with the same id was already recorded.
        """
        if entry.id in self._by_id:
            raise ValueError(f"History entry {entry.id} already recorded")
        self._entries.insert(0, entry)
        self._by_id[entry.id] = entry

    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        return self._by_id.get(entry_id)

    @property
    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None
