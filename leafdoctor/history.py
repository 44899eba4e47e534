from collections import deque
from typing import Deque, List

from .models import ScanHistoryEntry


class ScanHistory:
    """In-memory scan ledger, most recent first. Append-only; lives as long as the process."""

    def __init__(self) -> None:
        self._entries: Deque[ScanHistoryEntry] = deque()

    def append(self, entry: ScanHistoryEntry) -> None:
        self._entries.appendleft(entry)

    def all(self) -> List[ScanHistoryEntry]:
        return list(self._entries)

    def get(self, entry_id: str) -> ScanHistoryEntry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise KeyError(entry_id)

    def __len__(self) -> int:
        return len(self._entries)
