"""Per-account mutexes for serializing read-validate-commit sequences"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class AccountLocks:
    """
    Hands out one lock per account number; different accounts never contend.

    Entries are reference counted and dropped once no thread holds or waits
    on them, so the registry only contains accounts with requests in flight.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, account_number: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(account_number)
            if entry is None:
                entry = _Entry()
                self._entries[account_number] = entry
            entry.holders += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._entries[account_number]
