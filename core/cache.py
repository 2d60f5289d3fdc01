# =============================================================================
# core/cache.py  —  Process-lifetime account cache
# =============================================================================
#
# Holds the most recently fetched account list.  Population rules:
#
#   - A read that finds the cache empty triggers exactly ONE upstream fetch
#     (ensure_loaded).
#   - A populated cache is never refreshed implicitly.  Only replace()
#     (called by refresh_accounts) swaps its contents.
#   - Records are never edited in place: the whole list is replaced.
#
# The slot is owned by one Dispatcher and guarded by a re-entrant lock, since
# FastMCP may run synchronous tools on worker threads.  The lock is held
# across the emptiness check and the loader call, so two concurrent first
# reads still cost a single fetch.
# =============================================================================

import threading
from typing import Callable, Iterable

from core.models import Account


class AccountCache:
    def __init__(self, accounts: Iterable[Account] = ()):
        self._accounts: list[Account] = list(accounts)
        self._lock = threading.RLock()

    def is_empty(self) -> bool:
        with self._lock:
            return not self._accounts

    def replace(self, accounts: Iterable[Account]) -> None:
        with self._lock:
            self._accounts = list(accounts)

    def read_all(self) -> list[Account]:
        """Snapshot of the cached accounts; may be stale."""
        with self._lock:
            return list(self._accounts)

    def ensure_loaded(self, loader: Callable[[], Iterable[Account]]) -> list[Account]:
        """Fill the cache via `loader` if it is empty, then return a snapshot."""
        with self._lock:
            if not self._accounts:
                self._accounts = list(loader())
            return list(self._accounts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
