from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..core.errors import LockTimeoutError
from ..models import Account


@dataclass
class _LockEntry:
    lock: threading.RLock = field(default_factory=threading.RLock)
    # holders plus waiters; the entry is dropped once this returns to zero
    users: int = 0


class AccountStore:
    """Thread-safe in-memory mapping of account id to the current Account value.

    Single-key reads and writes are safe on their own. Callers that need a
    read-check-write to be atomic hold :meth:`locked` for every id involved;
    the per-id locks are reentrant, so ``put``/``remove`` may be called while
    holding them. A per-id lock only exists while some caller holds or waits
    for it.
    """

    def __init__(
        self,
        id_prefix: str = "ACC",
        id_width: int = 3,
        lock_timeout: Optional[float] = None,
    ) -> None:
        self.id_prefix = id_prefix
        self.id_width = id_width
        self.lock_timeout = lock_timeout
        self._accounts: Dict[str, Account] = {}
        self._account_locks: Dict[str, _LockEntry] = {}
        self._lock = threading.RLock()
        self._sequence = 0

    # Locking ------------------------------------------------------------
    def _checkout_lock(self, account_id: str) -> threading.RLock:
        with self._lock:
            entry = self._account_locks.get(account_id)
            if entry is None:
                entry = _LockEntry()
                self._account_locks[account_id] = entry
            entry.users += 1
            return entry.lock

    def _return_lock(self, account_id: str) -> None:
        with self._lock:
            entry = self._account_locks[account_id]
            entry.users -= 1
            if entry.users == 0:
                del self._account_locks[account_id]

    def _acquire(self, account_id: str, lock: threading.RLock) -> None:
        timeout = -1 if self.lock_timeout is None else self.lock_timeout
        if not lock.acquire(timeout=timeout):
            raise LockTimeoutError(account_id, self.lock_timeout)

    @contextmanager
    def locked(self, *account_ids: str) -> Iterator[None]:
        """Hold the locks of all given ids, always acquired in sorted id order."""
        checked_out: List[str] = []
        held: List[threading.RLock] = []
        try:
            for account_id in sorted(set(account_ids)):
                lock = self._checkout_lock(account_id)
                checked_out.append(account_id)
                self._acquire(account_id, lock)
                held.append(lock)
            yield
        finally:
            for lock in reversed(held):
                lock.release()
            for account_id in checked_out:
                self._return_lock(account_id)

    # Account operations -------------------------------------------------
    def get(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    def put(self, account: Account) -> Account:
        with self.locked(account.id):
            with self._lock:
                self._accounts[account.id] = account
        return account

    def put_all(self, *accounts: Account) -> None:
        """Store several accounts so that readers see all of them or none."""
        with self.locked(*(account.id for account in accounts)):
            with self._lock:
                for account in accounts:
                    self._accounts[account.id] = account

    def remove(self, account_id: str) -> None:
        with self.locked(account_id):
            with self._lock:
                self._accounts.pop(account_id, None)

    def list(self) -> Dict[str, Account]:
        with self._lock:
            return dict(self._accounts)

    def count(self) -> int:
        return len(self._accounts)

    def is_empty(self) -> bool:
        return not self._accounts

    def contains(self, account_id: str) -> bool:
        return account_id in self._accounts

    def clear(self) -> None:
        # Waits for in-flight operations on existing accounts before emptying.
        with self.locked(*self.list()):
            with self._lock:
                self._accounts.clear()

    # Identifiers --------------------------------------------------------
    def next_id(self) -> str:
        # Independent of the current size so ids are never reissued after a delete.
        with self._lock:
            self._sequence += 1
            return f"{self.id_prefix}{self._sequence:0{self.id_width}d}"
