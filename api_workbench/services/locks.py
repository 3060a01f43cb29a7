"""
Per-location mutual exclusion for save and load.

Two overlapping saves of the same location could interleave upserts and
prunes; every store call therefore holds the lock of its canonical path for
the whole operation. Locks are not re-entrant: a thread that asks for a
location it already holds gets ``LockReentryError`` instead of a deadlock.
There is no timeout.
"""

import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from ..exceptions import LockReentryError

PathLike = Union[str, os.PathLike]


def canonical_path(location: PathLike) -> str:
    """Absolute, symlink-resolved, case-normalized form of ``location``."""
    return os.path.normcase(os.path.realpath(os.fspath(location)))


class LocationLocks:
    """
    A registry of one lock per canonical location.

    An entry lives only while some thread holds or waits for it, so the
    registry does not grow with every location ever touched.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}
        self._owners: dict[str, int] = {}

    def active_count(self) -> int:
        """Number of locations currently held or waited on."""
        with self._guard:
            return len(self._locks)

    def is_held(self, location: PathLike) -> bool:
        key = canonical_path(location)
        with self._guard:
            return key in self._owners

    @contextmanager
    def hold(self, location: PathLike) -> Iterator[Path]:
        """Hold the lock for ``location`` for the duration of the block."""
        key = canonical_path(location)
        me = threading.get_ident()
        with self._guard:
            if self._owners.get(key) == me:
                raise LockReentryError(location)
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._users[key] = self._users.get(key, 0) + 1
        with lock:
            with self._guard:
                self._owners[key] = me
            try:
                yield Path(location)
            finally:
                with self._guard:
                    self._owners.pop(key, None)
                    self._users[key] -= 1
                    if not self._users[key]:
                        del self._users[key]
                        del self._locks[key]


# Shared by every store instance in the process
LOCATION_LOCKS = LocationLocks()
