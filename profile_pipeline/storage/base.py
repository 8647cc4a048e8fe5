"""
Storage interface for normalized profiles.

The pipeline itself is stateless; persistence is delegated to a
ProfileStore. Read-modify-write sequences on one profile (an upload that
merges into a stored profile) must hold ``lock_for(profile_id)``.
"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from ..schema import NormalizedProfile


class ProfileStore(ABC):
    """Abstract profile storage with per-profile locking."""

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def load_profile(self, profile_id: str) -> Optional[NormalizedProfile]:
        """Return the stored profile, or None if there is none."""

    @abstractmethod
    def save_profile(self, profile: NormalizedProfile) -> None:
        """Insert or replace the profile stored under ``profile.profile_id``."""

    @abstractmethod
    def delete_profile(self, profile_id: str) -> None:
        """Remove a stored profile. Deleting a missing profile is a no-op."""

    @contextmanager
    def lock_for(self, profile_id: str) -> Iterator[None]:
        """
        Hold the lock for one profile id.

        Locks are per store instance and per process.
        """
        with self._locks_guard:
            lock = self._locks.setdefault(profile_id, threading.Lock())
        with lock:
            yield
