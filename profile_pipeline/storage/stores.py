"""
Reference ProfileStore implementations.

- InMemoryProfileStore: process-local dictionary, for tests and the CLI
- JoblibProfileStore: one ``<profile_id>.joblib`` file per profile
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import joblib

from ..schema import NormalizedProfile
from .base import ProfileStore

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class InMemoryProfileStore(ProfileStore):
    """
    Profiles kept in memory as dictionaries.

    Profiles are copied on the way in and out, so callers never share
    state with the store.
    """

    def __init__(self):
        super().__init__()
        self._profiles: Dict[str, Dict[str, Any]] = {}

    def load_profile(self, profile_id: str) -> Optional[NormalizedProfile]:
        data = self._profiles.get(profile_id)
        return NormalizedProfile.from_dict(data) if data is not None else None

    def save_profile(self, profile: NormalizedProfile) -> None:
        self._profiles[profile.profile_id] = profile.to_dict()

    def delete_profile(self, profile_id: str) -> None:
        self._profiles.pop(profile_id, None)

    def profile_ids(self) -> List[str]:
        return sorted(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)


class JoblibProfileStore(ProfileStore):
    """
    Profiles persisted with joblib, one compressed file per profile.

    Args:
        directory: Directory holding the profile files (created if missing)
    """

    def __init__(self, directory: str):
        super().__init__()
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, profile_id: str) -> Path:
        if not _SAFE_ID.match(profile_id or ""):
            raise ValueError(f"Invalid profile id: {profile_id!r}")
        return self.directory / f"{profile_id}.joblib"

    def load_profile(self, profile_id: str) -> Optional[NormalizedProfile]:
        path = self._path(profile_id)
        if not path.exists():
            return None

        state = joblib.load(path)
        version = state.get("format_version")
        if version != STORE_FORMAT_VERSION:
            raise ValueError(f"Unsupported profile file version {version} in {path.name}")
        logger.debug(f"Loaded profile from {path.name}")
        return NormalizedProfile.from_dict(state["profile"])

    def save_profile(self, profile: NormalizedProfile) -> None:
        path = self._path(profile.profile_id)
        state = {
            "format_version": STORE_FORMAT_VERSION,
            "profile": profile.to_dict()
        }
        tmp_path = path.with_suffix(".joblib.tmp")
        joblib.dump(state, tmp_path, compress=3)
        tmp_path.replace(path)
        logger.info(f"Saved profile to {path}")

    def delete_profile(self, profile_id: str) -> None:
        path = self._path(profile_id)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted {path.name}")

    def profile_ids(self) -> List[str]:
        return sorted(p.name[:-len(".joblib")] for p in self.directory.glob("*.joblib"))
