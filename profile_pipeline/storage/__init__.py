"""Storage module: profile persistence interface and reference stores."""

from .base import ProfileStore
from .stores import InMemoryProfileStore, JoblibProfileStore

__all__ = ["ProfileStore", "InMemoryProfileStore", "JoblibProfileStore"]
