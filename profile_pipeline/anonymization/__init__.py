"""Stable anonymous identifier derivation."""

from .hashing import hash_identifier, derive_profile_id

__all__ = ["hash_identifier", "derive_profile_id"]
