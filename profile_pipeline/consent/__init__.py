"""Consent module: removes data the user declined to share."""

from .filter import apply_consent

__all__ = ["apply_consent"]
