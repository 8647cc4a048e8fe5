"""Merging module: combines two exports of the same person."""

from .merger import merge, merge_profiles, merge_usage, merge_matches

__all__ = ["merge", "merge_profiles", "merge_usage", "merge_matches"]
