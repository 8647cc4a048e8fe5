"""Normalization module: vendor exports to NormalizedProfile."""

from .normalizer import normalize, detect_platform, unwrap_export
from .tinder import normalize_tinder
from .hinge import normalize_hinge
from .ordering import collapse_matches, merge_match, sort_matches, sort_messages

__all__ = [
    "normalize",
    "detect_platform",
    "unwrap_export",
    "normalize_tinder",
    "normalize_hinge",
    "collapse_matches",
    "merge_match",
    "sort_matches",
    "sort_messages"
]
