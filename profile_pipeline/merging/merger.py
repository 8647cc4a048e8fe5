"""
Merging two exports of the same person.

A newer export usually overlaps the older one: Tinder exports cover the
whole account history, but users delete and recreate accounts, and Hinge
exports only cover the current account. Merging keeps the union of the
history and the newest current-state fields.
"""

import copy
import dataclasses
import logging
from typing import List

import pandas as pd

from ..aggregation import attach_stats
from ..aggregation.frames import frame_to_usage, usage_to_frame
from ..errors import PlatformMismatchError
from ..normalization.ordering import collapse_matches
from ..schema import MatchRecord, NormalizedProfile, UsageRecord

logger = logging.getLogger(__name__)


def merge_usage(old: List[UsageRecord], new: List[UsageRecord]) -> List[UsageRecord]:
    """Union of daily records by date; ``new`` wins on dates present in both."""
    frames = [frame for frame in (usage_to_frame(old), usage_to_frame(new)) if not frame.empty]
    if not frames:
        return []
    combined = pd.concat(frames, ignore_index=True)
    combined = combined.drop_duplicates(subset="date", keep="last")
    return frame_to_usage(combined)


def merge_matches(old: List[MatchRecord], new: List[MatchRecord]) -> List[MatchRecord]:
    """
    Concatenate match records, old first, collapsing records that share a
    vendor match id. Records without an id are kept as they are. Order
    indices are reassigned from 0.
    """
    combined = old + new
    merged = collapse_matches(combined)
    collapsed = len(combined) - len(merged)

    if collapsed:
        logger.info(f"Collapsed {collapsed} match records present in both exports")
    return [dataclasses.replace(match, order=i) for i, match in enumerate(merged)]


def merge_profiles(old: NormalizedProfile, new: NormalizedProfile) -> NormalizedProfile:
    """
    Merge an older and a newer profile of the same person.

    The caller asserts that both profiles belong to the same person; this
    is not verified.

    Args:
        old: Previously stored profile
        new: Profile from the latest export

    Returns:
        New merged profile with ``meta`` recomputed. Inputs are not modified
        and share no records with the result.

    Raises:
        PlatformMismatchError: If the profiles come from different platforms
    """
    if old.platform != new.platform:
        raise PlatformMismatchError(
            f"Cannot merge a {old.platform.value} profile with a {new.platform.value} profile"
        )
    old, new = copy.deepcopy(old), copy.deepcopy(new)

    merged = NormalizedProfile(
        profile_id=new.profile_id,
        platform=new.platform,
        identity=new.identity,
        usage=merge_usage(old.usage, new.usage),
        matches=merge_matches(old.matches, new.matches),
        media=new.media,
        prompts=new.prompts
    )
    logger.info(
        f"Merged profiles: {len(old.usage)} + {len(new.usage)} usage days -> {len(merged.usage)}, "
        f"{len(old.matches)} + {len(new.matches)} matches -> {len(merged.matches)}"
    )
    return attach_stats(merged)


merge = merge_profiles
