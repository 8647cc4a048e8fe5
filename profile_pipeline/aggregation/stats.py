"""
Profile-level statistics.

DerivedStats are always computed from the whole profile. Callers that
change a profile (consent filtering, merging) call ``attach_stats`` again
instead of adjusting the previous values.
"""

import dataclasses
import logging
from typing import List

from ..schema import DerivedStats, MatchRecord, NormalizedProfile, USAGE_COUNTERS
from .conversations import conversation_stats
from .frames import usage_to_frame

logger = logging.getLogger(__name__)


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return float(numerator) / float(denominator)


def count_matches(matches: List[MatchRecord]) -> int:
    """Distinct matches: distinct vendor ids plus every record without an id."""
    ids = {m.match_id for m in matches if m.match_id is not None}
    without_id = sum(1 for m in matches if m.match_id is None)
    return len(ids) + without_id


def aggregate(profile: NormalizedProfile) -> DerivedStats:
    """
    Compute DerivedStats for a profile.

    Args:
        profile: Normalized profile (``meta`` is ignored)

    Returns:
        DerivedStats
    """
    frame = usage_to_frame(profile.usage)
    totals = {counter: int(frame[counter].sum()) for counter in USAGE_COUNTERS}

    likes = totals["swipes_right"]
    passes = totals["swipes_left"]
    matches_total = count_matches(profile.matches)
    dates = sorted(frame["date"].unique())

    stats = DerivedStats(
        matches_total=matches_total,
        swipe_likes_total=likes,
        swipe_passes_total=passes,
        match_rate=safe_ratio(matches_total, likes),
        days_in_period=len(dates),
        app_opens_total=totals["app_opens"],
        super_likes_total=totals["super_likes"],
        messages_sent_total=totals["messages_sent"],
        messages_received_total=totals["messages_received"],
        like_ratio=safe_ratio(likes, likes + passes),
        first_day_on_app=str(dates[0]) if dates else None,
        last_day_on_app=str(dates[-1]) if dates else None,
        conversations=conversation_stats(profile.matches)
    )
    logger.debug(f"Aggregated {stats.days_in_period} usage days, {stats.matches_total} matches")
    return stats


def attach_stats(profile: NormalizedProfile) -> NormalizedProfile:
    """Return a copy of ``profile`` with freshly computed ``meta``."""
    return dataclasses.replace(profile, meta=aggregate(profile))
