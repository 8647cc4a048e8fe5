"""Aggregation module: derived statistics and usage rollups."""

from .stats import aggregate, attach_stats, count_matches, safe_ratio
from .conversations import conversation_stats
from .usage import (
    aggregate_usage,
    filter_usage_by_date_range,
    filter_usage_by_period,
    GRANULARITIES
)
from .frames import usage_to_frame, frame_to_usage

__all__ = [
    "aggregate",
    "attach_stats",
    "count_matches",
    "safe_ratio",
    "conversation_stats",
    "aggregate_usage",
    "filter_usage_by_date_range",
    "filter_usage_by_period",
    "GRANULARITIES",
    "usage_to_frame",
    "frame_to_usage"
]
