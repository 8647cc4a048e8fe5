"""
Conversion between daily usage records and pandas DataFrames.
"""

import logging
from typing import Any, Dict, Iterable, List, Tuple

import pandas as pd

from ..schema import UsageRecord, USAGE_COUNTERS

logger = logging.getLogger(__name__)

USAGE_COLUMNS = ["date"] + USAGE_COUNTERS


def empty_usage_frame() -> pd.DataFrame:
    """Usage frame with the canonical columns and no rows."""
    frame = pd.DataFrame(columns=USAGE_COLUMNS)
    frame[USAGE_COUNTERS] = frame[USAGE_COUNTERS].astype("int64")
    return frame


def usage_to_frame(usage: Iterable[UsageRecord]) -> pd.DataFrame:
    """
    Convert usage records to a DataFrame with one row per record.

    Args:
        usage: Daily usage records

    Returns:
        DataFrame with columns ``USAGE_COLUMNS``
    """
    rows = [record.to_dict() for record in usage]
    if not rows:
        return empty_usage_frame()
    frame = pd.DataFrame(rows, columns=USAGE_COLUMNS)
    frame[USAGE_COUNTERS] = frame[USAGE_COUNTERS].fillna(0).astype("int64")
    return frame


def frame_to_usage(frame: pd.DataFrame) -> List[UsageRecord]:
    """Convert a usage DataFrame back into records, ascending by date."""
    if frame.empty:
        return []
    frame = frame.sort_values("date", kind="mergesort")
    return [
        UsageRecord(
            date=str(row["date"]),
            **{counter: int(row[counter]) for counter in USAGE_COUNTERS}
        )
        for row in frame.to_dict("records")
    ]


def _normalize_dates(frame: pd.DataFrame, raw_dates: pd.Series) -> pd.DataFrame:
    """Attach a YYYY-MM-DD ``date`` column, dropping rows with unreadable dates."""
    parsed = pd.to_datetime(raw_dates, errors="coerce", utc=True, format="mixed")
    invalid = parsed.isna().to_numpy()
    if invalid.any():
        logger.warning(f"Skipping {int(invalid.sum())} usage entries with unreadable dates")
    frame = frame.loc[~invalid].copy()
    frame["date"] = parsed[~invalid].dt.strftime("%Y-%m-%d").to_numpy()
    return frame


def _collapse_by_date(frame: pd.DataFrame) -> pd.DataFrame:
    """Sum counters per date; missing counters become zero."""
    frame = frame.reindex(columns=USAGE_COLUMNS)
    frame[USAGE_COUNTERS] = frame[USAGE_COUNTERS].fillna(0)
    frame = frame.groupby("date", as_index=False, sort=True)[USAGE_COUNTERS].sum()
    frame[USAGE_COUNTERS] = frame[USAGE_COUNTERS].astype("int64")
    return frame


def counter_maps_to_usage(counter_maps: Dict[str, Dict[str, Any]]) -> List[UsageRecord]:
    """
    Build usage records from per-counter ``{date: count}`` maps.

    The record dates are the union of keys across all maps. Non-numeric
    counts are treated as zero; keys that are not dates are skipped.

    Args:
        counter_maps: Counter name -> {raw date: count}

    Returns:
        Usage records ascending by date
    """
    columns = {
        counter: pd.to_numeric(pd.Series(values, dtype="object"), errors="coerce")
        for counter, values in counter_maps.items()
        if values
    }
    if not columns:
        return []

    frame = pd.DataFrame(columns)
    raw_dates = pd.Series(frame.index.astype(str), index=frame.index)
    frame = _normalize_dates(frame, raw_dates)
    return frame_to_usage(_collapse_by_date(frame))


def events_to_usage(events: List[Tuple[Any, str]]) -> List[UsageRecord]:
    """
    Build usage records by counting ``(timestamp, counter)`` events per day.

    Args:
        events: Event timestamps paired with the counter they increment

    Returns:
        Usage records ascending by date
    """
    if not events:
        return []

    frame = pd.DataFrame(events, columns=["timestamp", "counter"])
    frame = _normalize_dates(frame, frame["timestamp"].astype(str))
    if frame.empty:
        return []
    counts = frame.groupby(["date", "counter"]).size().unstack("counter", fill_value=0)
    counts = counts.reset_index()
    counts.columns.name = None
    return frame_to_usage(_collapse_by_date(counts))
