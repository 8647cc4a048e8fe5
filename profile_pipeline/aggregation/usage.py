"""
Usage time series: rollups by calendar period and period filters.

Rollups return pandas DataFrames with one row per period between the first
and last period that has usage. Periods without usage are present with
zero counts so charts have a continuous axis.
"""

import logging
import re
from typing import Any, List, Optional

import pandas as pd

from ..schema import UsageRecord, USAGE_COUNTERS
from .frames import usage_to_frame

logger = logging.getLogger(__name__)

# Granularity -> pandas period frequency
GRANULARITIES = {
    "daily": "D",
    "weekly": "W-SUN",
    "monthly": "M",
    "quarterly": "Q",
    "yearly": "Y",
}

ROLLUP_COLUMNS = ["period"] + USAGE_COUNTERS + ["swipes_combined", "match_rate", "like_ratio"]

ROLLING_PERIODS = {
    "last-30-days": 30,
    "last-90-days": 90,
    "last-365-days": 365,
}

YEAR_PATTERN = re.compile(r"^(\d{4})$")
QUARTER_PATTERN = re.compile(r"^(\d{4})-Q([1-4])$")


def period_label(period: pd.Period, granularity: str) -> str:
    """
    Format a period for display.

    Examples: 2024-01-15, 2024-W03, 2024-01, 2024-Q1, 2024
    """
    if granularity == "daily":
        return period.strftime("%Y-%m-%d")
    if granularity == "weekly":
        year, week, _ = period.start_time.isocalendar()
        return f"{year}-W{week:02d}"
    if granularity == "monthly":
        return period.strftime("%Y-%m")
    if granularity == "quarterly":
        return f"{period.year}-Q{period.quarter}"
    return str(period.year)


def _ratio(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    return (numerator / denominator.where(denominator > 0)).fillna(0.0).astype(float)


def aggregate_usage(usage: List[UsageRecord], granularity: str = "monthly") -> pd.DataFrame:
    """
    Roll daily usage up to a calendar granularity.

    Args:
        usage: Daily usage records
        granularity: One of daily, weekly, monthly, quarterly, yearly

    Returns:
        DataFrame with columns ``ROLLUP_COLUMNS``, ascending by period

    Raises:
        ValueError: If the granularity is unknown
    """
    if granularity not in GRANULARITIES:
        raise ValueError(
            f"Unknown granularity '{granularity}'. Expected one of {list(GRANULARITIES)}"
        )

    frame = usage_to_frame(usage)
    if frame.empty:
        return pd.DataFrame(columns=ROLLUP_COLUMNS)

    freq = GRANULARITIES[granularity]
    periods = pd.to_datetime(frame["date"], format="%Y-%m-%d").dt.to_period(freq)
    totals = frame[USAGE_COUNTERS].groupby(periods).sum()
    full_range = pd.period_range(start=periods.min(), end=periods.max(), freq=freq)
    totals = totals.reindex(full_range, fill_value=0)

    totals["swipes_combined"] = totals["swipes_right"] + totals["swipes_left"]
    totals["match_rate"] = _ratio(totals["matches"], totals["swipes_right"])
    totals["like_ratio"] = _ratio(totals["swipes_right"], totals["swipes_combined"])
    totals.insert(0, "period", [period_label(p, granularity) for p in totals.index])

    return totals.reset_index(drop=True)[ROLLUP_COLUMNS]


def _as_day(value: Any) -> Optional[str]:
    if value is None:
        return None
    return pd.Timestamp(value).strftime("%Y-%m-%d")


def filter_usage_by_date_range(
    usage: List[UsageRecord],
    start: Any = None,
    end: Any = None
) -> List[UsageRecord]:
    """
    Keep records whose date lies in [start, end].

    Args:
        usage: Daily usage records
        start: First day to keep (date, datetime or string); None for no bound
        end: Last day to keep; None for no bound

    Returns:
        Filtered records, in input order
    """
    first = _as_day(start)
    last = _as_day(end)
    return [
        record for record in usage
        if (first is None or record.date >= first) and (last is None or record.date <= last)
    ]


def filter_usage_by_period(
    usage: List[UsageRecord],
    period: str,
    today: Any = None
) -> List[UsageRecord]:
    """
    Keep records that fall in a named period.

    Supported periods: ``all-time``, ``last-30-days``, ``last-90-days``,
    ``last-365-days``, a year (``2024``) or a quarter (``2024-Q1``).
    Unrecognized periods return the records unchanged.

    Args:
        usage: Daily usage records
        period: Period name
        today: Reference day for rolling periods (defaults to the current date)

    Returns:
        Filtered records, in input order
    """
    if period == "all-time":
        return list(usage)

    if period in ROLLING_PERIODS:
        reference = pd.Timestamp(today) if today is not None else pd.Timestamp.now()
        cutoff = reference.normalize() - pd.Timedelta(days=ROLLING_PERIODS[period])
        return filter_usage_by_date_range(usage, start=cutoff)

    year_match = YEAR_PATTERN.match(period)
    if year_match:
        return [record for record in usage if record.date[:4] == year_match.group(1)]

    quarter_match = QUARTER_PATTERN.match(period)
    if quarter_match:
        year, quarter = quarter_match.group(1), int(quarter_match.group(2))
        return [
            record for record in usage
            if record.date[:4] == year and (int(record.date[5:7]) - 1) // 3 + 1 == quarter
        ]

    logger.warning(f"Unrecognized usage period '{period}', returning all usage")
    return list(usage)
