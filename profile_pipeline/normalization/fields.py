"""
Defensive field readers for vendor JSON.

Vendor exports omit and reshape fields between app versions, so every
reader here returns an explicit unknown sentinel instead of raising when a
value is absent or unusable. The only readers that raise are the
``require_*`` helpers, used for structural elements the statistics
depend on.
"""

import html
import json
import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from ..errors import MalformedFieldError
from ..schema import Gender

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
DATE_FORMAT = "%Y-%m-%d"

TINDER_GENDERS = {
    "M": Gender.MALE,
    "F": Gender.FEMALE,
    "Other": Gender.OTHER,
    "More": Gender.MORE,
    "Unknown": Gender.UNKNOWN,
}

HINGE_GENDERS = {
    "Man": Gender.MALE,
    "Men": Gender.MALE,
    "Woman": Gender.FEMALE,
    "Women": Gender.FEMALE,
    "Nonbinary": Gender.OTHER,
    "Non-binary": Gender.OTHER,
}


def map_tinder_gender(value: Any) -> Gender:
    """Map a Tinder gender string to Gender; anything unrecognized is UNKNOWN."""
    if not isinstance(value, str):
        return Gender.UNKNOWN
    return TINDER_GENDERS.get(value.strip(), Gender.UNKNOWN)


def map_hinge_gender(value: Any) -> Gender:
    """Map a Hinge gender string to Gender; anything unrecognized is UNKNOWN."""
    if not isinstance(value, str):
        return Gender.UNKNOWN
    return HINGE_GENDERS.get(value.strip(), Gender.UNKNOWN)


def _to_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """Parse a vendor date/time value into a UTC Timestamp, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        ts = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts


def parse_timestamp(value: Any) -> Optional[str]:
    """
    Parse a vendor timestamp into ISO-8601 UTC (second precision).

    Handles ISO strings as well as Tinder's RFC-2822 style
    ("Tue, 30 Nov 2021 05:08:21 GMT").

    Args:
        value: Raw timestamp

    Returns:
        "YYYY-MM-DDTHH:MM:SSZ" or None if the value is unusable
    """
    ts = _to_timestamp(value)
    return ts.strftime(TIMESTAMP_FORMAT) if ts is not None else None


def parse_date(value: Any) -> Optional[str]:
    """Parse a vendor date or timestamp into "YYYY-MM-DD", or None."""
    ts = _to_timestamp(value)
    return ts.strftime(DATE_FORMAT) if ts is not None else None


def age_on(birth_date: str, day: str) -> Optional[int]:
    """
    Full years between two YYYY-MM-DD dates.

    Returns None when either date is missing or the result is negative.
    """
    birth = _to_timestamp(birth_date)
    ref = _to_timestamp(day)
    if birth is None or ref is None:
        return None
    years = ref.year - birth.year - ((ref.month, ref.day) < (birth.month, birth.day))
    return years if years >= 0 else None


def to_optional_int(value: Any) -> Optional[int]:
    """Convert to int, or None if the value is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_optional_text(value: Any, decode_entities: bool = False) -> Optional[str]:
    """Return a stripped non-empty string, or None."""
    if not isinstance(value, str):
        return None
    text = html.unescape(value) if decode_entities else value
    text = text.strip()
    return text or None


def parse_json_array(value: Any) -> List[str]:
    """
    Decode a JSON-encoded string array.

    Hinge exports store lists as strings: "[\\"Acme\\",\\"Globex\\"]".
    Real lists are accepted as-is. Anything else yields [].
    """
    if isinstance(value, list):
        return [str(v) for v in value if v not in (None, "")]
    if not isinstance(value, str) or not value.strip():
        return []
    try:
        parsed = json.loads(value)
    except ValueError:
        return []
    if not isinstance(parsed, list):
        return []
    return [str(v) for v in parsed if v not in (None, "")]


def get_mapping(container: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Return container[key] if it is a dict, else {}."""
    value = container.get(key)
    return value if isinstance(value, dict) else {}


def require_list(container: Dict[str, Any], key: str, path: str) -> List[Any]:
    """
    Return container[key] as a list; absence yields [].

    Raises:
        MalformedFieldError: If present but not a list
    """
    value = container.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedFieldError(path, f"expected a list, got {type(value).__name__}")
    return value


def optional_list(container: Dict[str, Any], key: str, path: str) -> List[Any]:
    """Return container[key] as a list; a mis-shaped value is logged and yields []."""
    value = container.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"Ignoring {path}: expected a list, got {type(value).__name__}")
        return []
    return value
