"""
Vendor detection and dispatch.

Exports reach the pipeline either as the vendor's own JSON or wrapped by
the upload handler as ``{"tinderId": ..., "anonymizedTinderJson": {...}}``
(or the Hinge equivalent). Both forms are accepted.
"""

import logging
from typing import Any, Dict

from ..errors import UnrecognizedFormatError
from ..schema import NormalizedProfile, Platform
from .hinge import normalize_hinge
from .tinder import normalize_tinder

logger = logging.getLogger(__name__)

UPLOAD_WRAPPERS = {
    "anonymizedTinderJson": Platform.TINDER,
    "anonymizedHingeJson": Platform.HINGE,
}

NORMALIZERS = {
    Platform.TINDER: normalize_tinder,
    Platform.HINGE: normalize_hinge,
}


def unwrap_export(raw: Any) -> Any:
    """Strip the upload handler's wrapper, if present."""
    if isinstance(raw, dict):
        for key in UPLOAD_WRAPPERS:
            if key in raw:
                return raw[key]
    return raw


def detect_platform(raw: Any) -> Platform:
    """
    Identify the vendor from the export's top-level keys.

    Args:
        raw: Export (wrapped or unwrapped)

    Returns:
        Platform

    Raises:
        UnrecognizedFormatError: If the export matches no known vendor
    """
    export = unwrap_export(raw)
    if not isinstance(export, dict):
        raise UnrecognizedFormatError(f"Export root is a {type(export).__name__}, not an object")
    if "Usage" in export:
        return Platform.TINDER
    if "Matches" in export or "Prompts" in export:
        return Platform.HINGE
    raise UnrecognizedFormatError(f"No known vendor sections among keys {sorted(map(str, export))[:10]}")


def normalize(raw: Any) -> NormalizedProfile:
    """
    Convert a raw vendor export into a NormalizedProfile.

    The result has no ``meta``; statistics are attached by the aggregator.

    Args:
        raw: Vendor export, optionally wrapped by the upload handler

    Returns:
        NormalizedProfile

    Raises:
        UnrecognizedFormatError: If the vendor cannot be detected
        MalformedFieldError: If a structural field is mis-shaped
    """
    platform = detect_platform(raw)
    logger.info(f"Detected {platform.value} export")
    return NORMALIZERS[platform](unwrap_export(raw))
