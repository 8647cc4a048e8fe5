"""
Raw export loading.

Tinder delivers a single ``data.json``. Hinge delivers one file per
section (``user.json``, ``matches.json``, ``prompts.json``, ``media.json``)
that are assembled into one export before normalization. No mapping is
done here; that is handled by the normalization module.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from ..errors import UnrecognizedFormatError

logger = logging.getLogger(__name__)

HINGE_THREAD_KEYS = {"like", "match", "chats", "block", "we_met", "voice_notes"}


def load_raw_export(filepath: str) -> Any:
    """
    Load a JSON export file.

    Args:
        filepath: Path to the export file

    Returns:
        Parsed JSON value

    Raises:
        FileNotFoundError: If the file doesn't exist
        UnrecognizedFormatError: If the file is not valid JSON
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Export file not found: {filepath}")

    logger.info(f"Loading export from {path.name}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (ValueError, UnicodeDecodeError) as e:
        raise UnrecognizedFormatError(f"{path.name} is not valid JSON: {e}") from e


def load_consent_file(filepath: str) -> Dict[str, Any]:
    """
    Load consent flags from a YAML (or JSON) file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file does not hold a mapping of flags
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Consent file not found: {filepath}")

    with open(path, "r") as f:
        flags = yaml.safe_load(f) or {}

    if not isinstance(flags, dict):
        raise ValueError(f"Consent file must contain a mapping of flags: {filepath}")
    return flags


def classify_hinge_part(part: Any) -> str:
    """
    Identify which Hinge export file a parsed JSON value came from.

    Returns:
        "User", "Matches", "Prompts" or "Media"

    Raises:
        UnrecognizedFormatError: If the shape matches no Hinge file
    """
    if isinstance(part, dict):
        if {"profile", "account"} & set(part):
            return "User"
        raise UnrecognizedFormatError(f"Object with keys {sorted(part)[:10]} is not a Hinge file")

    if not isinstance(part, list):
        raise UnrecognizedFormatError(f"Unexpected Hinge file root: {type(part).__name__}")

    items = [item for item in part if isinstance(item, dict)]
    if not items:
        # An empty list carries no data; treat it as an empty conversation list
        return "Matches"
    first = items[0]
    if HINGE_THREAD_KEYS & set(first):
        return "Matches"
    # media entries also carry a "prompt" caption, so check for "url" first
    if "url" in first:
        return "Media"
    if "prompt" in first:
        return "Prompts"
    raise UnrecognizedFormatError(f"List of objects with keys {sorted(first)[:10]} is not a Hinge file")


def assemble_hinge_export(parts: Sequence[Any]) -> Dict[str, Any]:
    """
    Combine separate Hinge export files into one export.

    Args:
        parts: Parsed contents of the Hinge files, in any order

    Returns:
        Export with ``User``, ``Matches``, ``Prompts`` and ``Media`` sections

    Raises:
        UnrecognizedFormatError: If a part is not a Hinge file, a section
            appears twice, or the user file is missing
    """
    export: Dict[str, Any] = {}
    for part in parts:
        section = classify_hinge_part(part)
        if section in export:
            raise UnrecognizedFormatError(f"Hinge section {section} supplied twice")
        export[section] = part

    if "User" not in export:
        raise UnrecognizedFormatError("Hinge export is missing user.json")

    export.setdefault("Matches", [])
    export.setdefault("Prompts", [])
    export.setdefault("Media", [])
    logger.info(f"Assembled Hinge export from {len(parts)} files")
    return export


def load_export_files(filepaths: List[str]) -> Any:
    """
    Load an export from one file, or a Hinge export from several.

    Args:
        filepaths: One Tinder/Hinge export file, or the separate Hinge files

    Returns:
        Raw export ready for normalization
    """
    if not filepaths:
        raise ValueError("No export files given")

    parts = [load_raw_export(path) for path in filepaths]
    if len(parts) == 1:
        return parts[0]
    return assemble_hinge_export(parts)
