"""Data loading module for Tinder and Hinge export files."""

from .loaders import (
    load_raw_export,
    load_export_files,
    load_consent_file,
    assemble_hinge_export
)

__all__ = [
    "load_raw_export",
    "load_export_files",
    "load_consent_file",
    "assemble_hinge_export"
]
