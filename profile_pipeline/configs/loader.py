"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all required fields are present.
"""

import logging
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from ..schema.consent import CONSENT_CATEGORIES, FLAG_ALIASES

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_GRANULARITIES = {"daily", "weekly", "monthly", "quarterly", "yearly"}
VALID_BACKENDS = {"memory", "joblib"}


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    required_sections = ["global", "consent", "aggregation", "storage"]
    for section in required_sections:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    log_level = get_config_value(config, "global.log_level")
    if log_level is not None and str(log_level).upper() not in VALID_LOG_LEVELS:
        issues.append(f"Unknown global.log_level: {log_level}")

    defaults = get_config_value(config, "consent.defaults", {})
    if not isinstance(defaults, dict):
        issues.append("consent.defaults must be a mapping of flag -> bool")
    else:
        for flag, value in defaults.items():
            if flag not in FLAG_ALIASES:
                issues.append(f"Unknown consent flag in consent.defaults: {flag}")
            elif not isinstance(value, bool):
                issues.append(f"consent.defaults.{flag} must be true or false, got {value!r}")

    granularity = get_config_value(config, "aggregation.default_granularity")
    if granularity is not None and granularity not in VALID_GRANULARITIES:
        issues.append(f"Unknown aggregation.default_granularity: {granularity}")

    if "storage" in config:
        backend = get_config_value(config, "storage.backend", "memory")
        if backend not in VALID_BACKENDS:
            issues.append(f"Unknown storage.backend: {backend}")
        elif backend == "joblib" and not get_config_value(config, "storage.path"):
            issues.append("Missing storage.path (required for the joblib backend)")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "storage.backend")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


@dataclass
class PipelineConfig:
    """
    Runtime settings for the upload pipeline.

    Attributes:
        log_level: Root logging level
        consent_defaults: Value of each consent category when the upload
            does not declare it
        default_granularity: Granularity for usage rollups
        storage_backend: "memory" or "joblib"
        storage_path: Directory for the joblib backend
    """
    log_level: str = "INFO"
    consent_defaults: Dict[str, bool] = field(
        default_factory=lambda: {category: True for category in CONSENT_CATEGORIES}
    )
    default_granularity: str = "monthly"
    storage_backend: str = "memory"
    storage_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PipelineConfig":
        """
        Create from main config dictionary.

        Consent defaults may use any accepted flag spelling; they are
        stored under their category names.

        Args:
            config: Main config dictionary

        Returns:
            PipelineConfig instance
        """
        consent_defaults = {category: True for category in CONSENT_CATEGORIES}
        for flag, value in (get_config_value(config, "consent.defaults") or {}).items():
            category = FLAG_ALIASES.get(flag)
            if category is not None:
                consent_defaults[category] = bool(value)

        return cls(
            log_level=str(get_config_value(config, "global.log_level", "INFO")),
            consent_defaults=consent_defaults,
            default_granularity=get_config_value(config, "aggregation.default_granularity", "monthly"),
            storage_backend=get_config_value(config, "storage.backend", "memory"),
            storage_path=get_config_value(config, "storage.path")
        )
