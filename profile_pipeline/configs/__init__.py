"""Configuration loading for the profile pipeline."""

from .loader import load_config, validate_config, get_config_value, PipelineConfig

__all__ = ["load_config", "validate_config", "get_config_value", "PipelineConfig"]
