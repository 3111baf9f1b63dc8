"""Configuration loading and validation."""

from .models import (
    AppConfig,
    LoggingConfig,
    RelevanceConfig,
    ResultsConfig,
    ScoringConfig,
    SourceConfig,
)
from .loader import load_app_config, load_yaml_file, validate_app_config_file

__all__ = [
    # Config models
    "AppConfig",
    "LoggingConfig",
    "RelevanceConfig",
    "ResultsConfig",
    "ScoringConfig",
    "SourceConfig",
    # Loaders
    "load_app_config",
    "load_yaml_file",
    "validate_app_config_file",
]
