"""
YAML configuration loading.

``configs/app.yaml`` is optional; without it every section takes its
defaults. String values may reference the environment as ``${VAR}`` or
``${VAR:-fallback}``, which lets a ``.env`` file point the client at a
different endpoint.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from adaptwatch.core.errors import ConfigError

from .models import AppConfig

DEFAULT_APP_CONFIG_PATH = Path("configs/app.yaml")

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<fallback>[^}]*))?\}")


def load_yaml_file(path: Path) -> Any:
    """Parse a YAML file; an empty file yields ``{}``.

    Raises:
        ConfigError: Missing, unreadable or malformed file
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}", path=path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}", path=path, details=str(e)) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}", path=path, details=str(e)) from e
    return {} if data is None else data


def expand_env_vars(data: Any) -> Any:
    """Substitute ``${VAR}`` references in every string of a parsed document."""
    if isinstance(data, str):
        return _ENV_REF.sub(
            lambda m: os.environ.get(m.group("name"), m.group("fallback") or ""), data
        )
    if isinstance(data, dict):
        return {key: expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    return data


def _read_mapping(path: Path, expand_env: bool = True) -> dict[str, Any]:
    data = load_yaml_file(path)
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}", path=path)
    return expand_env_vars(data) if expand_env else data


def load_app_config(path: Path | str | None = None, expand_env: bool = True) -> AppConfig:
    """Load ``AppConfig`` from YAML, or defaults when the file does not exist.

    Raises:
        ConfigError: Malformed YAML or values the schema rejects
    """
    path = DEFAULT_APP_CONFIG_PATH if path is None else Path(path)
    if not path.exists():
        return AppConfig()

    data = _read_mapping(path, expand_env)
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid app configuration in {path}", path=path, details=str(e)) from e


def validate_app_config_file(path: Path | str) -> list[str]:
    """Check a config file, returning one message per problem found."""
    path = Path(path)
    try:
        data = _read_mapping(path)
    except ConfigError as e:
        return [str(e)]

    try:
        AppConfig.model_validate(data)
    except ValidationError as e:
        return [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
    return []
