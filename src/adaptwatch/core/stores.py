"""
File-backed profile store used by the CLI.

The YAML file maps account ids to either a bare profile or a subscriber
record carrying the profile:

    alice@example.com:
      turnover: 400000
      ...
    bob@example.com:
      subscription_active: false
      profile:
        turnover: 250000
        ...

Inactive subscribers are skipped. Profiles are returned unvalidated; the
pipeline validates them before running.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from adaptwatch.core.config.loader import load_yaml_file
from adaptwatch.core.errors import ConfigError
from adaptwatch.core.logging import get_logger

logger = get_logger("stores")


class YamlProfileStore:
    """Reads contractor profiles from a YAML file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load_profiles(self) -> dict[str, Any]:
        """Load active profiles keyed by account id.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping
        """
        data = load_yaml_file(self.path)
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping of account ids in {self.path}", path=self.path)

        profiles: dict[str, Any] = {}
        for account_id, record in data.items():
            if isinstance(record, dict) and "profile" in record:
                if not record.get("subscription_active", True):
                    logger.debug("Skipping inactive subscriber %s", account_id)
                    continue
                profiles[str(account_id)] = record["profile"]
            else:
                profiles[str(account_id)] = record

        return profiles
