import os
from typing import Any, Dict

import yaml


class ConfigLoader:
    def __init__(self, config_file="settings.yaml"):
        self.config_file = os.fspath(config_file)
        self.config = {}
        if os.path.exists(self.config_file):
            with open(self.config_file, "r", encoding="utf-8") as f:
                self.config = yaml.safe_load(f) or {}
        if not isinstance(self.config, dict):
            raise ValueError(f"{self.config_file}: top level must be a mapping")

    def get(self, *keys, default=None):
        """
        Fetch a nested configuration value.
        When part of the key path is missing:
          - raise KeyError if no default was supplied
          - return the default otherwise
        """
        ref = self.config
        for key in keys:
            if isinstance(ref, dict) and key in ref:
                ref = ref[key]
            else:
                if default is not None:
                    return default
                raise KeyError(f"Configuration key {' -> '.join(keys)} not found and no default provided.")
        return ref

    def section(self, name: str) -> Dict[str, Any]:
        """Return a copy of a top-level mapping; a missing or empty section is ``{}``."""
        value = self.config.get(name)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"{self.config_file}: section '{name}' must be a mapping")
        return dict(value)
