"""
equimutant User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.equimutant/config.json (cross-project settings)
- Local: .equimutant/config.json (project-specific overrides)
- Environment: EQUIMUTANT_* variables (highest precedence)

Config structure:
{
  "mutation": {
    "default_random_count": 5,   // Nodes sampled by `random` when count <= 0
    "max_workers": 1,            // >1 runs (candidate, transform) attempts in a thread pool
    "mutant_extension": ".java"
  }
}
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from equimutant.exceptions import ConfigError
from equimutant.logging_config import logger
from equimutant.paths import get_paths


DEFAULT_CONFIG = {
    "mutation": {
        "default_random_count": 5,
        "max_workers": 1,
        "mutant_extension": ".java",
    }
}

# Environment variable -> (dotted key, converter)
ENV_OVERRIDES = {
    "EQUIMUTANT_DEFAULT_RANDOM_COUNT": ("mutation.default_random_count", int),
    "EQUIMUTANT_MAX_WORKERS": ("mutation.max_workers", int),
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.equimutant/config.json)
    3. Local config (.equimutant/config.json)
    4. Environment variables
    """

    def __init__(self, project_root: Optional[Path] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
            environ: Environment mapping (defaults to os.environ)
        """
        paths = get_paths(project_root)
        self.global_config_path = paths.global_config
        self.local_config_path = paths.local_config
        self._environ = os.environ if environ is None else environ

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        config = copy.deepcopy(DEFAULT_CONFIG)

        for path in (self.global_config_path, self.local_config_path):
            if not path.exists():
                continue
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    config = self._deep_merge(config, json.load(f))
                logger.debug(f"Loaded config from {path}")
            except Exception as e:
                logger.warning(f"Failed to load config {path}: {e}")

        for var, (key, convert) in ENV_OVERRIDES.items():
            raw = self._environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                self._set(config, key, convert(raw))
            except ValueError as e:
                raise ConfigError(f"Invalid value for {var}: {raw!r}") from e

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _set(config: Dict[str, Any], key: str, value: Any) -> None:
        keys = key.split(".")
        current = config
        for k in keys[:-1]:
            current = current.setdefault(k, {})
        current[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Examples:
            config.get("mutation.max_workers")  # 1
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def section(self, name: str) -> Dict[str, Any]:
        """Return a copy of one top-level section."""
        return dict(self._config.get(name, {}))
