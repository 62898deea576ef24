"""
Configuration loading for libsql-shell.

The YAML file may name the database, output options (`file`,
`without_header`) and logging options (`level`, `file`). Command line
arguments take precedence.
"""

import os
import re
from typing import Any, Optional

import yaml


class ConfigLoader:
    """Shell settings read from an optional YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config = self._load_config() if config_path else {}

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        return self._resolve_env_vars(config or {})

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Replace ``${VAR}`` references with environment values, unset ones with ''."""
        if isinstance(obj, str):
            return self.ENV_VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), ''), obj)
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_database(self) -> Optional[str]:
        """Get the database path."""
        return self.config.get('database')

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output', {})

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {})
