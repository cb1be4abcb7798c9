"""
Config system - layered typed configuration for the composition engine.

Merge precedence (later overrides earlier):
config files (JSON/YAML) < .env file < environment variables < overrides
"""

from typing import Any, Dict, Optional, get_type_hints
from dataclasses import dataclass, fields, asdict, MISSING
from pathlib import Path
import logging
import os
import json

from dotenv import dotenv_values

from .faults import ConfigError

logger = logging.getLogger("lineage.config")

DEFAULT_ENV_PREFIX = "LINEAGE_"


@dataclass(frozen=True)
class LineageConfig:
    """
    Factory configuration.

    Attributes:
        enforce_interfaces: Run the ``implements`` hook
        enforce_contracts: Run the ``contract`` hook
        apply_mixins: Run the ``mixins`` hook
        max_chain_depth: Deepest delegation chain the resolver accepts
        log_level: Level applied to the ``lineage`` logger by ``configure_logging``
    """
    enforce_interfaces: bool = True
    enforce_contracts: bool = True
    apply_mixins: bool = True
    max_chain_depth: int = 128
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.
    """

    def __init__(self, env_prefix: str = DEFAULT_ENV_PREFIX):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}
        # Keys set by files or overrides; unknown ones are errors
        self._strict_keys: set = set()

    @classmethod
    def load(
        cls,
        paths: Optional[list] = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources with proper merge strategy.

        Merge order (later overrides earlier):
        1. Config files (JSON or YAML, glob patterns supported)
        2. .env file (only keys carrying the prefix)
        3. Environment variables (LINEAGE_* prefix)
        4. Manual overrides

        Args:
            paths: List of config file paths
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or ():
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._strict_keys.update(overrides)
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        from glob import glob

        matched = sorted(glob(pattern)) or ([pattern] if Path(pattern).exists() else [])
        for path_str in matched:
            path = Path(path_str)
            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)
            else:
                logger.warning(f"Ignoring config file with unknown suffix: {path}")

    def _load_json_file(self, path: Path):
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
            self._merge_section(data, path)

    def _load_yaml_file(self, path: Path):
        """Load config from YAML file."""
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._merge_section(data, path)

    def _merge_section(self, data: Any, path: Path):
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        # Files may nest settings under a top-level "lineage" key
        section = data.get("lineage", data)
        if not isinstance(section, dict):
            raise ConfigError(f"'lineage' section of {path} must be a mapping")
        self._strict_keys.update(section)
        self._merge_dict(self.config_data, section)

    def _load_env_file(self, path: str):
        """Load config from .env file."""
        env_path = Path(path)
        if not env_path.exists():
            return

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_key(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_key(key, value)

    def _set_key(self, key: str, value: str):
        """Convert LINEAGE_MAX_CHAIN_DEPTH to max_chain_depth."""
        key = key[len(self.env_prefix):].lower()
        self.config_data[key] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        # Boolean
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        # Number
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # JSON
        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config_data.get(key, default)

    def to_config(self) -> LineageConfig:
        """
        Validate merged data into a :class:`LineageConfig`.

        Raises:
            ConfigError: unknown keys from files or overrides, or values
                of the wrong type. Unknown keys from the environment or a
                .env file are logged and ignored.
        """
        known = {f.name for f in fields(LineageConfig)}
        unknown = set(self.config_data) - known
        strict = sorted(unknown & self._strict_keys)
        if strict:
            raise ConfigError(f"Unknown config keys: {', '.join(strict)}")
        for key in sorted(unknown - self._strict_keys):
            logger.warning(f"Ignoring unknown setting '{self.env_prefix}{key.upper()}' from the environment")

        hints = get_type_hints(LineageConfig)
        kwargs = {}
        for field_info in fields(LineageConfig):
            name = field_info.name
            if name in self.config_data:
                value = self.config_data[name]
                if not self._check_type(value, hints[name]):
                    raise ConfigError(
                        f"Config field '{name}' expected {hints[name].__name__}, "
                        f"got {type(value).__name__}"
                    )
                kwargs[name] = value
            elif field_info.default is not MISSING:
                kwargs[name] = field_info.default

        config = LineageConfig(**kwargs)
        if config.max_chain_depth < 1:
            raise ConfigError("Config field 'max_chain_depth' must be at least 1")
        if logging.getLevelName(config.log_level.upper()) == f"Level {config.log_level.upper()}":
            raise ConfigError(f"Unknown log level '{config.log_level}'")
        return config

    def _check_type(self, value: Any, expected_type: type) -> bool:
        """Basic type checking (bool is not accepted where int is expected)."""
        if expected_type is int and isinstance(value, bool):
            return False
        return isinstance(value, expected_type)

    def to_dict(self) -> dict:
        """Export all config as dictionary."""
        return self.config_data.copy()


def load_config(**kwargs: Any) -> LineageConfig:
    """Shortcut for ``ConfigLoader.load(**kwargs).to_config()``."""
    return ConfigLoader.load(**kwargs).to_config()


def configure_logging(config: LineageConfig) -> None:
    """Apply ``config.log_level`` to the ``lineage`` logger hierarchy."""
    logging.getLogger("lineage").setLevel(config.log_level.upper())
