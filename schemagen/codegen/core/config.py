"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_dir: Optional[str] = None
    package_name: Optional[str] = None  # Overrides the module namespace

    # Code style settings
    indent_size: int = 2
    use_tabs: bool = False
    line_ending: str = "\n"

    # Naming settings
    constant_case: str = "original"  # original, screaming_snake

    # Additional metadata
    add_comments: bool = True

    # Fail instead of falling back to a bare name for cross-module types
    # whose module declares no namespace
    strict_namespaces: bool = False

    # Language-specific settings
    language_config: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent_unit(self) -> str:
        """One level of indentation."""
        return "\t" if self.use_tabs else " " * self.indent_size


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["scala"] = {
            "indent_size": 2,
            "constant_case": "original",
            "add_comments": True,
            "language_config": {
                "thrift_imports": True,
                "temp_prefix": "tmp",
                "setter_style": "assign",
                "service_policy": "placeholder",
                "field_defaults": True,
                "namespace_key": "scala",
            },
        }

    def get_config(
        self,
        language: str = "scala",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        # Start with defaults
        base_config = json.loads(json.dumps(self._configs.get(language, {})))

        # Load from file if provided
        if config_file:
            self._merge(base_config, self._load_config_file(config_file))

        # Apply custom overrides
        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    def _merge(self, base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """Merge overrides into base; language_config is merged key by key."""
        for key, value in overrides.items():
            if key == "language_config" and isinstance(value, dict):
                base.setdefault("language_config", {}).update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        language_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                language_args[key] = value

        # Unknown keys are language-specific settings
        if language_args:
            existing = dict(config_args.get("language_config", {}))
            existing.update(language_args)
            config_args["language_config"] = existing

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> List[str]:
        """Get list of languages with default settings."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        if config.constant_case not in {"original", "screaming_snake"}:
            warnings.append(f"Invalid constant_case: {config.constant_case}")

        if config.indent_size < 1 and not config.use_tabs:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.line_ending not in {"\n", "\r\n"}:
            warnings.append(f"Invalid line_ending: {config.line_ending!r}")

        if config.package_name:
            for part in config.package_name.split("."):
                if not part.isidentifier():
                    warnings.append(f"Invalid package name: {config.package_name}")
                    break

        if language == "scala":
            options = config.language_config
            if options.get("setter_style", "assign") not in {"assign", "bean"}:
                warnings.append(f"Invalid setter_style: {options['setter_style']}")
            if options.get("service_policy", "placeholder") not in {
                "placeholder",
                "strict",
            }:
                warnings.append(f"Invalid service_policy: {options['service_policy']}")
            prefix = options.get("temp_prefix", "tmp")
            if not str(prefix).isidentifier():
                warnings.append(f"Invalid temp_prefix: {prefix}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "scala",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)

