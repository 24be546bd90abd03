"""
Generator registry for the available target languages.

Maps language names and their aliases to generator classes and builds
configured generator instances on request.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from ..logging_config import get_logger
from .core.config import ConfigError, GeneratorConfig, get_config_manager, load_config
from .core.generator import CodeGenerator

logger = get_logger(__name__)

ConfigSource = Union[GeneratorConfig, Dict[str, Any], str, Path]


class RegistryError(Exception):
    """Unknown language, clashing alias, or a config the generator rejects."""

    pass


class GeneratorRegistry:
    """Registry of generator classes keyed by language name."""

    def __init__(self):
        self._generators: Dict[str, Type[CodeGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
    ):
        """
        Add ``generator_class`` under ``language`` and its aliases.

        Names are case-insensitive. Registering a language twice keeps the
        first class.

        Raises:
            RegistryError: If the class is not a generator or an alias clashes
        """
        if not issubclass(generator_class, CodeGenerator):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        key = language.lower()
        if key in self._generators:
            logger.debug("Generator for %s already registered", key)
            return

        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == key:
                continue
            if alias_key in self._generators:
                raise RegistryError(
                    f"Alias '{alias}' is already a language name"
                )
            if self._aliases.get(alias_key, key) != key:
                raise RegistryError(
                    f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                )

        self._generators[key] = generator_class
        for alias in aliases or []:
            if alias.lower() != key:
                self._aliases[alias.lower()] = key

    def resolve_language(self, language: str) -> str:
        """
        Resolve a language name or alias to its primary name.

        Raises:
            RegistryError: If no generator is registered under the name
        """
        key = language.lower()
        if key in self._generators:
            return key
        if key in self._aliases:
            return self._aliases[key]

        raise RegistryError(
            f"No generator registered for language: {language}. "
            f"Available: {', '.join(self.list_languages())}"
        )

    def create_generator(
        self, language: str, config: Optional[ConfigSource] = None
    ) -> CodeGenerator:
        """
        Create a generator instance for a language.

        Args:
            language: Language name or alias
            config: GeneratorConfig, override dict, or path to a JSON config file

        Returns:
            Configured generator instance

        Raises:
            RegistryError: If the language is unknown or the config is invalid
        """
        primary = self.resolve_language(language)
        generator_class = self._generators[primary]

        try:
            if isinstance(config, GeneratorConfig):
                final_config = config
            elif isinstance(config, (str, Path)):
                final_config = load_config(primary, config_file=config)
            elif isinstance(config, dict):
                final_config = load_config(primary, custom_config=config)
            elif config is None:
                final_config = load_config(primary)
            else:
                raise RegistryError(f"Invalid config type: {type(config)}")

            problems = get_config_manager().validate_config(final_config, primary)
            if problems:
                raise ConfigError("; ".join(problems))

            return generator_class(final_config)
        except (ConfigError, ValueError, TypeError) as e:
            raise RegistryError(f"Failed to create {primary} generator: {e}") from e

    def list_languages(self) -> List[str]:
        """Primary names, sorted."""
        return sorted(self._generators)

    def get_aliases_for_language(self, language: str) -> List[str]:
        key = language.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == key)

    def is_supported(self, language: str) -> bool:
        key = language.lower()
        return key in self._generators or key in self._aliases

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """
        Describe a registered language.

        Returns:
            Dict with name, class, file extension and aliases
        """
        primary = self.resolve_language(language)
        generator_class = self._generators[primary]
        generator = generator_class(load_config(primary))

        return {
            "name": generator.language_name,
            "class": generator_class.__name__,
            "file_extension": generator.file_extension,
            "aliases": self.get_aliases_for_language(primary),
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Return the process-wide registry, registering the built-in targets on first use."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _auto_register_generators(_global_registry)
    return _global_registry


def _auto_register_generators(registry: GeneratorRegistry):
    """Register the built-in generators with their aliases."""
    from .languages.scala import ScalaGenerator

    registry.register("scala", ScalaGenerator, aliases=["sc"])


def get_generator(language: str, config: Optional[ConfigSource] = None) -> CodeGenerator:
    """Build a configured generator for ``language`` from the process-wide registry."""
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    """Primary names of the registered target languages."""
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)
