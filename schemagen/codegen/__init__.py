"""
schemagen Code Generation Module

Generates target-language source files from schema modules.
"""

from typing import Any, Dict, List, Optional

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.errors import GeneratorError, SchemaConsistencyError, UnsupportedConstructError
from .core.generator import CodeGenerator, GenerationResult, OutputUnit, generate_code
from .core.schema import Module, convert_schema_document
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_supported_languages,
)


def generate_from_module(
    module: Module, language: str = "scala", config=None
) -> GenerationResult:
    """
    Generate code for an already converted schema module.

    Args:
        module: Schema module
        language: Target language name or alias
        config: GeneratorConfig, override dict or config file path

    Returns:
        GenerationResult with the generated units
    """
    generator = get_generator(language, config)
    return generate_code(generator, module)


def generate_from_document(
    document: Dict[str, Any],
    language: str = "scala",
    config=None,
    includes: Optional[List[Module]] = None,
) -> GenerationResult:
    """
    Generate code from a parsed schema document.

    Args:
        document: Schema document (see convert_schema_document)
        language: Target language name or alias
        config: GeneratorConfig, override dict or config file path
        includes: Modules the document references

    Returns:
        GenerationResult with the generated units
    """
    module = convert_schema_document(document, includes)
    return generate_from_module(module, language, config)


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "OutputUnit",
    "GeneratorError",
    "SchemaConsistencyError",
    "UnsupportedConstructError",
    "Module",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "generate_code",
    "generate_from_module",
    "generate_from_document",
    "get_generator",
    "get_language_info",
    "is_language_supported",
    "list_supported_languages",
]
