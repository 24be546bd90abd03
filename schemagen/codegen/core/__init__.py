"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .errors import GeneratorError, SchemaConsistencyError, UnsupportedConstructError
from .generator import CodeGenerator, GenerationResult, OutputUnit, generate_code
from .naming import NameSanitizer, NamingCase
from .schema import (
    Module,
    SchemaFormatError,
    convert_literal,
    convert_schema_document,
    true_type,
)
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "OutputUnit",
    "generate_code",
    # Errors
    "GeneratorError",
    "SchemaConsistencyError",
    "UnsupportedConstructError",
    # Schema tree
    "Module",
    "SchemaFormatError",
    "convert_schema_document",
    "convert_literal",
    "true_type",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
