"""
Scala code generator module.

Generates Scala enumerations, case classes, a constants object and service
placeholders from a schema module.
"""

from .config import ScalaConfig
from .constants import RenderedValue, ScalaConstantRenderer, escape_string
from .generator import ScalaGenerator, create_scala_generator
from .naming import create_scala_sanitizer
from .types import ScalaTypeMapper

__all__ = [
    "ScalaGenerator",
    "ScalaConfig",
    "ScalaTypeMapper",
    "ScalaConstantRenderer",
    "RenderedValue",
    "escape_string",
    "create_scala_sanitizer",
    "create_scala_generator",
]
