"""
Language-specific code generators.

This module contains generators for different programming languages.
"""

from .scala import ScalaGenerator, create_scala_generator

__all__ = ["ScalaGenerator", "create_scala_generator"]
