"""Schema-driven source generator for Scala."""

__version__ = "0.1.0"
