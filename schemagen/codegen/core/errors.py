"""
Exception hierarchy for the emission engine.

Schema consistency failures abort a whole generation run; unsupported
constructs only abort the declaration they were found in.
"""


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class SchemaConsistencyError(GeneratorError):
    """Raised when the schema tree violates the validator's guarantees."""

    pass


class UnsupportedConstructError(GeneratorError):
    """Raised when a declaration reaches an unimplemented extension point."""

    def __init__(self, declaration: str, message: str):
        super().__init__(f"{declaration}: {message}")
        self.declaration = declaration
