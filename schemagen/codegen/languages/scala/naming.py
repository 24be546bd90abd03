"""
Scala-specific naming utilities.

Handles Scala reserved words; reserved identifiers are kept as written and
wrapped in backquotes rather than renamed, so generated members keep the
schema's names.
"""

from ...core.naming import NameSanitizer


# Scala reserved words
SCALA_RESERVED_WORDS = {
    "abstract",
    "case",
    "catch",
    "class",
    "def",
    "do",
    "else",
    "extends",
    "false",
    "final",
    "finally",
    "for",
    "forSome",
    "if",
    "implicit",
    "import",
    "lazy",
    "match",
    "new",
    "null",
    "object",
    "override",
    "package",
    "private",
    "protected",
    "return",
    "sealed",
    "super",
    "this",
    "throw",
    "trait",
    "true",
    "try",
    "type",
    "val",
    "var",
    "while",
    "with",
    "yield",
}


def create_scala_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Scala."""
    return NameSanitizer(SCALA_RESERVED_WORDS, quote_prefix="`", quote_suffix="`")
