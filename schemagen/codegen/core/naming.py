"""
Naming utilities for safe code generation.

Case conversion for generated identifiers and quoting of names that
clash with a target language's reserved words.
"""

from enum import Enum
from typing import Dict, Optional, Set


class NamingCase(Enum):
    """Case styles, named as in the ``constant_case`` config option."""

    ORIGINAL = "original"  # maxRetries
    SCREAMING_SNAKE = "screaming_snake"  # MAX_RETRIES


def capitalize_first(name: str) -> str:
    """Upper-case the leading character, leaving the rest untouched."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def constant_name(name: str) -> str:
    """
    Convert a camelCase identifier to UPPER_SNAKE_CASE.

    An underscore goes before every uppercase character that is not the
    first one and does not follow another uppercase character or an
    underscore, so ``maxRetryCount`` becomes ``MAX_RETRY_COUNT`` and
    ``HTTPServer`` becomes ``HTTPSERVER``.
    """
    result = []
    previous_upper = False
    previous = ""
    for index, character in enumerate(name):
        is_upper = character.isupper()
        if is_upper and index > 0 and not previous_upper and previous != "_":
            result.append("_")
        result.append(character.upper())
        previous_upper = is_upper
        previous = character
    return "".join(result)


def convert_case(name: str, target_case: NamingCase) -> str:
    """Convert name to target case style."""
    if target_case == NamingCase.SCREAMING_SNAKE:
        return constant_name(name)
    return name


class NameSanitizer:
    """Makes schema identifiers safe to use in a target language."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        quote_prefix: str = "",
        quote_suffix: str = "_",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            quote_prefix: Text placed before a reserved identifier
            quote_suffix: Text placed after a reserved identifier
        """
        self.reserved_words = reserved_words or set()
        self.quote_prefix = quote_prefix
        self.quote_suffix = quote_suffix
        self._name_cache: Dict[str, str] = {}

    def is_reserved(self, name: str) -> bool:
        return name in self.reserved_words

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.ORIGINAL
    ) -> str:
        """
        Convert a name to the target case and quote it if it is reserved.

        Args:
            name: Original name to sanitize
            target_case: Desired case style

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = convert_case(name, target_case)
        if self.is_reserved(converted):
            converted = f"{self.quote_prefix}{converted}{self.quote_suffix}"

        self._name_cache[cache_key] = converted
        return converted
