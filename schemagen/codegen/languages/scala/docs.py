"""
ScalaDoc comment rendering.
"""

from typing import Optional

from ...core.schema import EnumType, Field, true_type
from .types import ScalaTypeMapper


def render_doc(text: Optional[str]) -> str:
    """
    Format doc text as a ScalaDoc block.

    Returns:
        The comment block (no trailing newline), or an empty string when
        there is no text
    """
    if not text or not text.strip():
        return ""

    lines = ["/**"]
    for line in text.strip("\n").split("\n"):
        line = line.rstrip().replace("*/", "*&#47;")
        lines.append(f" * {line}" if line else " *")
    lines.append(" */")
    return "\n".join(lines)


def field_doc_text(field: Field, mapper: ScalaTypeMapper) -> str:
    """Doc text of a field, with a @see line for enum-typed fields."""
    text = (field.doc or "").rstrip()
    resolved = true_type(field.type)
    if isinstance(resolved, EnumType):
        see = f"@see {mapper.qualified_name(resolved)}"
        return f"{text}\n{see}" if text else see
    return text


def render_field_doc(field: Field, mapper: ScalaTypeMapper) -> str:
    return render_doc(field_doc_text(field, mapper))
