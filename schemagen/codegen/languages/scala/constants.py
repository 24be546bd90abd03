"""
Scala rendering of constant values.

Scalar literals render to a single expression. List, set, map and record
literals have no single-expression form here: they render to a fresh
temporary plus the statements that build it, and ``declare`` wraps those
statements in one block so the mutable temporary stays local to the
binding it initializes.
"""

import itertools
import math
from dataclasses import dataclass
from typing import List, Tuple

from ...core.errors import SchemaConsistencyError
from ...core.naming import capitalize_first
from ...core.schema import (
    BaseKind,
    BaseType,
    BooleanValue,
    DoubleValue,
    EnumType,
    EnumValue,
    IntegerValue,
    ListType,
    ListValue,
    LiteralValue,
    MapType,
    MapValue,
    SetType,
    StringValue,
    StructType,
    StructValue,
    TypeNode,
    true_type,
    type_display_name,
    unhandled_node,
)
from .naming import create_scala_sanitizer
from .types import ScalaTypeMapper

_STRING_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def escape_string(text: str) -> str:
    """Escape text for use inside a double-quoted Scala string literal."""
    escaped = []
    for character in text:
        if character in _STRING_ESCAPES:
            escaped.append(_STRING_ESCAPES[character])
        elif ord(character) < 0x20 or ord(character) == 0x7F:
            escaped.append(f"\\u{ord(character):04x}")
        else:
            escaped.append(character)
    return "".join(escaped)


@dataclass(frozen=True)
class RenderedValue:
    """
    A rendered constant.

    ``statements`` must run, in order, before ``expression`` is used; they
    are empty for values that render to a single expression.
    """

    expression: str
    statements: Tuple[str, ...] = ()

    @property
    def is_simple(self) -> bool:
        return not self.statements


class ScalaConstantRenderer:
    """Renders literal value trees as Scala expressions."""

    def __init__(
        self,
        mapper: ScalaTypeMapper,
        temp_prefix: str = "tmp",
        setter_style: str = "assign",
        indent_unit: str = "  ",
    ):
        self.mapper = mapper
        self.temp_prefix = temp_prefix
        self.setter_style = setter_style
        self.indent_unit = indent_unit
        self.sanitizer = create_scala_sanitizer()
        self._temp_counter = itertools.count()

    def new_temp(self) -> str:
        """Allocate a temporary name, unique for the life of the renderer."""
        return f"{self.temp_prefix}{next(self._temp_counter)}"

    def declare(
        self, name: str, ttype: TypeNode, value: LiteralValue, in_static: bool = False
    ) -> List[str]:
        """
        Render a complete binding of a constant.

        Args:
            name: Binding name
            ttype: Declared type of the constant
            value: Literal to bind
            in_static: Bind a mutable local (``var``) inside an
                initialization block instead of a ``val``

        Returns:
            Source lines, relative to the enclosing indentation
        """
        rendered = self.render(name, ttype, value)
        type_name = self.mapper.resolve(ttype)

        if rendered.is_simple:
            return [self._binding(name, type_name, rendered.expression, in_static)]

        lines = [self._binding(name, type_name, "{", in_static)]
        lines.extend(self.indent_unit + statement for statement in rendered.statements)
        lines.append(self.indent_unit + rendered.expression)
        lines.append("}")
        return lines

    def render(self, name: str, ttype: TypeNode, value: LiteralValue) -> RenderedValue:
        """
        Render a literal against the type it is declared with.

        Args:
            name: Name of the binding being rendered, used in error messages
            ttype: Declared type
            value: Literal value tree

        Raises:
            SchemaConsistencyError: If the literal has no form for the type
        """
        resolved = true_type(ttype)

        if isinstance(resolved, BaseType):
            return RenderedValue(self._render_base(name, resolved, value))
        elif isinstance(resolved, EnumType):
            # Enum values stay numeric, matching their wire representation
            if isinstance(value, EnumValue):
                return RenderedValue(str(value.ordinal))
            if isinstance(value, IntegerValue):
                return RenderedValue(str(value.value))
            raise self._mismatch(name, resolved, value)
        elif isinstance(resolved, (ListType, SetType)):
            return self._render_sequence(name, resolved, value)
        elif isinstance(resolved, MapType):
            return self._render_map(name, resolved, value)
        elif isinstance(resolved, StructType):
            return self._render_struct(name, resolved, value)
        else:
            unhandled_node(resolved)

    def _render_base(self, name: str, ttype: BaseType, value: LiteralValue) -> str:
        kind = ttype.kind

        if kind == BaseKind.STRING:
            if isinstance(value, StringValue):
                return f'"{escape_string(value.value)}"'
        elif kind == BaseKind.BINARY:
            if isinstance(value, StringValue):
                return f'"{escape_string(value.value)}".getBytes("UTF-8")'
        elif kind == BaseKind.BOOL:
            if isinstance(value, BooleanValue):
                return "true" if value.value else "false"
            if isinstance(value, IntegerValue):
                return "true" if value.value > 0 else "false"
        elif kind == BaseKind.BYTE:
            if isinstance(value, IntegerValue):
                return self._narrowed(value.value, "toByte")
        elif kind == BaseKind.I16:
            if isinstance(value, IntegerValue):
                return self._narrowed(value.value, "toShort")
        elif kind == BaseKind.I32:
            if isinstance(value, IntegerValue):
                return str(value.value)
        elif kind == BaseKind.I64:
            if isinstance(value, IntegerValue):
                return f"{value.value}L"
        elif kind == BaseKind.DOUBLE:
            if isinstance(value, IntegerValue):
                return self._narrowed(value.value, "toDouble")
            if isinstance(value, DoubleValue):
                if not math.isfinite(value.value):
                    raise SchemaConsistencyError(
                        f"Constant '{name}': no literal form for double {value.value}"
                    )
                return repr(value.value)
        elif kind == BaseKind.VOID:
            raise SchemaConsistencyError(
                f"Constant '{name}': no literal form for type void"
            )

        raise self._mismatch(name, ttype, value)

    def _narrowed(self, number: int, conversion: str) -> str:
        if number < 0:
            return f"({number}).{conversion}"
        return f"{number}.{conversion}"

    def _render_sequence(self, name: str, ttype, value: LiteralValue) -> RenderedValue:
        if not isinstance(value, ListValue):
            raise self._mismatch(name, ttype, value)

        temp, statements = self._start_composite(ttype)
        operator = ":+=" if isinstance(ttype, ListType) else "+="
        for item in value.items:
            element = self.render(name, ttype.element, item)
            statements.extend(element.statements)
            statements.append(f"{temp} {operator} {element.expression}")
        return RenderedValue(temp, tuple(statements))

    def _render_map(self, name: str, ttype: MapType, value: LiteralValue) -> RenderedValue:
        if not isinstance(value, MapValue):
            raise self._mismatch(name, ttype, value)

        temp, statements = self._start_composite(ttype)
        for key_value, item_value in value.pairs:
            key = self.render(name, ttype.key, key_value)
            item = self.render(name, ttype.value, item_value)
            statements.extend(key.statements)
            statements.extend(item.statements)
            statements.append(f"{temp} += ({key.expression} -> {item.expression})")
        return RenderedValue(temp, tuple(statements))

    def _render_struct(
        self, name: str, ttype: StructType, value: LiteralValue
    ) -> RenderedValue:
        if not isinstance(value, StructValue):
            raise self._mismatch(name, ttype, value)

        temp, statements = self._start_composite(ttype)
        for field_name, field_value in value.fields:
            member = ttype.get_field(field_name)
            if member is None:
                raise SchemaConsistencyError(
                    f"Constant '{name}': type error: {ttype.name} has no field {field_name}"
                )
            rendered = self.render(name, member.type, field_value)
            statements.extend(rendered.statements)
            statements.append(self._setter(temp, field_name, rendered.expression))
        return RenderedValue(temp, tuple(statements))

    def _start_composite(self, ttype: TypeNode) -> Tuple[str, List[str]]:
        """Allocate a temporary bound to an empty instance of the type."""
        temp = self.new_temp()
        declaration = self._binding(
            temp,
            self.mapper.resolve(ttype),
            self.mapper.empty_value(ttype),
            in_static=True,
        )
        return temp, [declaration]

    def _setter(self, target: str, field_name: str, expression: str) -> str:
        if self.setter_style == "bean":
            return f"{target}.set{capitalize_first(field_name)}({expression})"
        return f"{target}.{self.sanitizer.sanitize_name(field_name)} = {expression}"

    def _binding(self, name: str, type_name: str, expression: str, in_static: bool) -> str:
        keyword = "var" if in_static else "val"
        return f"{keyword} {name} : {type_name} = {expression}"

    def _mismatch(self, name: str, ttype: TypeNode, value: LiteralValue) -> SchemaConsistencyError:
        return SchemaConsistencyError(
            f"Constant '{name}': no literal form for type "
            f"{type_display_name(ttype)} from {type(value).__name__}"
        )
