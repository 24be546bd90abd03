"""
Core schema representation for code generation.

Defines the read-only schema tree the emitters walk (type nodes, literal
values, declarations and modules) and converts JSON schema documents into
that tree so generators can work with it consistently.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NoReturn, Optional, Tuple, Union

from .errors import SchemaConsistencyError


class SchemaFormatError(ValueError):
    """Exception raised when a schema document is malformed."""

    pass


class BaseKind(Enum):
    """Primitive schema types."""

    BOOL = "bool"
    BYTE = "byte"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"
    VOID = "void"


# Spellings accepted in schema documents
BASE_TYPE_NAMES = {
    "bool": BaseKind.BOOL,
    "byte": BaseKind.BYTE,
    "i8": BaseKind.BYTE,
    "i16": BaseKind.I16,
    "i32": BaseKind.I32,
    "i64": BaseKind.I64,
    "double": BaseKind.DOUBLE,
    "string": BaseKind.STRING,
    "binary": BaseKind.BINARY,
    "void": BaseKind.VOID,
}


# Type nodes


@dataclass(frozen=True)
class BaseType:
    """A primitive type."""

    kind: BaseKind

    @property
    def name(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class ListType:
    element: "TypeNode"


@dataclass(frozen=True)
class SetType:
    element: "TypeNode"


@dataclass(frozen=True)
class MapType:
    key: "TypeNode"
    value: "TypeNode"


@dataclass(eq=False)
class EnumConstant:
    """A single enum member; ``value`` is None when the ordinal is implicit."""

    name: str
    value: Optional[int] = None
    doc: Optional[str] = None


@dataclass(eq=False)
class EnumType:
    """An enum declaration, also used as the type node that refers to it."""

    name: str
    module: str
    constants: List[EnumConstant] = field(default_factory=list)
    doc: Optional[str] = None

    def ordinals(self) -> List[Tuple[EnumConstant, int]]:
        """Pair every constant with its resolved ordinal."""
        return list(zip(self.constants, enum_ordinals(self.constants)))

    def ordinal_of(self, name: str) -> Optional[int]:
        """Get the ordinal of a constant by name."""
        for constant, ordinal in self.ordinals():
            if constant.name == name:
                return ordinal
        return None


@dataclass(eq=False)
class Field:
    """Represents a single field in a record."""

    name: str
    type: "TypeNode"
    doc: Optional[str] = None


@dataclass(eq=False)
class StructType:
    """A record or exception declaration, also used as its type node."""

    name: str
    module: str
    fields: List[Field] = field(default_factory=list)
    is_exception: bool = False
    doc: Optional[str] = None

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by name."""
        for item in self.fields:
            if item.name == name:
                return item
        return None


@dataclass(eq=False)
class AliasType:
    """A typedef. ``target`` is None only while a document is being converted."""

    name: str
    module: str
    target: Optional["TypeNode"] = None
    doc: Optional[str] = None


TypeNode = Union[BaseType, ListType, SetType, MapType, EnumType, StructType, AliasType]
TrueType = Union[BaseType, ListType, SetType, MapType, EnumType, StructType]


# Literal values


@dataclass(frozen=True)
class IntegerValue:
    value: int


@dataclass(frozen=True)
class DoubleValue:
    value: float


@dataclass(frozen=True)
class BooleanValue:
    value: bool


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class EnumValue:
    """Reference to an enum member, carried as its ordinal."""

    ordinal: int


@dataclass(frozen=True)
class ListValue:
    items: Tuple["LiteralValue", ...] = ()


@dataclass(frozen=True)
class MapValue:
    pairs: Tuple[Tuple["LiteralValue", "LiteralValue"], ...] = ()


@dataclass(frozen=True)
class StructValue:
    fields: Tuple[Tuple[str, "LiteralValue"], ...] = ()


LiteralValue = Union[
    IntegerValue,
    DoubleValue,
    BooleanValue,
    StringValue,
    EnumValue,
    ListValue,
    MapValue,
    StructValue,
]


# Declarations


@dataclass(eq=False)
class Constant:
    name: str
    type: TypeNode
    value: LiteralValue
    doc: Optional[str] = None


@dataclass(eq=False)
class Function:
    name: str
    return_type: TypeNode
    arguments: List[Field] = field(default_factory=list)
    oneway: bool = False
    doc: Optional[str] = None


@dataclass(eq=False)
class Service:
    name: str
    module: str
    functions: List[Function] = field(default_factory=list)
    extends: Optional[str] = None
    doc: Optional[str] = None


Declaration = Union[AliasType, EnumType, StructType, Constant, Service]


@dataclass(eq=False)
class Module:
    """One schema unit: its namespaces, includes and ordered declarations."""

    name: str
    namespaces: Dict[str, str] = field(default_factory=dict)
    declarations: List[Declaration] = field(default_factory=list)
    includes: List["Module"] = field(default_factory=list)

    def get_namespace(self, key: str) -> str:
        """Get the declared namespace for a target, or an empty string."""
        return self.namespaces.get(key, "")

    def add(self, declaration: Declaration) -> Declaration:
        """Append a declaration and return it."""
        self.declarations.append(declaration)
        return declaration

    @property
    def typedefs(self) -> List[AliasType]:
        return [d for d in self.declarations if isinstance(d, AliasType)]

    @property
    def enums(self) -> List[EnumType]:
        return [d for d in self.declarations if isinstance(d, EnumType)]

    @property
    def structs(self) -> List[StructType]:
        return [
            d
            for d in self.declarations
            if isinstance(d, StructType) and not d.is_exception
        ]

    @property
    def exceptions(self) -> List[StructType]:
        return [
            d for d in self.declarations if isinstance(d, StructType) and d.is_exception
        ]

    @property
    def constants(self) -> List[Constant]:
        return [d for d in self.declarations if isinstance(d, Constant)]

    @property
    def services(self) -> List[Service]:
        return [d for d in self.declarations if isinstance(d, Service)]

    def find_type(self, name: str) -> Optional[TypeNode]:
        """Find a named type declared directly in this module."""
        for declaration in self.declarations:
            if isinstance(declaration, (AliasType, EnumType, StructType)):
                if declaration.name == name:
                    return declaration
        return None

    def find_module(self, name: str) -> Optional["Module"]:
        """Find this module or a (transitively) included one by name."""
        if self.name == name:
            return self
        for included in self.includes:
            found = included.find_module(name)
            if found is not None:
                return found
        return None


def unhandled_node(node: NoReturn) -> NoReturn:
    """Close an exhaustive dispatch over the schema unions."""
    raise SchemaConsistencyError(f"Unhandled schema node: {node!r}")


def true_type(ttype: TypeNode) -> TrueType:
    """
    Strip every typedef wrapper from a type.

    Raises:
        SchemaConsistencyError: If the alias chain is cyclic or dangling.
    """
    seen = set()
    while isinstance(ttype, AliasType):
        if id(ttype) in seen:
            raise SchemaConsistencyError(f"Typedef cycle through '{ttype.name}'")
        seen.add(id(ttype))
        if ttype.target is None:
            raise SchemaConsistencyError(f"Typedef '{ttype.name}' has no target type")
        ttype = ttype.target
    return ttype


def enum_ordinals(constants: List[EnumConstant]) -> List[int]:
    """
    Resolve enum ordinals.

    A constant without an explicit value takes the previous ordinal plus
    one; the implicit predecessor of the first constant is -1.
    """
    ordinals = []
    value = -1
    for constant in constants:
        value = constant.value if constant.value is not None else value + 1
        ordinals.append(value)
    return ordinals


def type_display_name(ttype: TypeNode) -> str:
    """Human readable name of a type node, for messages."""
    if isinstance(ttype, BaseType):
        return ttype.name
    elif isinstance(ttype, ListType):
        return f"list<{type_display_name(ttype.element)}>"
    elif isinstance(ttype, SetType):
        return f"set<{type_display_name(ttype.element)}>"
    elif isinstance(ttype, MapType):
        return f"map<{type_display_name(ttype.key)},{type_display_name(ttype.value)}>"
    elif isinstance(ttype, (EnumType, StructType, AliasType)):
        return ttype.name
    else:
        unhandled_node(ttype)


def convert_schema_document(
    document: Dict[str, Any], includes: Optional[List[Module]] = None
) -> Module:
    """
    Convert a JSON schema document to the internal Module representation.

    The document lists declarations in order::

        {"name": "shapes",
         "namespaces": {"scala": "com.example.shapes"},
         "declarations": [
             {"kind": "enum", "name": "Color", "values": ["RED", "GREEN"]},
             {"kind": "struct", "name": "Point",
              "fields": [{"name": "x", "type": "i32"}]},
             {"kind": "const", "name": "ORIGIN", "type": "Point",
              "value": {"x": 0}}]}

    Types are base type names, declared names (``"Point"``), names from an
    included module (``"other.Point"``) or ``{"list": T}``, ``{"set": T}``,
    ``{"map": [K, V]}``.

    Args:
        document: Parsed schema document
        includes: Modules the document may reference by name

    Returns:
        Module: Schema tree for the document

    Raises:
        SchemaFormatError: If the document is malformed
    """
    if not isinstance(document, dict) or not document.get("name"):
        raise SchemaFormatError("Schema document must be an object with a 'name'")

    module = Module(
        name=document["name"],
        namespaces=dict(document.get("namespaces", {})),
        includes=list(includes or []),
    )
    entries = document.get("declarations", [])
    if not isinstance(entries, list):
        raise SchemaFormatError("'declarations' must be a list")

    # Pass 1: named types, so declarations can reference each other in any order
    named: Dict[str, TypeNode] = {}
    slots: List[Optional[Declaration]] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise SchemaFormatError(f"Declaration must be an object: {entry!r}")
        kind = entry.get("kind")
        name = entry.get("name")
        if not name:
            raise SchemaFormatError(f"Declaration without a name: {entry!r}")

        shell: Optional[Declaration] = None
        if kind == "typedef":
            shell = AliasType(name=name, module=module.name, doc=entry.get("doc"))
        elif kind == "enum":
            shell = EnumType(name=name, module=module.name, doc=entry.get("doc"))
        elif kind in ("struct", "exception"):
            shell = StructType(
                name=name,
                module=module.name,
                is_exception=kind == "exception",
                doc=entry.get("doc"),
            )
        elif kind not in ("const", "service"):
            raise SchemaFormatError(f"Unknown declaration kind '{kind}' for '{name}'")

        if shell is not None:
            if name in named:
                raise SchemaFormatError(f"Duplicate type name '{name}'")
            named[name] = shell
        slots.append(shell)

    def lookup(expr: Any) -> TypeNode:
        return _parse_type(expr, module, named)

    # Pass 2: type bodies
    for entry, shell in zip(entries, slots):
        if isinstance(shell, AliasType):
            shell.target = lookup(entry.get("type"))
        elif isinstance(shell, EnumType):
            for value in entry.get("values", []):
                if isinstance(value, str):
                    shell.constants.append(EnumConstant(name=value))
                else:
                    shell.constants.append(
                        EnumConstant(
                            name=_member_name(value, shell.name),
                            value=value.get("value"),
                            doc=value.get("doc"),
                        )
                    )
        elif isinstance(shell, StructType):
            for field_data in entry.get("fields", []):
                shell.fields.append(
                    Field(
                        name=_member_name(field_data, shell.name),
                        type=lookup(field_data.get("type")),
                        doc=field_data.get("doc"),
                    )
                )

    # Pass 3: constants and services, once every type is complete
    for index, entry in enumerate(entries):
        if entry["kind"] == "const":
            ctype = lookup(entry.get("type"))
            if "value" not in entry:
                raise SchemaFormatError(f"Constant '{entry['name']}' has no value")
            slots[index] = Constant(
                name=entry["name"],
                type=ctype,
                value=convert_literal(entry["value"], ctype),
                doc=entry.get("doc"),
            )
        elif entry["kind"] == "service":
            functions = []
            for function_data in entry.get("functions", []):
                functions.append(
                    Function(
                        name=_member_name(function_data, entry["name"]),
                        return_type=lookup(function_data.get("returns", "void")),
                        arguments=[
                            Field(
                                name=_member_name(arg, entry["name"]),
                                type=lookup(arg.get("type")),
                                doc=arg.get("doc"),
                            )
                            for arg in function_data.get("arguments", [])
                        ],
                        oneway=function_data.get("oneway", False),
                        doc=function_data.get("doc"),
                    )
                )
            slots[index] = Service(
                name=entry["name"],
                module=module.name,
                functions=functions,
                extends=entry.get("extends"),
                doc=entry.get("doc"),
            )

    module.declarations = [slot for slot in slots if slot is not None]
    return module


def _member_name(data: Any, owner: str) -> str:
    """Name of a value, field, function or argument entry of ``owner``."""
    name = data.get("name") if isinstance(data, dict) else None
    if not name or not isinstance(name, str):
        raise SchemaFormatError(f"Entry of '{owner}' needs a name: {data!r}")
    return name


def _parse_type(expr: Any, module: Module, named: Dict[str, TypeNode]) -> TypeNode:
    """Parse a type expression from a schema document."""
    if isinstance(expr, str):
        if expr in BASE_TYPE_NAMES:
            return BaseType(BASE_TYPE_NAMES[expr])
        if expr in named:
            return named[expr]
        if "." in expr:
            module_name, type_name = expr.rsplit(".", 1)
            included = module.find_module(module_name)
            if included is not None and included is not module:
                found = included.find_type(type_name)
                if found is not None:
                    return found
        raise SchemaFormatError(f"Unknown type '{expr}' in module '{module.name}'")

    if isinstance(expr, dict) and len(expr) == 1:
        shape, args = next(iter(expr.items()))
        if shape == "list":
            return ListType(_parse_type(args, module, named))
        if shape == "set":
            return SetType(_parse_type(args, module, named))
        if shape == "map" and isinstance(args, list) and len(args) == 2:
            return MapType(
                _parse_type(args[0], module, named),
                _parse_type(args[1], module, named),
            )

    raise SchemaFormatError(f"Invalid type expression: {expr!r}")


def convert_literal(raw: Any, ttype: TypeNode) -> LiteralValue:
    """
    Convert a JSON value to a literal, guided by the type it is declared with.

    Map keys written as JSON object keys are converted back to the key
    type; maps may also be given as a list of ``[key, value]`` pairs.
    """
    resolved = true_type(ttype)

    if isinstance(resolved, BaseType):
        return _convert_base_literal(raw, resolved)

    elif isinstance(resolved, EnumType):
        if isinstance(raw, bool):
            raise SchemaFormatError(f"Invalid value for enum {resolved.name}: {raw!r}")
        if isinstance(raw, int):
            return EnumValue(raw)
        if isinstance(raw, str):
            member = raw.split(".")[-1]
            ordinal = resolved.ordinal_of(member)
            if ordinal is not None:
                return EnumValue(ordinal)
        raise SchemaFormatError(f"Invalid value for enum {resolved.name}: {raw!r}")

    elif isinstance(resolved, (ListType, SetType)):
        if not isinstance(raw, list):
            raise SchemaFormatError(f"Expected a list literal, got {raw!r}")
        return ListValue(tuple(convert_literal(item, resolved.element) for item in raw))

    elif isinstance(resolved, MapType):
        if isinstance(raw, dict):
            pairs = [(_convert_key(key, resolved.key), value) for key, value in raw.items()]
        elif isinstance(raw, list) and all(
            isinstance(pair, list) and len(pair) == 2 for pair in raw
        ):
            pairs = [(key, value) for key, value in raw]
        else:
            raise SchemaFormatError(f"Expected a map literal, got {raw!r}")
        return MapValue(
            tuple(
                (convert_literal(key, resolved.key), convert_literal(value, resolved.value))
                for key, value in pairs
            )
        )

    elif isinstance(resolved, StructType):
        if not isinstance(raw, dict):
            raise SchemaFormatError(f"Expected an object literal for {resolved.name}")
        values = []
        for name, value in raw.items():
            member = resolved.get_field(name)
            if member is None:
                raise SchemaFormatError(f"{resolved.name} has no field '{name}'")
            values.append((name, convert_literal(value, member.type)))
        return StructValue(tuple(values))

    else:
        unhandled_node(resolved)


def _convert_base_literal(raw: Any, ttype: BaseType) -> LiteralValue:
    kind = ttype.kind
    if kind in (BaseKind.STRING, BaseKind.BINARY):
        if isinstance(raw, str):
            return StringValue(raw)
    elif kind == BaseKind.BOOL:
        if isinstance(raw, bool):
            return BooleanValue(raw)
        if isinstance(raw, int):
            return IntegerValue(raw)
    elif kind == BaseKind.DOUBLE:
        if isinstance(raw, float):
            return DoubleValue(raw)
        if isinstance(raw, int) and not isinstance(raw, bool):
            return IntegerValue(raw)
    elif kind in (BaseKind.BYTE, BaseKind.I16, BaseKind.I32, BaseKind.I64):
        if isinstance(raw, int) and not isinstance(raw, bool):
            return IntegerValue(raw)
    raise SchemaFormatError(f"Invalid {kind.value} literal: {raw!r}")


def _convert_key(key: str, key_type: TypeNode) -> Any:
    """JSON object keys are strings; restore numeric and boolean keys."""
    resolved = true_type(key_type)
    if isinstance(resolved, BaseType):
        try:
            if resolved.kind == BaseKind.BOOL:
                return {"true": True, "false": False}[key]
            if resolved.kind == BaseKind.DOUBLE:
                return float(key)
            if resolved.kind in (BaseKind.BYTE, BaseKind.I16, BaseKind.I32, BaseKind.I64):
                return int(key)
        except (KeyError, ValueError) as e:
            raise SchemaFormatError(
                f"Invalid {resolved.kind.value} map key: {key!r}"
            ) from e
    if isinstance(resolved, EnumType) and key.lstrip("-").isdigit():
        return int(key)
    return key
