"""
Scala-specific type system for code generation.

Maps schema type nodes to Scala type expressions. Typedefs are resolved
to their true type before mapping, so they never appear in output.
"""

from typing import Dict, Set, Union

from ....logging_config import get_logger
from ...core.errors import SchemaConsistencyError
from ...core.schema import (
    AliasType,
    BaseKind,
    BaseType,
    Constant,
    EnumType,
    ListType,
    MapType,
    Module,
    SetType,
    StructType,
    TypeNode,
    true_type,
    unhandled_node,
)
from .naming import create_scala_sanitizer

logger = get_logger(__name__)


# Scala spelling of every primitive kind
SCALA_BASE_TYPES: Dict[BaseKind, str] = {
    BaseKind.VOID: "Unit",
    BaseKind.STRING: "String",
    BaseKind.BINARY: "Array[Byte]",
    BaseKind.BOOL: "Boolean",
    BaseKind.BYTE: "Byte",
    BaseKind.I16: "Short",
    BaseKind.I32: "Int",
    BaseKind.I64: "Long",
    BaseKind.DOUBLE: "Double",
}

# Zero values used for record parameter defaults and empty temporaries
SCALA_BASE_DEFAULTS: Dict[BaseKind, str] = {
    BaseKind.VOID: "()",
    BaseKind.STRING: "null",
    BaseKind.BINARY: "null",
    BaseKind.BOOL: "false",
    BaseKind.BYTE: "0",
    BaseKind.I16: "0",
    BaseKind.I32: "0",
    BaseKind.I64: "0L",
    BaseKind.DOUBLE: "0.0",
}


class ScalaTypeMapper:
    """
    Central engine for mapping schema types to Scala types.

    Named types declared in the module being generated are emitted bare;
    types owned by another module are qualified with that module's Scala
    namespace. A foreign module without a namespace falls back to the bare
    name unless ``strict_namespaces`` is set, in which case it is an error.
    """

    def __init__(
        self,
        module: Module,
        namespace_key: str = "scala",
        strict_namespaces: bool = False,
    ):
        """Initialize with the module currently being generated."""
        self.module = module
        self.namespace_key = namespace_key
        self.strict_namespaces = strict_namespaces
        self.sanitizer = create_scala_sanitizer()
        self._warned_modules: Set[str] = set()

    def resolve(self, ttype: TypeNode, in_container: bool = False) -> str:
        """
        Map a schema type to a Scala type expression.

        Args:
            ttype: The type to map
            in_container: Whether the type is a container element

        Returns:
            Scala type, e.g. ``Map[String, List[Int]]``
        """
        resolved = true_type(ttype)

        if isinstance(resolved, BaseType):
            return self.base_type_name(resolved, in_container)
        elif isinstance(resolved, ListType):
            return f"List[{self.resolve(resolved.element, True)}]"
        elif isinstance(resolved, SetType):
            return f"Set[{self.resolve(resolved.element, True)}]"
        elif isinstance(resolved, MapType):
            key = self.resolve(resolved.key, True)
            value = self.resolve(resolved.value, True)
            return f"Map[{key}, {value}]"
        elif isinstance(resolved, (EnumType, StructType)):
            return self.qualified_name(resolved)
        else:
            unhandled_node(resolved)

    def base_type_name(self, ttype: BaseType, in_container: bool = False) -> str:
        """
        Get the Scala name of a primitive.

        Scala generics take primitives directly, so container elements
        use the same spelling.
        """
        try:
            return SCALA_BASE_TYPES[ttype.kind]
        except KeyError:
            raise SchemaConsistencyError(
                f"No Scala name for base type {ttype.kind.value}"
            ) from None

    def qualified_name(self, ttype: Union[EnumType, StructType]) -> str:
        """Name of a declared type as seen from the current module."""
        name = self.sanitizer.sanitize_name(ttype.name)
        if ttype.module == self.module.name:
            return name

        namespace = self.namespace_of(ttype.module)
        if namespace:
            return f"{namespace}.{name}"

        if self.strict_namespaces:
            raise SchemaConsistencyError(
                f"Type '{ttype.name}' is owned by module '{ttype.module}', "
                f"which declares no {self.namespace_key} namespace"
            )

        if ttype.module not in self._warned_modules:
            self._warned_modules.add(ttype.module)
            logger.warning(
                "Module '%s' declares no %s namespace; referring to its types by bare name",
                ttype.module,
                self.namespace_key,
            )
        return name

    def namespace_of(self, module_name: str) -> str:
        """Declared namespace of a module reachable from the current one."""
        owner = self.module.find_module(module_name)
        if owner is None:
            return ""
        return owner.get_namespace(self.namespace_key)

    def default_value(self, ttype: TypeNode) -> str:
        """
        Zero value of a type, used as a record parameter default.

        Records default to ``null`` so a record that refers to itself does
        not construct itself on every construction.
        """
        resolved = true_type(ttype)

        if isinstance(resolved, BaseType):
            return SCALA_BASE_DEFAULTS[resolved.kind]
        elif isinstance(resolved, ListType):
            return "List()"
        elif isinstance(resolved, SetType):
            return "Set()"
        elif isinstance(resolved, MapType):
            return "Map()"
        elif isinstance(resolved, EnumType):
            return "0"
        elif isinstance(resolved, StructType):
            return "null"
        else:
            unhandled_node(resolved)

    def empty_value(self, ttype: TypeNode) -> str:
        """Empty instance a composite constant starts from before it is filled in."""
        resolved = true_type(ttype)
        if isinstance(resolved, StructType):
            return f"new {self.qualified_name(resolved)}()"
        return self.default_value(resolved)


def foreign_references(module: Module) -> Dict[str, Set[str]]:
    """
    Collect the declared types a module uses from other modules.

    Returns:
        Dict mapping owning module name to the type names referenced
    """
    found: Dict[str, Set[str]] = {}
    visited: Set[int] = set()

    def visit(ttype: TypeNode) -> None:
        if isinstance(ttype, AliasType):
            if id(ttype) in visited or ttype.target is None:
                return
            visited.add(id(ttype))
            visit(ttype.target)
        elif isinstance(ttype, (ListType, SetType)):
            visit(ttype.element)
        elif isinstance(ttype, MapType):
            visit(ttype.key)
            visit(ttype.value)
        elif isinstance(ttype, (EnumType, StructType)):
            if ttype.module != module.name:
                found.setdefault(ttype.module, set()).add(ttype.name)

    for declaration in module.declarations:
        if isinstance(declaration, StructType):
            for member in declaration.fields:
                visit(member.type)
        elif isinstance(declaration, AliasType):
            visit(declaration)
        elif isinstance(declaration, Constant):
            visit(declaration.type)

    return found
