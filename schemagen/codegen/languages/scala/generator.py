"""
Scala code generator implementation.

Generates one Scala source file per enum, record, exception and service
of a module, plus a ``Constants`` object holding every constant.
"""

import io
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from ....logging_config import get_logger
from ...core.config import GeneratorConfig, load_config
from ...core.errors import UnsupportedConstructError
from ...core.generator import CodeGenerator
from ...core.naming import NamingCase
from ...core.schema import (
    Constant,
    EnumType,
    ListType,
    MapType,
    Module,
    Service,
    SetType,
    StructType,
    TypeNode,
    true_type,
)
from .config import ScalaConfig
from .constants import ScalaConstantRenderer
from .docs import render_doc, render_field_doc
from .naming import create_scala_sanitizer
from .types import ScalaTypeMapper, foreign_references

logger = get_logger(__name__)

CONSTANTS_UNIT_NAME = "Constants"

# Emitted at the top of record and service units
SCALA_TYPE_IMPORTS = ["import org.slf4j.{Logger,LoggerFactory}"]
SCALA_THRIFT_IMPORTS = [
    "import org.apache.thrift._",
    "import org.apache.thrift.meta_data._",
    "import org.apache.thrift.protocol._",
]


class ScalaGenerator(CodeGenerator):
    """Code generator for Scala enumerations, case classes and constants."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Scala generator with configuration."""
        super().__init__(config)

        self.scala_config = ScalaConfig(**self.config.language_config)
        self.constant_case = NamingCase(self.config.constant_case)
        self.sanitizer = create_scala_sanitizer()

        # Built per module in begin_module
        self.type_mapper: Optional[ScalaTypeMapper] = None
        self.constant_renderer: Optional[ScalaConstantRenderer] = None

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "scala"

    @property
    def file_extension(self) -> str:
        """Return Scala file extension."""
        return ".scala"

    def get_template_directory(self) -> Optional[Path]:
        """Return the Scala templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def begin_module(self, module: Module) -> None:
        self.type_mapper = ScalaTypeMapper(
            module,
            namespace_key=self.scala_config.namespace_key,
            strict_namespaces=self.config.strict_namespaces,
        )
        self.constant_renderer = ScalaConstantRenderer(
            self.type_mapper,
            temp_prefix=self.scala_config.temp_prefix,
            setter_style=self.scala_config.setter_style,
            indent_unit=self.config.indent_unit,
        )

    @property
    def package_name(self) -> str:
        """Package of the generated units; empty for the default package."""
        if self.config.package_name:
            return self.config.package_name
        if self.module is None:
            return ""
        return self.module.get_namespace(self.scala_config.namespace_key)

    # Declaration emitters

    def generate_enum(self, enum: EnumType) -> None:
        constants = []
        for constant, ordinal in enum.ordinals():
            constants.append(
                {
                    "name": self.sanitizer.sanitize_name(constant.name),
                    "ordinal": ordinal,
                    "doc": self._doc(constant.doc),
                }
            )

        context = {
            "header": self._render_header(imports=False),
            "name": self.sanitizer.sanitize_name(enum.name),
            "doc": self._doc(enum.doc),
            "constants": constants,
        }

        with self.open_unit(enum.name) as out:
            out.write(self.render_template("enum.scala.j2", context))

    def generate_consts(self, constants: List[Constant]) -> None:
        if not constants:
            return

        blocks = []
        for constant in constants:
            lines = self.constant_renderer.declare(
                self._constant_identifier(constant.name),
                constant.type,
                constant.value,
            )
            doc = self._doc(constant.doc)
            if doc:
                lines.insert(0, doc)
            blocks.append("\n".join(lines))

        context = {
            "header": self._render_header(imports=False),
            "name": CONSTANTS_UNIT_NAME,
            "blocks": blocks,
        }

        with self.open_unit(CONSTANTS_UNIT_NAME) as out:
            out.write(self.render_template("constants.scala.j2", context))

    def generate_struct(self, struct: StructType) -> None:
        self._generate_record(struct)

    def generate_xception(self, exception: StructType) -> None:
        self._generate_record(exception)

    def _generate_record(self, struct: StructType) -> None:
        parameters = []
        for member in struct.fields:
            declaration = (
                f"var {self.sanitizer.sanitize_name(member.name)} : "
                f"{self.type_mapper.resolve(member.type)}"
            )
            if self.scala_config.field_defaults:
                declaration += f" = {self.type_mapper.default_value(member.type)}"
            parameters.append(
                {
                    "declaration": declaration,
                    "doc": (
                        render_field_doc(member, self.type_mapper)
                        if self.config.add_comments
                        else ""
                    ),
                }
            )

        context = {
            "header": self._render_header(imports=self.scala_config.thrift_imports),
            "name": self.sanitizer.sanitize_name(struct.name),
            "doc": self._doc(struct.doc),
            "parameters": parameters,
            "is_exception": struct.is_exception,
        }

        with self.open_unit(struct.name) as out:
            out.write(self.render_template("struct.scala.j2", context))

    def generate_service(self, service: Service) -> None:
        if service.functions and self.scala_config.service_policy == "placeholder":
            logger.warning(
                "Service '%s' declares %d functions; only an empty placeholder is emitted",
                service.name,
                len(service.functions),
            )

        with self.open_unit(service.name) as out:
            body = io.StringIO()
            self.generate_service_interface(service, body)
            self.generate_service_client(service, body)
            self.generate_service_server(service, body)
            self.generate_service_helpers(service, body)

            context = {
                "header": self._render_header(imports=self.scala_config.thrift_imports),
                "name": self.sanitizer.sanitize_name(service.name),
                "doc": self._doc(service.doc),
                "body": body.getvalue().strip("\n"),
            }
            out.write(self.render_template("service.scala.j2", context))

    # Service hooks. Each writes its section of the class body to ``out``.

    def generate_service_interface(self, service: Service, out: TextIO) -> None:
        self._service_hook(service, "interface")

    def generate_service_client(self, service: Service, out: TextIO) -> None:
        self._service_hook(service, "client")

    def generate_service_server(self, service: Service, out: TextIO) -> None:
        self._service_hook(service, "server")

    def generate_service_helpers(self, service: Service, out: TextIO) -> None:
        self._service_hook(service, "helpers")

    def _service_hook(self, service: Service, section: str) -> None:
        if service.functions and self.scala_config.service_policy == "strict":
            raise UnsupportedConstructError(
                service.name,
                f"service {section} generation is not implemented "
                f"({len(service.functions)} functions declared)",
            )

    # Helpers

    def _render_header(self, imports: bool) -> str:
        context: Dict[str, Any] = {
            "package": self.package_name,
            "imports": SCALA_TYPE_IMPORTS + SCALA_THRIFT_IMPORTS if imports else [],
        }
        return self.render_template("header.scala.j2", context)

    def _doc(self, text: Optional[str]) -> str:
        if not self.config.add_comments:
            return ""
        return render_doc(text)

    def _constant_identifier(self, name: str) -> str:
        return self.sanitizer.sanitize_name(name, self.constant_case)

    def validate_module(self, module: Module) -> List[str]:
        """Validate a module for Scala generation."""
        warnings = super().validate_module(module)
        namespace_key = self.scala_config.namespace_key

        for module_name, type_names in sorted(foreign_references(module).items()):
            owner = module.find_module(module_name)
            if owner is None or not owner.get_namespace(namespace_key):
                warnings.append(
                    f"Module '{module_name}' declares no {namespace_key} namespace; "
                    f"{', '.join(sorted(type_names))} will be referenced by bare name"
                )

        if not self.scala_config.field_defaults:
            for constant in module.constants:
                if _builds_records(constant.type):
                    warnings.append(
                        f"Constant '{constant.name}' constructs empty records, "
                        "which needs field_defaults enabled"
                    )

        if self.scala_config.service_policy == "placeholder":
            for service in module.services:
                if service.functions:
                    warnings.append(
                        f"Service '{service.name}' functions are not generated"
                    )

        return warnings


def _builds_records(ttype: TypeNode) -> bool:
    """Whether rendering a literal of this type constructs an empty record."""
    resolved = true_type(ttype)
    if isinstance(resolved, StructType):
        return True
    if isinstance(resolved, (ListType, SetType)):
        return _builds_records(resolved.element)
    if isinstance(resolved, MapType):
        return _builds_records(resolved.key) or _builds_records(resolved.value)
    return False


def create_scala_generator(
    config: Optional[GeneratorConfig] = None, **kwargs
) -> ScalaGenerator:
    """
    Create a Scala generator.

    Args:
        config: Base configuration; defaults are loaded when omitted
        **kwargs: Scala-specific options (thrift_imports, setter_style, ...)

    Returns:
        Configured ScalaGenerator instance
    """
    if config is None:
        config = load_config("scala")
    if kwargs:
        language_config = dict(config.language_config)
        language_config.update(kwargs)
        config = replace(config, language_config=language_config)
    return ScalaGenerator(config)
