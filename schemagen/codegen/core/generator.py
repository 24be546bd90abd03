"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement and the
per-declaration generation loop they share.
"""

import io
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ...logging_config import get_logger
from .config import GeneratorConfig
from .errors import GeneratorError, SchemaConsistencyError, UnsupportedConstructError
from .schema import (
    AliasType,
    Constant,
    EnumType,
    Module,
    Service,
    StructType,
)
from .templates import TemplateEngine, TemplateError, create_template_engine

logger = get_logger(__name__)

__all__ = [
    "CodeGenerator",
    "GeneratorError",
    "SchemaConsistencyError",
    "UnsupportedConstructError",
    "OutputUnit",
    "GenerationResult",
    "generate_code",
]


@dataclass(frozen=True)
class OutputUnit:
    """One self-contained generated source file."""

    base_name: str
    code: str
    file_extension: str

    @property
    def filename(self) -> str:
        return f"{self.base_name}{self.file_extension}"


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self.module: Optional[Module] = None
        self.failed_declarations: List[Tuple[str, str]] = []
        self._units: List[OutputUnit] = []
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(
            self.get_template_directory(), self.config.indent_unit
        )

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'scala')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.scala')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    def generate(self, module: Module) -> List[OutputUnit]:
        """
        Generate one output unit per emitted declaration of a module.

        Declarations that hit an unsupported construct are logged, recorded
        in ``failed_declarations`` and skipped; schema consistency errors
        abort the whole run.

        Args:
            module: Module to generate code for

        Returns:
            Generated units in emission order
        """
        self.module = module
        self.failed_declarations = []
        self._units = []
        self.begin_module(module)

        logger.info("Generating %s code for module '%s'", self.language_name, module.name)

        for typedef in module.typedefs:
            self.generate_typedef(typedef)

        for enum in module.enums:
            self._emit(enum.name, self.generate_enum, enum)

        self._emit("Constants", self.generate_consts, module.constants)

        for declaration in module.declarations:
            if isinstance(declaration, StructType):
                if declaration.is_exception:
                    self._emit(declaration.name, self.generate_xception, declaration)
                else:
                    self._emit(declaration.name, self.generate_struct, declaration)

        for service in module.services:
            self._emit(service.name, self.generate_service, service)

        return list(self._units)

    def _emit(self, name: str, emitter, declaration) -> None:
        try:
            emitter(declaration)
        except UnsupportedConstructError as e:
            logger.error("Skipping declaration '%s': %s", name, e)
            self.failed_declarations.append((name, str(e)))

    def begin_module(self, module: Module) -> None:
        """Reset per-run state before a module is generated."""
        pass

    def generate_typedef(self, typedef: AliasType) -> None:
        """Typedefs are transparent: they produce no output of their own."""
        logger.debug("Typedef %s resolved in place, no unit emitted", typedef.name)

    @abstractmethod
    def generate_enum(self, enum: EnumType) -> None:
        pass

    @abstractmethod
    def generate_consts(self, constants: List[Constant]) -> None:
        pass

    @abstractmethod
    def generate_struct(self, struct: StructType) -> None:
        pass

    @abstractmethod
    def generate_xception(self, exception: StructType) -> None:
        pass

    @abstractmethod
    def generate_service(self, service: Service) -> None:
        pass

    @contextmanager
    def open_unit(self, base_name: str) -> Iterator[io.StringIO]:
        """
        Open the output sink for one declaration.

        The unit is recorded only when the body completes; the sink is
        closed on every exit path.
        """
        sink = io.StringIO()
        try:
            yield sink
            code = self.format_code(sink.getvalue())
            self._units.append(OutputUnit(base_name, code, self.file_extension))
            logger.debug("Emitted unit %s%s", base_name, self.file_extension)
        finally:
            sink.close()

    def validate_module(self, module: Module) -> List[str]:
        """
        Validate a module for basic structural issues.

        Language generators should override this to add language-specific validation.

        Args:
            module: Module to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for declaration in module.declarations:
            if isinstance(declaration, StructType) and not declaration.fields:
                warnings.append(f"Record '{declaration.name}' has no fields")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - strip trailing spaces, collapse blank runs
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        formatted = "\n".join(formatted_lines).strip("\n") + "\n"
        if self.config.line_ending != "\n":
            formatted = formatted.replace("\n", self.config.line_ending)
        return formatted

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        units: List[OutputUnit],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
        errors: List[str] = None,
    ):
        """
        Initialize generation result.

        Args:
            units: Generated output units
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
            errors: Declarations that could not be generated
        """
        self.units = units
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.errors = errors or []
        self.success = not self.errors
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def code(self) -> str:
        """All units concatenated, mostly useful for previews."""
        return "\n".join(unit.code for unit in self.units)

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(units=[])
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, module: Module) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        module: Module to generate code for

    Returns:
        GenerationResult with units, warnings, and metadata
    """
    try:
        warnings = generator.validate_module(module)
        units = generator.generate(module)
    except (GeneratorError, TemplateError) as e:
        logger.error("Code generation failed for module '%s': %s", module.name, e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    errors = [message for _, message in generator.failed_declarations]
    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "module": module.name,
        "unit_count": len(units),
        "declaration_count": len(module.declarations),
        "failed_count": len(errors),
    }

    return GenerationResult(units, warnings, metadata, errors)
