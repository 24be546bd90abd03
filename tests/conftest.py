import logging

import pytest

from schemagen.codegen.core.schema import (
    AliasType,
    BaseKind,
    BaseType,
    EnumConstant,
    EnumType,
    Field,
    Module,
    StructType,
)
from schemagen.codegen.languages.scala.constants import ScalaConstantRenderer
from schemagen.codegen.languages.scala.types import ScalaTypeMapper
from schemagen.logging_config import ROOT_LOGGER_NAME

I32 = BaseType(BaseKind.I32)
I64 = BaseType(BaseKind.I64)
STRING = BaseType(BaseKind.STRING)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging so caplog sees records from every test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def shapes_module() -> Module:
    """Module with one declaration of every emitted kind."""
    module = Module(name="shapes", namespaces={"scala": "com.example.shapes"})
    module.add(
        EnumType(
            name="Color",
            module="shapes",
            constants=[
                EnumConstant("RED", doc="Warm"),
                EnumConstant("GREEN", value=5),
                EnumConstant("BLUE"),
            ],
        )
    )
    point = module.add(
        StructType(
            name="Point",
            module="shapes",
            fields=[Field("x", I32), Field("y", I32)],
        )
    )
    module.add(AliasType(name="Coord", module="shapes", target=point))
    module.add(
        StructType(
            name="Oops",
            module="shapes",
            fields=[Field("message", STRING)],
            is_exception=True,
        )
    )
    return module


@pytest.fixture
def make_renderer():
    def _make(module: Module = None, **options) -> ScalaConstantRenderer:
        module = module or Module(name="m")
        return ScalaConstantRenderer(ScalaTypeMapper(module), **options)

    return _make
