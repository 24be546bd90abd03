from schemagen.codegen.core.schema import BaseKind, BaseType, EnumType, Field, Module
from schemagen.codegen.languages.scala.docs import field_doc_text, render_doc
from schemagen.codegen.languages.scala.types import ScalaTypeMapper


def test_render_doc_single_line():
    assert render_doc("A point.") == "/**\n * A point.\n */"


def test_render_doc_keeps_blank_lines_and_defuses_terminator():
    assert render_doc("first\n\nends */ here") == (
        "/**\n * first\n *\n * ends *&#47; here\n */"
    )


def test_render_doc_empty():
    assert render_doc(None) == ""
    assert render_doc("  \n ") == ""


def test_enum_field_doc_gets_see_line():
    module = Module(name="m", namespaces={"scala": "a.b"})
    color = module.add(EnumType(name="Color", module="m"))
    mapper = ScalaTypeMapper(module)

    assert field_doc_text(Field("c", color, doc="Fill"), mapper) == "Fill\n@see Color"
    assert field_doc_text(Field("c", color), mapper) == "@see Color"


def test_non_enum_field_doc_is_unchanged():
    mapper = ScalaTypeMapper(Module(name="m"))

    assert field_doc_text(Field("n", BaseType(BaseKind.I32), doc="Count"), mapper) == "Count"
