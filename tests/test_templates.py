import pytest

from schemagen.codegen.core.templates import TemplateEngine, TemplateError


@pytest.fixture
def engine(tmp_path):
    (tmp_path / "block.j2").write_text(
        "object {{ name }} {\n{% for line in lines %}\n{{ line | indent }}\n{% endfor %}\n}\n",
        encoding="utf-8",
    )
    (tmp_path / "broken.j2").write_text("{{ missing }}\n", encoding="utf-8")
    return TemplateEngine(tmp_path, indent_unit="    ")


def test_render_with_block_trimming(engine):
    code = engine.render_template("block.j2", {"name": "A", "lines": ["val x = 1"]})

    assert code == "object A {\n    val x = 1\n}\n"


def test_indent_skips_blank_lines(engine):
    assert engine.indent("a\n\nb", levels=2) == "        a\n\n        b"


def test_undefined_variable_is_an_error(engine):
    with pytest.raises(TemplateError, match="broken.j2"):
        engine.render_template("broken.j2", {})


def test_missing_template_is_an_error(engine):
    with pytest.raises(TemplateError, match="nope.j2"):
        engine.render_template("nope.j2", {})


def test_engine_without_directory_has_no_templates():
    with pytest.raises(TemplateError):
        TemplateEngine().render_template("enum.scala.j2", {})
