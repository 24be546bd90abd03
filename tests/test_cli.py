import json

import pytest

from schemagen.cli import main

SCHEMA = {
    "name": "shapes",
    "namespaces": {"scala": "com.example.shapes"},
    "declarations": [
        {"kind": "enum", "name": "Color", "values": ["RED", "GREEN"]},
        {
            "kind": "struct",
            "name": "Point",
            "fields": [{"name": "x", "type": "i32"}, {"name": "y", "type": "i32"}],
        },
        {"kind": "const", "name": "ORIGIN", "type": "Point", "value": {"x": 0, "y": 0}},
        {
            "kind": "service",
            "name": "Canvas",
            "functions": [{"name": "draw", "arguments": []}],
        },
    ],
}


def write_schema(tmp_path, data=SCHEMA):
    path = tmp_path / "shapes.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_writes_units_into_package_directory(tmp_path):
    schema = write_schema(tmp_path)
    out = tmp_path / "gen"

    assert main([str(schema), "-o", str(out)]) == 0

    package = out / "com" / "example" / "shapes"
    assert sorted(p.name for p in package.iterdir()) == [
        "Canvas.scala",
        "Color.scala",
        "Constants.scala",
        "Point.scala",
    ]
    assert "val ORIGIN : Point = {" in (package / "Constants.scala").read_text()


def test_package_name_override(tmp_path):
    schema = write_schema(tmp_path)
    out = tmp_path / "gen"

    assert main([str(schema), "-o", str(out), "--package-name", "org.demo"]) == 0

    assert (out / "org" / "demo" / "Point.scala").exists()


def test_strict_service_policy_from_config_file(tmp_path):
    schema = write_schema(tmp_path)
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"service_policy": "strict"}), encoding="utf-8")
    out = tmp_path / "gen"

    assert main([str(schema), "-o", str(out), "--config", str(config)]) == 1

    package = out / "com" / "example" / "shapes"
    assert (package / "Point.scala").exists()
    assert not (package / "Canvas.scala").exists()


def test_stdout_does_not_write_files(tmp_path, capsys):
    schema = write_schema(tmp_path)
    out = tmp_path / "gen"

    assert main([str(schema), "-o", str(out), "--stdout"]) == 0

    assert not out.exists()
    assert "Point.scala" in capsys.readouterr().out


def test_missing_schema_file(tmp_path):
    assert main([str(tmp_path / "nope.json")]) == 1


def test_no_schema_argument():
    assert main([]) == 1


def test_unknown_language(tmp_path):
    assert main([str(write_schema(tmp_path)), "-l", "cobol"]) == 1


def test_list_languages(capsys):
    assert main(["--list-languages"]) == 0

    assert "scala" in capsys.readouterr().out


def test_output_dir_from_config_file(tmp_path):
    schema = write_schema(tmp_path)
    out = tmp_path / "from-config"
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"output_dir": str(out)}), encoding="utf-8")

    assert main([str(schema), "--config", str(config)]) == 0

    assert (out / "com" / "example" / "shapes" / "Color.scala").exists()


def test_invalid_package_name_is_rejected(tmp_path):
    schema = write_schema(tmp_path)

    assert main([str(schema), "-o", str(tmp_path), "--package-name", "com.2bad"]) == 1
    assert not (tmp_path / "com").exists()


@pytest.mark.parametrize(
    "declaration",
    [
        {
            "kind": "const",
            "name": "NAMES",
            "type": {"map": ["i32", "string"]},
            "value": {"abc": "x"},
        },
        {
            "kind": "const",
            "name": "FLAGS",
            "type": {"map": ["bool", "string"]},
            "value": {"TRUE": "x"},
        },
        "Color",
        {"kind": "struct", "name": "Box", "fields": [{"type": "i32"}]},
        {"kind": "enum", "name": "Size", "values": [{"value": 2}]},
    ],
)
def test_malformed_schema_exits_with_error(tmp_path, capsys, declaration):
    data = dict(SCHEMA, declarations=SCHEMA["declarations"] + [declaration])
    schema = write_schema(tmp_path, data)
    out = tmp_path / "gen"

    assert main([str(schema), "-o", str(out)]) == 1

    assert not out.exists()
    assert "Invalid schema document" in capsys.readouterr().out
