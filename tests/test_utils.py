import json
from pathlib import Path

import pytest
import requests

from schemagen.codegen.core.generator import OutputUnit
from schemagen.utils import (
    SchemaLoadError,
    load_json,
    load_schema,
    package_dir,
    write_units,
)


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_package_dir():
    assert package_dir("a.b.c") == Path("a", "b", "c")
    assert package_dir("") == Path(".")
    assert package_dir(None) == Path(".")


def test_load_schema_resolves_relative_includes(tmp_path):
    write_json(
        tmp_path / "common" / "base.json",
        {
            "name": "base",
            "namespaces": {"scala": "org.base"},
            "declarations": [{"kind": "enum", "name": "Status", "values": ["OK"]}],
        },
    )
    main = write_json(
        tmp_path / "app.json",
        {
            "name": "app",
            "includes": ["common/base.json"],
            "declarations": [
                {"kind": "struct", "name": "Job", "fields": [{"name": "s", "type": "base.Status"}]}
            ],
        },
    )

    module = load_schema(main)

    assert module.includes[0].name == "base"
    assert module.structs[0].fields[0].type.module == "base"


def test_load_schema_accepts_embedded_includes(tmp_path):
    main = write_json(
        tmp_path / "app.json",
        {
            "name": "app",
            "includes": [{"name": "inline", "declarations": []}],
            "declarations": [],
        },
    )

    assert load_schema(main).find_module("inline") is not None


def test_shared_includes_are_loaded_once(tmp_path):
    write_json(tmp_path / "shared.json", {"name": "shared", "declarations": []})
    write_json(tmp_path / "left.json", {"name": "left", "includes": ["shared.json"]})
    write_json(tmp_path / "right.json", {"name": "right", "includes": ["shared.json"]})
    main = write_json(
        tmp_path / "main.json", {"name": "main", "includes": ["left.json", "right.json"]}
    )

    module = load_schema(main)

    left, right = module.includes
    assert left.includes[0] is right.includes[0]


def test_include_cycle_is_reported(tmp_path):
    write_json(tmp_path / "a.json", {"name": "a", "includes": ["b.json"]})
    write_json(tmp_path / "b.json", {"name": "b", "includes": ["a.json"]})

    with pytest.raises(SchemaLoadError, match="Include cycle"):
        load_schema(tmp_path / "a.json")


def test_load_errors(tmp_path):
    with pytest.raises(SchemaLoadError):
        load_schema(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(SchemaLoadError):
        load_schema(bad)

    malformed = write_json(tmp_path / "malformed.json", {"declarations": []})
    with pytest.raises(SchemaLoadError):
        load_schema(malformed)


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        return self.payload


def test_load_json_from_url(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return FakeResponse({"name": "remote"})

    monkeypatch.setattr(requests, "get", fake_get)

    assert load_json("https://example.com/schema.json") == {"name": "remote"}
    assert calls == ["https://example.com/schema.json"]


def test_load_json_from_url_http_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(None, 404))

    with pytest.raises(SchemaLoadError, match="404"):
        load_json("https://example.com/missing.json")


def test_write_units(tmp_path):
    units = [OutputUnit("Color", "object Color\n", ".scala")]

    written = write_units(units, tmp_path, "com.example")

    assert written == [tmp_path / "com" / "example" / "Color.scala"]
    assert written[0].read_text(encoding="utf-8") == "object Color\n"
