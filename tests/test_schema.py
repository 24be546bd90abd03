import pytest

from schemagen.codegen.core.errors import SchemaConsistencyError
from schemagen.codegen.core.schema import (
    AliasType,
    BaseKind,
    BaseType,
    BooleanValue,
    Constant,
    EnumConstant,
    EnumType,
    EnumValue,
    IntegerValue,
    ListType,
    MapType,
    MapValue,
    Module,
    SchemaFormatError,
    Service,
    StringValue,
    StructType,
    StructValue,
    convert_literal,
    convert_schema_document,
    enum_ordinals,
    true_type,
)

I32 = BaseType(BaseKind.I32)


def test_enum_ordinals_continue_from_explicit_values():
    constants = [EnumConstant("A"), EnumConstant("B", value=5), EnumConstant("C")]

    assert enum_ordinals(constants) == [0, 5, 6]


def test_enum_ordinals_may_repeat_after_lower_explicit_value():
    constants = [EnumConstant("A", value=3), EnumConstant("B", value=1), EnumConstant("C")]

    assert enum_ordinals(constants) == [3, 1, 2]


def test_ordinal_of(shapes_module):
    color = shapes_module.enums[0]

    assert color.ordinal_of("BLUE") == 6
    assert color.ordinal_of("PURPLE") is None


def test_true_type_strips_any_depth_of_aliases():
    inner = AliasType(name="A", module="m", target=I32)
    outer = AliasType(name="B", module="m", target=AliasType(name="C", module="m", target=inner))

    assert true_type(outer) is I32


def test_true_type_rejects_alias_cycles():
    first = AliasType(name="A", module="m")
    second = AliasType(name="B", module="m", target=first)
    first.target = second

    with pytest.raises(SchemaConsistencyError, match="cycle"):
        true_type(first)


def test_true_type_rejects_dangling_alias():
    with pytest.raises(SchemaConsistencyError):
        true_type(AliasType(name="A", module="m"))


def test_module_views_keep_declaration_order(shapes_module):
    assert [s.name for s in shapes_module.structs] == ["Point"]
    assert [s.name for s in shapes_module.exceptions] == ["Oops"]
    assert [t.name for t in shapes_module.typedefs] == ["Coord"]
    assert shapes_module.get_namespace("scala") == "com.example.shapes"
    assert shapes_module.get_namespace("java") == ""


def test_find_module_searches_includes_transitively():
    leaf = Module(name="leaf")
    middle = Module(name="middle", includes=[leaf])
    top = Module(name="top", includes=[middle])

    assert top.find_module("leaf") is leaf
    assert top.find_module("missing") is None


SHAPES_DOCUMENT = {
    "name": "shapes",
    "namespaces": {"scala": "com.example.shapes"},
    "declarations": [
        {"kind": "const", "name": "ORIGIN", "type": "Point", "value": {"x": 0, "y": 0}},
        {"kind": "enum", "name": "Color", "values": ["RED", {"name": "GREEN", "value": 5}]},
        {
            "kind": "struct",
            "name": "Point",
            "fields": [{"name": "x", "type": "i32"}, {"name": "y", "type": "Coord"}],
        },
        {"kind": "typedef", "name": "Coord", "type": "i32"},
        {"kind": "const", "name": "FAVORITE", "type": "Color", "value": "GREEN"},
        {
            "kind": "service",
            "name": "Canvas",
            "functions": [
                {"name": "draw", "arguments": [{"name": "at", "type": "Point"}]}
            ],
        },
    ],
}


def test_convert_document_allows_forward_references():
    module = convert_schema_document(SHAPES_DOCUMENT)

    assert [d.name for d in module.declarations] == [
        "ORIGIN",
        "Color",
        "Point",
        "Coord",
        "FAVORITE",
        "Canvas",
    ]
    origin = module.constants[0]
    assert isinstance(origin, Constant)
    assert origin.value == StructValue((("x", IntegerValue(0)), ("y", IntegerValue(0))))

    point = module.structs[0]
    assert true_type(point.fields[1].type) == I32


def test_convert_document_resolves_enum_names_to_ordinals():
    module = convert_schema_document(SHAPES_DOCUMENT)

    assert module.constants[1].value == EnumValue(5)


def test_convert_document_builds_services():
    module = convert_schema_document(SHAPES_DOCUMENT)
    service = module.services[0]

    assert isinstance(service, Service)
    assert service.functions[0].name == "draw"
    assert true_type(service.functions[0].return_type) == BaseType(BaseKind.VOID)


def test_convert_document_references_included_types():
    common = convert_schema_document(
        {
            "name": "common",
            "declarations": [{"kind": "struct", "name": "Id", "fields": []}],
        }
    )
    module = convert_schema_document(
        {
            "name": "app",
            "declarations": [
                {
                    "kind": "struct",
                    "name": "User",
                    "fields": [{"name": "id", "type": "common.Id"}],
                }
            ],
        },
        includes=[common],
    )

    assert module.structs[0].fields[0].type is common.structs[0]


@pytest.mark.parametrize(
    "document",
    [
        {"declarations": []},
        {"name": "m", "declarations": [{"kind": "struct"}]},
        {"name": "m", "declarations": [{"kind": "widget", "name": "W"}]},
        {"name": "m", "declarations": [{"kind": "typedef", "name": "T", "type": "nope"}]},
        {"name": "m", "declarations": [{"kind": "const", "name": "C", "type": "i32"}]},
        {"name": "m", "declarations": ["Color"]},
        {
            "name": "m",
            "declarations": [{"kind": "enum", "name": "E", "values": [{"value": 1}]}],
        },
        {
            "name": "m",
            "declarations": [{"kind": "struct", "name": "S", "fields": [{"type": "i32"}]}],
        },
        {
            "name": "m",
            "declarations": [
                {"kind": "service", "name": "Svc", "functions": [{"arguments": []}]}
            ],
        },
    ],
)
def test_convert_document_rejects_malformed_documents(document):
    with pytest.raises(SchemaFormatError):
        convert_schema_document(document)


def test_convert_literal_map_keys_follow_key_type():
    map_type = MapType(I32, BaseType(BaseKind.STRING))

    value = convert_literal({"1": "one"}, map_type)

    assert value == MapValue(((IntegerValue(1), StringValue("one")),))


def test_convert_literal_rejects_unknown_record_field():
    record = StructType(name="P", module="m")

    with pytest.raises(SchemaFormatError):
        convert_literal({"z": 1}, record)


def test_convert_literal_rejects_wrong_shapes():
    with pytest.raises(SchemaFormatError):
        convert_literal("x", ListType(I32))
    with pytest.raises(SchemaFormatError):
        convert_literal(True, I32)
    with pytest.raises(SchemaFormatError):
        convert_literal("PURPLE", EnumType(name="E", module="m"))


@pytest.mark.parametrize(
    "key_type, key",
    [
        (I32, "abc"),
        (BaseType(BaseKind.I64), "1.5"),
        (BaseType(BaseKind.DOUBLE), "wide"),
        (BaseType(BaseKind.BOOL), "TRUE"),
        (BaseType(BaseKind.BOOL), "1"),
    ],
)
def test_convert_literal_rejects_unparseable_map_keys(key_type, key):
    with pytest.raises(SchemaFormatError, match="map key"):
        convert_literal({key: "x"}, MapType(key_type, BaseType(BaseKind.STRING)))


def test_convert_literal_bool_map_keys():
    value = convert_literal(
        {"true": 1, "false": 0}, MapType(BaseType(BaseKind.BOOL), I32)
    )

    assert value == MapValue(
        (
            (BooleanValue(True), IntegerValue(1)),
            (BooleanValue(False), IntegerValue(0)),
        )
    )
