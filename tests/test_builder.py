from pathlib import Path

from tests._debug import debug_dump_diagnostics, debug_dump_document
from tests._shared_cases import case_source
from unrealdocpy.builder import build_document
from unrealdocpy.config import ExportSettings
from unrealdocpy.cst import from_green
from unrealdocpy.diagnostics import MalformedFragmentError, has_errors
from unrealdocpy.document import (
    Argument,
    ArraySized,
    AttributePair,
    AttributeSingle,
    Document,
    Specifiers,
    StructClassMode,
    Visibility,
)
from unrealdocpy.parser import parse_header


def _build(source: str, settings: ExportSettings | None = None, filename: str = "Example.h") -> Document:
    parsed = parse_header(source)
    debug_dump_diagnostics(filename, parsed.diagnostics, source)
    assert not has_errors(parsed.diagnostics)

    document = Document()
    build_document(
        from_green(parsed.root, source),
        document,
        settings if settings is not None else ExportSettings(),
        filename,
    )
    debug_dump_document(filename, document)
    return document


def test_example_header_collects_every_entity() -> None:
    document = _build(case_source("example_header"))

    assert document.enums.names() == ["EKind"]
    assert document.delegates.names() == ["FOnValue", "FOnPair", "FOnCheck"]
    assert document.structs.names() == ["FExample"]
    assert document.classes.names() == ["UExampleComponent"]
    assert document.functions.names() == ["FreeHelper"]
    assert document.snippets == {"example": "auto X = 1;\n  auto Y = 2;"}
    assert [proxy.item.name for proxy in document.proxy_functions] == ["Add"]
    assert document.proxy_properties == []


def test_enum_fields() -> None:
    document = _build(case_source("example_header"))
    enum = document.enums.get("EKind")
    assert enum is not None

    assert enum.variants == ("First", "Second")
    assert enum.doc_comments == "Kind of things."
    assert enum.specifiers == Specifiers(attributes=(AttributeSingle("BlueprintType"),))
    assert enum.filename == "Example.h"
    assert enum.line == 7
    assert enum.signature() == "enum EKind\n{\n    First,\n    Second,\n};"


def test_struct_members_and_signature() -> None:
    document = _build(case_source("example_header"))
    struct = document.structs.get("FExample")
    assert struct is not None

    assert struct.mode is StructClassMode.STRUCT
    assert struct.api == "EXAMPLE_API"
    assert struct.inherits == [(Visibility.PUBLIC, "FTableRowBase")]
    assert struct.doc_comments == "<summary>Example struct.</summary>"
    assert struct.line == 20
    assert struct.signature() == "struct EXAMPLE_API FExample : public FTableRowBase;"

    assert [prop.name for prop in struct.properties] == ["Speed", "Names", "Slots"]
    speed, names, slots = struct.properties
    assert speed.value_type == "float"
    assert speed.default_value == "1.0f"
    assert speed.doc_comments == "Speed in units."
    assert speed.line == 26
    assert speed.specifiers == Specifiers(
        attributes=(AttributeSingle("EditAnywhere"),),
        meta=(AttributePair("ClampMin", '"0"'),),
    )
    assert speed.signature() == "float Speed = 1.0f;"

    assert names.value_type == "TArray<FString>"
    assert names.specifiers == Specifiers()
    assert slots.array == ArraySized("4")
    assert slots.specifiers is None
    assert slots.signature() == "int32 Slots[4];"

    assert struct.methods == []
    assert [constructor.name for constructor in struct.constructors] == ["FExample"]
    assert struct.constructors[0].line == 34


def test_class_members_visibility_and_constructors() -> None:
    document = _build(case_source("example_header"))
    component = document.classes.get("UExampleComponent")
    assert component is not None

    assert component.mode is StructClassMode.CLASS
    assert component.specifiers == Specifiers(
        attributes=(AttributeSingle("Blueprintable"),),
        meta=(AttributePair("DisplayName", '"Example Component"'),),
    )
    assert component.injects == {"FExample", "EKind"}
    assert component.properties == []
    assert [method.name for method in component.methods] == ["Compute", "BeginPlay", "Get"]
    assert [constructor.name for constructor in component.constructors] == ["UExampleComponent"]
    assert all(method.visibility is Visibility.PUBLIC for method in component.methods)


def test_function_signature_fields_are_raw_text() -> None:
    document = _build(case_source("example_header"))
    component = document.classes.get("UExampleComponent")
    assert component is not None
    compute, begin_play, get = component.methods

    assert compute.return_type == "float"
    assert compute.arguments == (
        Argument(value_type="const FVector&", name="Input"),
        Argument(value_type="int32", name="Count", default_value="1"),
    )
    assert compute.is_const_this
    assert compute.line == 53
    assert compute.specifiers == Specifiers(
        attributes=(AttributeSingle("BlueprintCallable"), AttributePair("Category", '"Example"')),
    )
    assert compute.doc_comments == (
        '<summary>Computes things.</summary>\n<param name="Input">The input.</param>\n<returns>The result.</returns>'
    )
    assert compute.signature() == "float Compute(const FVector& Input, int32 Count = 1) const;"

    assert begin_play.is_virtual and begin_play.is_override
    assert begin_play.signature() == "virtual void BeginPlay() override;"
    assert get.is_static
    assert get.signature() == "static UExampleComponent* Get();"


def test_constructor_is_never_a_method() -> None:
    document = _build(case_source("example_header"))
    component = document.classes.get("UExampleComponent")
    assert component is not None

    constructor = component.constructors[0]
    assert constructor.is_constructor
    assert constructor.return_type is None
    assert constructor.signature() == "UExampleComponent();"
    assert all(not method.is_constructor for method in component.methods)


def test_operators_are_methods_not_properties() -> None:
    source = (
        "USTRUCT()\n"
        "struct FRow\n"
        "{\n"
        "    GENERATED_BODY()\n"
        "\n"
        "    FRow& operator=(const FRow& Other);\n"
        "    bool operator==(const FRow& Other) const { return true; }\n"
        "    friend uint32 GetTypeHash(const FRow& Row);\n"
        "\n"
        "    UPROPERTY()\n"
        "    int32 Value;\n"
        "};\n"
    )
    row = _build(source).structs.get("FRow")
    assert row is not None

    assert [prop.name for prop in row.properties] == ["Value"]
    assert [method.name for method in row.methods] == ["operator=", "operator=="]
    assert row.methods[0].return_type == "FRow&"
    assert row.methods[1].signature() == "bool operator==(const FRow& Other) const;"


def test_deprecated_method_is_kept() -> None:
    source = 'class UFoo\n{\npublic:\n    UE_DEPRECATED(5.0, "Use New") void Old();\n    void New();\n};\n'
    klass = _build(source).classes.get("UFoo")
    assert klass is not None

    assert [method.name for method in klass.methods] == ["Old", "New"]
    assert klass.methods[0].signature() == "void Old();"


def test_free_function() -> None:
    document = _build(case_source("example_header"))
    helper = document.functions.get("FreeHelper")
    assert helper is not None

    assert helper.return_type == "int32"
    assert helper.arguments == (Argument(value_type="int32", name="Value"),)
    assert helper.line == 70


def test_delegates_from_example_header() -> None:
    document = _build(case_source("example_header"))
    on_value, on_pair, on_check = document.delegates

    assert on_value.dynamic and not on_value.multicast
    assert on_value.arguments == (Argument(value_type="int32", name="Value"),)
    assert on_value.line == 15
    assert on_value.signature() == "DECLARE_DYNAMIC_DELEGATE_OneParam(FOnValue, int32, Value);"
    assert on_value.callback_signature() == "void FOnValue_Callback(int32 Value);"

    assert on_pair.multicast and not on_pair.dynamic
    assert on_pair.arguments == (Argument(value_type="int32"), Argument(value_type="const FString&"))
    assert on_pair.signature() == "DECLARE_MULTICAST_DELEGATE_TwoParams(FOnPair, int32, const FString&);"

    assert on_check.return_type == "bool"
    assert on_check.signature() == "DECLARE_DELEGATE_RetVal_OneParam(bool, FOnCheck, int32);"
    assert on_check.callback_signature() == "bool FOnCheck_Callback(int32);"


def test_delegate_forms() -> None:
    document = _build(case_source("delegate_forms"))
    on_done = document.delegates.get("FOnDone")
    on_hit = document.delegates.get("FOnHit")
    on_query = document.delegates.get("FOnQuery")
    assert on_done is not None and on_hit is not None and on_query is not None

    assert on_done.arguments == ()
    assert on_done.macro_name == "DECLARE_DELEGATE"

    assert on_hit.dynamic and on_hit.multicast
    assert on_hit.arguments == (
        Argument(value_type="AActor*", name="Actor"),
        Argument(value_type="float", name="Damage"),
    )
    assert on_hit.macro_name == "DECLARE_DYNAMIC_MULTICAST_DELEGATE_TwoParams"

    assert on_query.specifiers == Specifiers(attributes=(AttributeSingle("BlueprintAuthorityOnly"),))
    assert on_query.return_type == "bool"
    assert on_query.arguments == (Argument(value_type="int32", name="Index"),)


def test_non_dynamic_delegate_argument_names_are_optional() -> None:
    document = _build("DECLARE_DELEGATE_TwoParams(FOnNamed, int32 Count, const FString&);\n")
    delegate = document.delegates.get("FOnNamed")
    assert delegate is not None

    assert delegate.arguments == (
        Argument(value_type="int32", name="Count"),
        Argument(value_type="const FString&"),
    )


def test_unnamed_delegate_argument_keeps_inline_comment() -> None:
    document = _build("DECLARE_DELEGATE_OneParam(FOnFoo, int32 /*Count*/);\n")
    delegate = document.delegates.get("FOnFoo")
    assert delegate is not None

    assert delegate.arguments == (Argument(value_type="int32 /*Count*/"),)


def test_unknown_macro_calls_are_not_functions() -> None:
    source = (
        "DECLARE_EVENT_OneParam(UFoo, FOnChanged, int32);\n"
        "DECLARE_DYNAMIC_MULTICAST_SPARSE_DELEGATE_OneParam(FOnSparse, UFoo, OnSparse, int32, Value);\n"
        "\n"
        "class UFoo\n"
        "{\n"
        "public:\n"
        "    DECLARE_EVENT_OneParam(UFoo, FOnChanged, int32);\n"
        "    UFoo();\n"
        "};\n"
    )
    document = _build(source)

    assert document.functions.names() == []
    assert document.delegates.names() == []
    klass = document.classes.get("UFoo")
    assert klass is not None
    assert [constructor.name for constructor in klass.constructors] == ["UFoo"]
    assert klass.methods == []


def test_struct_defaults_public_and_class_defaults_private() -> None:
    struct_source = "struct FBar\n{\n    int32 A;\nprivate:\n    int32 B;\n};\n"
    class_source = "class UFoo\n{\n    int32 A;\npublic:\n    int32 B;\n};\n"

    struct = _build(struct_source).structs.get("FBar")
    assert struct is not None
    assert [(prop.name, prop.visibility) for prop in struct.properties] == [("A", Visibility.PUBLIC)]

    klass = _build(class_source).classes.get("UFoo")
    assert klass is not None
    assert [(prop.name, prop.visibility) for prop in klass.properties] == [("B", Visibility.PUBLIC)]

    everything = ExportSettings(document_private=True, document_protected=True)
    klass = _build(class_source, everything).classes.get("UFoo")
    assert klass is not None
    assert [(prop.name, prop.visibility) for prop in klass.properties] == [
        ("A", Visibility.PRIVATE),
        ("B", Visibility.PUBLIC),
    ]


def test_visibility_settings_include_protected_and_private_members() -> None:
    everything = ExportSettings(document_private=True, document_protected=True)
    document = _build(case_source("example_header"), everything)

    struct = document.structs.get("FExample")
    component = document.classes.get("UExampleComponent")
    assert struct is not None and component is not None

    assert [prop.name for prop in struct.properties] == ["Speed", "Names", "Slots", "Hidden"]
    assert [(prop.name, prop.visibility) for prop in component.properties] == [("Guarded", Visibility.PROTECTED)]
    assert [method.name for method in component.methods] == ["Compute", "BeginPlay", "Get", "Secret"]
    assert component.methods[-1].visibility is Visibility.PRIVATE

    protected_only = _build(case_source("example_header"), ExportSettings(document_protected=True))
    component = protected_only.classes.get("UExampleComponent")
    assert component is not None
    assert [prop.name for prop in component.properties] == ["Guarded"]
    assert [method.name for method in component.methods] == ["Compute", "BeginPlay", "Get"]


def test_show_all_false_keeps_documented_entities_only() -> None:
    document = _build(case_source("example_header"), ExportSettings(show_all=False))

    assert document.enums.names() == ["EKind"]
    assert document.structs.names() == ["FExample"]
    assert document.classes.names() == ["UExampleComponent"]
    assert document.delegates.names() == []
    assert document.functions.names() == []

    struct = document.structs.get("FExample")
    component = document.classes.get("UExampleComponent")
    assert struct is not None and component is not None
    assert [prop.name for prop in struct.properties] == ["Speed"]
    assert struct.constructors == []
    assert [method.name for method in component.methods] == ["Compute"]


def test_inheritance_visibility_defaults_by_mode() -> None:
    source = "class UFoo : UBase\n{\n};\nstruct FBar : FBase\n{\n};\nclass UBaz : protected UBase, public IThing\n{\n};\n"
    document = _build(source)

    foo = document.classes.get("UFoo")
    bar = document.structs.get("FBar")
    baz = document.classes.get("UBaz")
    assert foo is not None and bar is not None and baz is not None

    assert foo.inherits == [(Visibility.PRIVATE, "UBase")]
    assert bar.inherits == [(Visibility.PUBLIC, "FBase")]
    assert baz.inherits == [(Visibility.PROTECTED, "UBase"), (Visibility.PUBLIC, "IThing")]


def test_property_details() -> None:
    document = _build(case_source("struct_with_properties"))
    struct = document.structs.get("FData")
    assert struct is not None
    lookup, limit, flag = struct.properties

    assert lookup.value_type == "TMap<FName, TArray<int32>>"
    assert limit.is_static
    assert limit.value_type == "const int32"
    assert limit.default_value == "8"
    assert limit.signature() == "static const int32 Limit = 8;"
    assert flag.name == "bFlag"
    assert flag.signature() == "bool bFlag;"


def test_template_struct() -> None:
    document = _build(case_source("template_struct"))
    box = document.structs.get("TBox")
    assert box is not None

    assert box.template == "template <typename T>"
    assert box.signature() == "template <typename T>\nstruct TBox;"
    assert [(prop.name, prop.value_type) for prop in box.properties] == [("Value", "T")]


def test_enum_variants_skip_values_and_metadata() -> None:
    document = _build(case_source("enum_with_values_and_docs"))
    mode = document.enums.get("EMode")
    assert mode is not None

    assert mode.variants == ("Off", "On")

    plain = _build(case_source("plain_enum_without_macro")).enums.get("EPlain")
    assert plain is not None
    assert plain.variants == ("A", "B")
    assert plain.specifiers is None


def test_namespaced_declarations_are_collected() -> None:
    document = _build(case_source("namespace_wrapped_declarations"))

    assert document.enums.names() == ["EKind"]


def test_documented_namespace_keeps_its_declarations() -> None:
    source = "/// Helpers.\nnamespace Util\n{\n/// An enum.\nUENUM()\nenum class EKind : uint8 { A };\n}\n"
    document = _build(source)

    assert document.enums.names() == ["EKind"]
    kind = document.enums.get("EKind")
    assert kind is not None
    assert kind.doc_comments == "An enum."


def test_doc_comment_blank_lines_are_kept() -> None:
    source = "/// Above.\n\n/// Below.\nUENUM()\nenum class EKind : uint8 { A };\n"
    document = _build(source)
    enum = document.enums.get("EKind")
    assert enum is not None

    assert enum.doc_comments == "Above.\n\nBelow."
    assert enum.line == 4


def test_snippet_minimum_indentation() -> None:
    source = "//// [snippet: indents]\n    a\n    b\n  c\n      d\n//// [/snippet]\n"
    document = _build(source)

    assert document.snippets == {"indents": "  a\n  b\nc\n    d"}


def test_snippet_inside_function_body() -> None:
    document = _build(case_source("function_with_inline_body_and_snippet"))

    assert document.snippets == {"value": "return 1;"}
    foo = document.classes.get("UFoo")
    assert foo is not None
    assert [(method.name, method.is_const_this) for method in foo.methods] == [("Value", True)]


def test_proxy_function_keeps_tags_docs_and_enclosing_line() -> None:
    document = _build(case_source("example_header"))
    (proxy,) = document.proxy_functions

    assert proxy.tags == frozenset({"core", "math"})
    assert proxy.item.name == "Add"
    assert proxy.item.doc_comments == "Adds two numbers."
    assert proxy.item.specifiers == Specifiers(attributes=(AttributeSingle("BlueprintPure"),))
    assert proxy.item.arguments == (
        Argument(value_type="int32", name="A"),
        Argument(value_type="int32", name="B"),
    )
    assert proxy.item.filename == "Example.h"
    assert proxy.item.line == 79


def test_proxy_property_without_tags() -> None:
    source = "//// [proxy]\n/// Max health.\n//// UPROPERTY(EditAnywhere)\n//// float MaxHealth = 100.0f;\n//// [/proxy]\n"
    document = _build(source)
    (proxy,) = document.proxy_properties

    assert proxy.tags == frozenset()
    assert proxy.item.name == "MaxHealth"
    assert proxy.item.default_value == "100.0f"
    assert proxy.item.doc_comments == "Max health."
    assert proxy.item.line == 3
    assert document.proxy_functions == []


def test_proxy_without_doc_comments_adds_nothing() -> None:
    source = "//// [proxy: core]\n//// int32 Add(int32 A, int32 B);\n//// [/proxy]\n"
    document = _build(source)

    assert document.is_empty


def test_malformed_proxy_fragment_raises_at_enclosing_position() -> None:
    source = "//// [proxy: core]\n/// Docs.\n//// this is not ( valid\n//// [/proxy]\n"

    try:
        _build(source, filename="Broken.h")
    except MalformedFragmentError as exc:
        assert exc.path == Path("Broken.h")
        assert (exc.line, exc.column) == (3, 6)
        assert exc.fragment == "this is not ( valid"
        assert exc.diagnostics
    else:
        raise AssertionError("Expected MalformedFragmentError for a malformed proxy")
