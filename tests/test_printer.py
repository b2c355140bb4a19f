"""Tests for TypeScript and Knockout printers."""

from clientgen.graph import TypeReference
from clientgen.models import (
    EnumMemberInfo,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    SourceType,
    TypeKind,
)
from clientgen.printing import KnockoutTypeScriptPrinter, TypeScriptPrinter, render_json
from clientgen.selectors import optional_if_nullable
from clientgen.sources import StaticTypeSource
from clientgen.translation import GeneratorOptions, TypeNameResolver, create_collection_method, generate_views


INT = SourceType(kind=TypeKind.PRIMITIVE, namespace="System", name="Int32")
STRING = SourceType(kind=TypeKind.CLASS, namespace="System", name="String")
DATE = SourceType(kind=TypeKind.STRUCT, namespace="System", name="DateTime")


def ref(name: str) -> SourceType:
    return SourceType(kind=TypeKind.CLASS, namespace="App", name=name)


def generic_collection(name: str, *arguments: SourceType, is_dictionary: bool = False) -> SourceType:
    return SourceType(
        kind=TypeKind.CLASS,
        namespace="System.Collections.Generic",
        name=f"{name}`{len(arguments)}",
        generic_arguments=arguments,
        is_enumerable=True,
        is_dictionary=is_dictionary,
    )


TYPES = [
    SourceType(
        kind=TypeKind.CLASS, namespace="App", name="Person",
        properties=(PropertyInfo(name="name", type=STRING),),
    ),
    SourceType(
        kind=TypeKind.CLASS, namespace="App", name="Address",
        properties=(PropertyInfo(name="street", type=STRING),),
    ),
    SourceType(
        kind=TypeKind.CLASS, namespace="App", name="Order",
        properties=(PropertyInfo(name="placed", type=DATE),),
    ),
    SourceType(
        kind=TypeKind.CLASS,
        namespace="App",
        name="Customer",
        base_type=ref("Person"),
        properties=(
            PropertyInfo(name="age", type=INT),
            PropertyInfo(name="nickname", type=STRING, nullable=True),
            PropertyInfo(name="address", type=ref("Address")),
            PropertyInfo(name="orders", type=generic_collection("List", ref("Order"))),
            PropertyInfo(name="tags", type=generic_collection("HashSet", STRING)),
            PropertyInfo(name="scores", type=generic_collection("Dictionary", STRING, INT, is_dictionary=True)),
        ),
    ),
    SourceType(
        kind=TypeKind.ENUM,
        namespace="App",
        name="Color",
        enum_members=(
            EnumMemberInfo(name="A", value=0),
            EnumMemberInfo(name="B", value=1),
            EnumMemberInfo(name="C", value=5),
        ),
    ),
    SourceType(
        kind=TypeKind.INTERFACE,
        namespace="App",
        name="Repository",
        methods=(MethodInfo(name="find", return_type=ref("Customer"), parameters=(ParameterInfo(name="id", type=INT),)),),
    ),
]


def render_views():
    options = GeneratorOptions(property_selectors=[optional_if_nullable])
    dto, edit = generate_views("app", StaticTypeSource({"app": TYPES}), options)
    return (
        TypeScriptPrinter(ambient=True).render(dto),
        KnockoutTypeScriptPrinter().render(edit, references=["app.d.ts"], declared=dto),
    )


class TestTypeScriptPrinter:
    """Tests for DTO declaration output."""

    def test_ambient_namespace_and_interfaces(self) -> None:
        """Test namespace and interface headers."""
        dto, _ = render_views()

        assert dto.startswith("// Generated by clientgen")
        assert "declare namespace App {" in dto
        assert "    export interface Customer extends App.Person {" in dto
        assert "    export interface Person {" in dto

    def test_member_types(self) -> None:
        """Test primitive, collection and dictionary mapping."""
        dto, _ = render_views()

        assert "        age: number;" in dto
        assert "        nickname?: string;" in dto
        assert "        address: App.Address;" in dto
        assert "        orders: App.Order[];" in dto
        assert "        tags: string[];" in dto
        assert "        scores: { [key: string]: number };" in dto
        assert "        placed: Date;" in dto

    def test_enum_initializers(self) -> None:
        """Test that only out-of-position values are printed."""
        dto, _ = render_views()

        assert "    export enum Color {\n        A,\n        B,\n        C = 5,\n    }" in dto

    def test_interface_methods(self) -> None:
        """Test capability classes in an ambient file."""
        dto, _ = render_views()

        assert "    export class Repository {" in dto
        assert "        find(id: number): App.Customer;" in dto

    def test_type_name_mapping(self) -> None:
        """Test framework type mapping."""
        printer = TypeScriptPrinter()
        ref_ = TypeReference

        assert printer.type_name(ref_(name="System.Boolean")) == "boolean"
        assert printer.type_name(ref_(name="System.Int64")) == "number"
        assert printer.type_name(ref_(name="System.Object")) == "any"
        assert printer.type_name(ref_(name="System.Nullable", arguments=(ref_(name="System.Decimal"),))) == "number"
        assert printer.type_name(ref_(name="Array", arguments=(ref_(name="App.Order"),))) == "App.Order[]"
        assert printer.type_name(ref_(name="App.Box", arguments=(ref_(name="System.String"),))) == "App.Box<string>"
        assert printer.type_name(ref_(name="Observable", arguments=(ref_(name="System.String"),))) == "string"
        assert printer.type_name(
            ref_(name="System.Collections.Generic.Dictionary", arguments=(ref_(name="System.Int32"), ref_(name="App.Order")))
        ) == "{ [key: number]: App.Order }"


class TestKnockoutTypeScriptPrinter:
    """Tests for Edit class output."""

    def test_reference_and_namespace(self) -> None:
        """Test the DTO file reference and the edit namespace."""
        _, edit = render_views()

        assert '/// <reference path="app.d.ts" />' in edit
        assert "namespace App.Edit {" in edit
        assert "declare namespace" not in edit
        assert "    export class Customer extends App.Edit.Person {" in edit

    def test_observable_fields(self) -> None:
        """Test Knockout field types."""
        _, edit = render_views()

        assert "        public age: KnockoutObservable<number>;" in edit
        assert "        public address: App.Edit.Address;" in edit
        assert "        public orders: KnockoutObservableArray<App.Edit.Order>;" in edit
        assert "        public tags: KnockoutObservableArray<string>;" in edit
        assert "        public scores: KnockoutObservable<{ [key: string]: number }>;" in edit

    def test_constructor(self) -> None:
        """Test guarded initializers and the base call."""
        _, edit = render_views()

        assert "        constructor(initialValue: App.Customer) {" in edit
        assert "            super(initialValue);" in edit
        assert "            this.age = ko.observable(initialValue && initialValue.age);" in edit
        assert "            this.address = new App.Edit.Address(initialValue && initialValue.address);" in edit
        assert (
            "            this.orders = ko.observableArray("
            "App.Edit.Order.createCollection(initialValue && initialValue.orders));"
        ) in edit
        assert "            this.tags = ko.observableArray(initialValue && initialValue.tags);" in edit

    def test_create_collection(self) -> None:
        """Test the static factory body."""
        _, edit = render_views()

        expected = "\n".join([
            "        public static createCollection(from: App.Order[]): App.Edit.Order[] {",
            "            const ret: App.Edit.Order[] = [];",
            "            if (from) {",
            "                for (const item of from) {",
            "                    ret.push(new App.Edit.Order(item));",
            "                }",
            "            }",
            "            return ret;",
            "        }",
        ])
        assert expected in edit

    def test_capability_class_is_declared(self) -> None:
        """Test that body-less classes are ambient in a .ts file."""
        _, edit = render_views()

        assert "    export declare class Repository {" in edit

    def test_skips_declarations_from_dto_file(self) -> None:
        """Test that enums are declared in the .d.ts file only."""
        dto, edit = render_views()

        assert "    export enum Color {" in dto
        assert "enum" not in edit
        assert "namespace App {" not in edit
        assert "namespace App.Edit {" in edit

    def test_renders_everything_without_declared_unit(self) -> None:
        """Test that an Edit unit rendered alone keeps its enums."""
        _, edit = generate_views("app", StaticTypeSource({"app": TYPES}), GeneratorOptions())

        assert "    export enum Color {" in KnockoutTypeScriptPrinter().render(edit)

    def test_generic_create_collection_has_own_type_parameters(self) -> None:
        """Test that a generic factory does not use its class's type parameters."""
        box = SourceType(
            kind=TypeKind.CLASS,
            namespace="App",
            name="Box`1",
            generic_parameters=("T",),
            properties=(PropertyInfo(name="value", type=SourceType(kind=TypeKind.GENERIC_PARAMETER, name="T")),),
        )

        lines = KnockoutTypeScriptPrinter().method(create_collection_method(TypeNameResolver(), box), 0)

        assert lines[0] == "public static createCollection<T>(from: App.Box<T>[]): App.BoxEdit<T>[] {"


class TestRenderJson:
    """Tests for JSON output."""

    def test_render_json(self) -> None:
        """Test that JSON output carries node tags."""
        options = GeneratorOptions()
        dto, _ = generate_views("app", StaticTypeSource({"app": TYPES}), options)

        text = render_json(dto)

        assert text.endswith("\n")
        assert '"node": "interface"' in text
