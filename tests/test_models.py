"""Tests for source-type models and configuration records."""

import pytest
from pydantic import ValidationError
from clientgen.models import (
    ClientGenConfig,
    ConversionDecision,
    EnumMemberInfo,
    PropertyInfo,
    SourceType,
    TypeKind,
    describe_properties,
    strip_arity,
)


INT = SourceType(kind=TypeKind.PRIMITIVE, namespace="System", name="Int32")
STRING = SourceType(kind=TypeKind.CLASS, namespace="System", name="String")


def list_of(element: SourceType) -> SourceType:
    return SourceType(
        kind=TypeKind.CLASS,
        namespace="System.Collections.Generic",
        name="List`1",
        generic_arguments=(element,),
        is_enumerable=True,
    )


class TestStripArity:
    """Tests for generic arity suffix handling."""

    def test_strips_suffix(self) -> None:
        """Test that the backtick arity suffix is removed."""
        assert strip_arity("Box`1") == "Box"
        assert strip_arity("Pair`2") == "Pair"

    def test_plain_name_unchanged(self) -> None:
        """Test that names without a suffix are returned as-is."""
        assert strip_arity("Customer") == "Customer"


class TestSourceType:
    """Tests for SourceType derived properties."""

    def test_full_name(self) -> None:
        """Test namespace qualification."""
        assert INT.full_name == "System.Int32"
        assert SourceType(kind=TypeKind.CLASS, name="Loose").full_name == "Loose"

    def test_is_hashable_and_frozen(self) -> None:
        """Test that SourceType can key a dict and rejects mutation."""
        cache = {INT: "int"}
        assert cache[SourceType(kind=TypeKind.PRIMITIVE, namespace="System", name="Int32")] == "int"

        with pytest.raises(ValidationError):
            INT.name = "Int64"

    def test_generic_flags(self) -> None:
        """Test generic definition vs constructed generic type."""
        definition = SourceType(kind=TypeKind.CLASS, namespace="App", name="Box`1", generic_parameters=("T",))
        constructed = definition.model_copy(update={"generic_parameters": (), "generic_arguments": (INT,)})

        assert definition.is_generic
        assert definition.is_generic_definition
        assert constructed.is_generic
        assert not constructed.is_generic_definition
        assert not INT.is_generic

    def test_collection_element_for_list(self) -> None:
        """Test that a single-argument enumerable exposes its element."""
        ints = list_of(INT)

        assert ints.is_collection
        assert ints.collection_element == INT

    def test_collection_element_for_array(self) -> None:
        """Test that arrays expose their element type."""
        array = SourceType(kind=TypeKind.ARRAY, name="Int32[]", element_type=INT)

        assert array.is_collection
        assert array.collection_element == INT

    def test_string_is_not_a_collection(self) -> None:
        """Test that strings are scalars, not enumerables."""
        assert not STRING.is_collection
        assert STRING.collection_element is None

    def test_has_base_type_ignores_root_object(self) -> None:
        """Test that System.Object never counts as a base type."""
        root = SourceType(kind=TypeKind.CLASS, namespace="System", name="Object")
        person = SourceType(kind=TypeKind.CLASS, namespace="App", name="Person")

        assert not SourceType(kind=TypeKind.CLASS, name="A", base_type=root).has_base_type
        assert SourceType(kind=TypeKind.CLASS, name="B", base_type=person).has_base_type
        assert not SourceType(kind=TypeKind.CLASS, name="C").has_base_type

    def test_is_framework_case_insensitive_prefix(self) -> None:
        """Test framework namespace matching."""
        assert INT.is_framework(["system"])
        assert list_of(INT).is_framework(["System"])
        assert not SourceType(kind=TypeKind.CLASS, namespace="App", name="X").is_framework(["System"])

    def test_is_framework_matches_whole_segments(self) -> None:
        """Test that a namespace merely starting with a prefix is not framework."""
        for namespace in ("systemsettings", "Systems", "system_admin", "SystemX.Models"):
            assert not SourceType(kind=TypeKind.CLASS, namespace=namespace, name="X").is_framework(["System"])
        assert SourceType(kind=TypeKind.CLASS, namespace="System.IO", name="Stream").is_framework(["System"])

    def test_is_scalar(self) -> None:
        """Test scalar classification by kind and namespace."""
        color = SourceType(kind=TypeKind.ENUM, namespace="App", name="Color")
        param = SourceType(kind=TypeKind.GENERIC_PARAMETER, name="T")
        customer = SourceType(kind=TypeKind.CLASS, namespace="App", name="Customer")

        assert color.is_scalar(["System"])
        assert param.is_scalar(["System"])
        assert STRING.is_scalar(["System"])
        assert not customer.is_scalar(["System"])

    def test_json_round_trip(self) -> None:
        """Test that nested records survive JSON serialization."""
        color = SourceType(
            kind=TypeKind.ENUM,
            namespace="App",
            name="Color",
            enum_members=(EnumMemberInfo(name="Red", value=0), EnumMemberInfo(name="Blue", value=5)),
        )

        restored = SourceType.model_validate_json(color.model_dump_json())

        assert restored == color
        assert restored.kind == TypeKind.ENUM


class TestPropertyDescriptors:
    """Tests for describe_properties."""

    def test_descriptors_follow_declaration_order(self) -> None:
        """Test descriptor fields derived from the declaring type."""
        customer = SourceType(
            kind=TypeKind.CLASS,
            namespace="App",
            name="Customer",
            properties=(
                PropertyInfo(name="age", type=INT),
                PropertyInfo(name="tags", type=list_of(STRING), nullable=True, attributes=("JsonIgnore",)),
            ),
        )

        descriptors = describe_properties(customer)

        assert [d.name for d in descriptors] == ["age", "tags"]
        assert descriptors[0].is_primitive_or_framework
        assert not descriptors[0].is_collection
        assert descriptors[1].is_collection
        assert descriptors[1].nullable
        assert descriptors[1].attributes == ("JsonIgnore",)
        assert descriptors[1].declaring_type == customer

    def test_qualified_name_drops_arity(self) -> None:
        """Test the Type.property form used by pattern selectors."""
        box = SourceType(
            kind=TypeKind.CLASS,
            namespace="App",
            name="Box`1",
            generic_parameters=("T",),
            properties=(PropertyInfo(name="value", type=SourceType(kind=TypeKind.GENERIC_PARAMETER, name="T")),),
        )

        assert describe_properties(box)[0].qualified_name == "Box.value"

    def test_custom_framework_namespaces(self) -> None:
        """Test that framework prefixes are configurable."""
        instant = SourceType(kind=TypeKind.STRUCT, namespace="NodaTime", name="Instant")
        event = SourceType(
            kind=TypeKind.CLASS, namespace="App", name="Event",
            properties=(PropertyInfo(name="at", type=instant),),
        )

        assert not describe_properties(event)[0].is_primitive_or_framework
        assert describe_properties(event, ["System", "NodaTime"])[0].is_primitive_or_framework


class TestConversionDecision:
    """Tests for decision ordering."""

    def test_max_picks_strictest(self) -> None:
        """Test Required > Optional > Excluded."""
        assert max(ConversionDecision.EXCLUDED, ConversionDecision.OPTIONAL) == ConversionDecision.OPTIONAL
        assert max(ConversionDecision.OPTIONAL, ConversionDecision.REQUIRED) == ConversionDecision.REQUIRED


class TestClientGenConfig:
    """Tests for ClientGenConfig model."""

    def test_defaults(self) -> None:
        """Test ClientGenConfig default values."""
        config = ClientGenConfig()

        assert config.framework_namespaces == ["System"]
        assert config.edit_namespace == "Edit"
        assert config.edit_marker == "Edit"
        assert config.include_properties == ["*"]
        assert config.optional_properties == []
        assert config.namespaces == []
        assert config.nullable_optional is True
        assert config.command_logging is True
        assert config.output_dir == "generated"

    def test_defaults_are_not_shared(self) -> None:
        """Test that list defaults are independent between instances."""
        a = ClientGenConfig()
        b = ClientGenConfig()
        a.framework_namespaces.append("NodaTime")

        assert b.framework_namespaces == ["System"]
