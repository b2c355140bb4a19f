"""Pydantic models for source types and clientgen configuration."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum, IntEnum
import re

# Namespaces treated as framework/system types unless configured otherwise
DEFAULT_FRAMEWORK_NAMESPACES = ["System"]

# Root of every class hierarchy; never emitted as a base type
ROOT_OBJECT = "System.Object"

_ARITY_SUFFIX = re.compile(r"`\d+$")


def strip_arity(name: str) -> str:
    """Strip a generic arity suffix (``Box`1`` -> ``Box``)."""
    return _ARITY_SUFFIX.sub("", name)


# === Source Types ===

class TypeKind(str, Enum):
    """Kind of a reflectable source type."""

    CLASS = "class"
    STRUCT = "struct"
    ENUM = "enum"
    INTERFACE = "interface"
    PRIMITIVE = "primitive"
    GENERIC_PARAMETER = "generic_parameter"
    ARRAY = "array"
    DELEGATE = "delegate"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ParameterInfo(_Frozen):
    """Parameter of a method signature."""

    name: str
    type: "SourceType"


class MethodInfo(_Frozen):
    """Public instance method declared on a type."""

    name: str
    return_type: Optional["SourceType"] = None  # None for void
    parameters: tuple[ParameterInfo, ...] = ()


class PropertyInfo(_Frozen):
    """Public instance property (or field) declared on a type."""

    name: str
    type: "SourceType"
    nullable: bool = False
    attributes: tuple[str, ...] = ()


class EnumMemberInfo(_Frozen):
    """A defined enum constant and its underlying integer value."""

    name: str
    value: int


class SourceType(_Frozen):
    """Reflectable type handed over by a type source.

    The same model doubles as a type reference: a property's value type is a
    SourceType that usually carries no members of its own.
    """

    kind: TypeKind
    name: str
    namespace: Optional[str] = None
    base_type: Optional["SourceType"] = None
    generic_parameters: tuple[str, ...] = ()  # e.g. ("T",) for Box`1
    generic_arguments: tuple["SourceType", ...] = ()  # e.g. (Int32,) for List`1[Int32]
    element_type: Optional["SourceType"] = None  # arrays only
    is_enumerable: bool = False
    is_dictionary: bool = False
    properties: tuple[PropertyInfo, ...] = ()
    fields: tuple[PropertyInfo, ...] = ()
    methods: tuple[MethodInfo, ...] = ()
    enum_members: tuple[EnumMemberInfo, ...] = ()
    attributes: tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        """Namespace-qualified name, arity suffix included."""
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def definition_key(self) -> str:
        """Identity of the type definition, ignoring generic arguments."""
        return self.full_name

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_parameters or self.generic_arguments)

    @property
    def is_generic_definition(self) -> bool:
        return bool(self.generic_parameters) and not self.generic_arguments

    @property
    def is_collection(self) -> bool:
        """True for arrays and enumerable types (strings are never enumerable here)."""
        return self.kind == TypeKind.ARRAY or self.is_enumerable

    @property
    def collection_element(self) -> Optional["SourceType"]:
        """Element type of an array or single-argument enumerable, if any."""
        if self.kind == TypeKind.ARRAY:
            return self.element_type
        if self.is_enumerable and len(self.generic_arguments) == 1:
            return self.generic_arguments[0]
        return None

    @property
    def has_base_type(self) -> bool:
        """True when the type derives from something other than the root object."""
        return self.base_type is not None and self.base_type.full_name != ROOT_OBJECT

    def is_framework(self, framework_namespaces: list[str]) -> bool:
        """Check whether the type lives in (or under) a framework namespace.

        Matching is case-insensitive and on whole dotted segments: ``System``
        covers ``System.Collections`` but not ``systemsettings``.
        """
        if not self.namespace:
            return False
        namespace = self.namespace.lower()
        return any(
            namespace == prefix.lower() or namespace.startswith(prefix.lower() + ".")
            for prefix in framework_namespaces
        )

    def is_scalar(self, framework_namespaces: list[str]) -> bool:
        """Primitive, enum, generic parameter or framework type."""
        if self.kind in (TypeKind.PRIMITIVE, TypeKind.ENUM, TypeKind.GENERIC_PARAMETER):
            return True
        return self.is_framework(framework_namespaces)


ParameterInfo.model_rebuild()
MethodInfo.model_rebuild()
PropertyInfo.model_rebuild()
SourceType.model_rebuild()


# === Translation Records ===

class ConversionDecision(IntEnum):
    """Selector verdict for a property. Ordered so that max() picks the strictest."""

    EXCLUDED = 0
    OPTIONAL = 1
    REQUIRED = 2


class PropertyDescriptor(_Frozen):
    """Immutable view of a property handed to property selectors."""

    name: str
    declaring_type: SourceType
    value_type: SourceType
    is_collection: bool
    is_primitive_or_framework: bool
    nullable: bool = False
    attributes: tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        """``Type.property`` form used by pattern selectors."""
        return f"{strip_arity(self.declaring_type.name)}.{self.name}"


def describe_properties(
    source_type: SourceType,
    framework_namespaces: Optional[list[str]] = None,
) -> list[PropertyDescriptor]:
    """Build descriptors for the declared instance properties of a type.

    Args:
        source_type: Type whose properties to describe.
        framework_namespaces: Namespace prefixes treated as framework types.

    Returns:
        One descriptor per declared property, in declaration order.
    """
    prefixes = framework_namespaces if framework_namespaces is not None else DEFAULT_FRAMEWORK_NAMESPACES
    return [
        PropertyDescriptor(
            name=prop.name,
            declaring_type=source_type,
            value_type=prop.type,
            is_collection=prop.type.is_collection,
            is_primitive_or_framework=prop.type.is_scalar(prefixes),
            nullable=prop.nullable,
            attributes=prop.attributes,
        )
        for prop in source_type.properties
    ]


class TypeNamePair(_Frozen):
    """The two spellings of a type's name."""

    readonly_name: str
    edit_name: str


# === Config ===

class ClientGenConfig(BaseModel):
    """Configuration for clientgen (clientgen.json)."""

    version: str = "0.1.0"
    command_logging: bool = True  # Log command invocations to .clientgen-logs/
    framework_namespaces: list[str] = Field(default_factory=lambda: list(DEFAULT_FRAMEWORK_NAMESPACES))
    edit_namespace: str = "Edit"  # Sub-namespace appended for Edit types
    edit_marker: str = "Edit"  # Suffix inserted into generic Edit type names
    namespaces: list[str] = Field(default_factory=list)  # Empty keeps every type
    include_properties: list[str] = Field(default_factory=lambda: ["*"])
    optional_properties: list[str] = Field(default_factory=list)
    nullable_optional: bool = True  # Nullable properties become optional
    output_dir: str = "generated"
