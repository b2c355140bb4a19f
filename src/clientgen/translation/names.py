"""Type name resolution for the Readonly (DTO) and Edit views.

Naming rules, in priority order:

1. Primitive, enum, generic-parameter and framework types keep their
   qualified source name in both views.
2. Generic user types drop the arity suffix and re-append their parameter
   list; the Edit name inserts the edit marker before it (``Box<T>`` ->
   ``BoxEdit<T>``) and keeps the namespace.
3. Other user types keep their simple name; the Edit name moves them into
   the edit sub-namespace (``App.Customer`` -> ``App.Edit.Customer``).

Rule 2 and rule 3 differ on purpose: generated files reference each other by
these exact spellings.
"""
from enum import Enum
from typing import Optional

from ..graph import OBSERVABLE, OBSERVABLE_ARRAY, TypeReference, array_of
from ..logging import get_logger
from ..models import DEFAULT_FRAMEWORK_NAMESPACES, SourceType, TypeKind, TypeNamePair, strip_arity

logger = get_logger("names")


class ValueShape(str, Enum):
    """How a property value is carried into an Edit class."""

    SCALAR = "scalar"  # ko.observable(value)
    SCALAR_COLLECTION = "scalar_collection"  # ko.observableArray(value)
    AGGREGATE_COLLECTION = "aggregate_collection"  # ko.observableArray(EditT.createCollection(value))
    UNRESOLVED_COLLECTION = "unresolved_collection"  # element type cannot be named
    DICTIONARY = "dictionary"  # opaque scalar, no key/value wrapping
    AGGREGATE = "aggregate"  # new EditT(value)


def qualify(namespace: Optional[str], name: str) -> str:
    return f"{namespace}.{name}" if namespace else name


class TypeNameResolver:
    """Compute and memoize the two names of every source type.

    One resolver should serve both the DTO and the Edit run so that
    cross-references agree; the rules are pure, so separate resolvers with
    the same settings also agree.
    """

    def __init__(
        self,
        framework_namespaces: Optional[list[str]] = None,
        edit_namespace: str = "Edit",
        edit_marker: str = "Edit",
    ):
        self.framework_namespaces = list(
            framework_namespaces if framework_namespaces is not None else DEFAULT_FRAMEWORK_NAMESPACES
        )
        self.edit_namespace = edit_namespace
        self.edit_marker = edit_marker
        self._names: dict[SourceType, TypeNamePair] = {}

    def is_scalar(self, source_type: SourceType) -> bool:
        return source_type.is_scalar(self.framework_namespaces)

    def edit_namespace_for(self, namespace: Optional[str]) -> str:
        """Namespace that holds the Edit counterparts of ``namespace``'s types."""
        return qualify(namespace, self.edit_namespace)

    def resolve(self, source_type: SourceType) -> TypeNamePair:
        """Return the Readonly/Edit name pair for a type (memoized)."""
        pair = self._names.get(source_type)
        if pair is None:
            pair = TypeNamePair(
                readonly_name=str(self.readonly_reference(source_type)),
                edit_name=str(self.edit_reference(source_type)),
            )
            self._names[source_type] = pair
        return pair

    def readonly_reference(self, source_type: SourceType) -> TypeReference:
        """Reference to a type as the DTO view spells it."""
        if source_type.kind == TypeKind.GENERIC_PARAMETER:
            return TypeReference(name=source_type.name)
        if source_type.kind == TypeKind.ARRAY and source_type.element_type is not None:
            return array_of(self.readonly_reference(source_type.element_type))

        if source_type.generic_arguments:
            arguments = tuple(self.readonly_reference(a) for a in source_type.generic_arguments)
        else:
            arguments = tuple(TypeReference(name=p) for p in source_type.generic_parameters)
        return TypeReference(name=qualify(source_type.namespace, strip_arity(source_type.name)), arguments=arguments)

    def edit_reference(self, source_type: SourceType) -> TypeReference:
        """Reference to a type as the Edit view spells it (no reactive wrapper)."""
        if source_type.kind == TypeKind.ARRAY and source_type.element_type is not None:
            return array_of(self.edit_reference(source_type.element_type))
        if self.is_scalar(source_type):
            return self.readonly_reference(source_type)

        if source_type.is_generic:
            if source_type.generic_arguments:
                arguments = tuple(self.edit_reference(a) for a in source_type.generic_arguments)
            else:
                arguments = tuple(TypeReference(name=p) for p in source_type.generic_parameters)
            name = strip_arity(source_type.name) + self.edit_marker
            return TypeReference(name=qualify(source_type.namespace, name), arguments=arguments)

        return TypeReference(name=qualify(self.edit_namespace_for(source_type.namespace), source_type.name))

    def classify_value(self, value_type: SourceType) -> ValueShape:
        """Decide how a property of ``value_type`` is carried into an Edit class."""
        if value_type.is_dictionary and len(value_type.generic_arguments) == 2:
            return ValueShape.DICTIONARY

        if value_type.is_collection:
            element = value_type.collection_element
            if element is None or element.kind == TypeKind.GENERIC_PARAMETER:
                logger.debug("Element type of %s cannot be named; wrapping unresolved", value_type.full_name)
                return ValueShape.UNRESOLVED_COLLECTION
            if self.is_scalar(element) or element.is_collection:
                return ValueShape.SCALAR_COLLECTION
            return ValueShape.AGGREGATE_COLLECTION

        if self.is_scalar(value_type):
            return ValueShape.SCALAR
        return ValueShape.AGGREGATE

    def field_reference(self, value_type: SourceType) -> TypeReference:
        """Type of the public Edit-class field holding a ``value_type`` property."""
        shape = self.classify_value(value_type)
        if shape in (ValueShape.SCALAR_COLLECTION, ValueShape.AGGREGATE_COLLECTION):
            element = value_type.collection_element
            return TypeReference(name=OBSERVABLE_ARRAY, arguments=(self.edit_reference(element),))
        if shape == ValueShape.AGGREGATE:
            return self.edit_reference(value_type)
        return TypeReference(name=OBSERVABLE, arguments=(self.readonly_reference(value_type),))
