"""Declaration synthesis: one source type in, one declaration out."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from ..errors import UnsupportedTypeKindError
from ..graph import (
    ClassDeclaration,
    Constant,
    Declaration,
    EnumDeclaration,
    Field,
    InterfaceDeclaration,
    Member,
    Method,
    Parameter,
    TypeReference,
)
from ..logging import get_logger
from ..models import ConversionDecision, PropertyInfo, SourceType, TypeKind, describe_properties
from ..selectors import PropertySelector, resolve_decision
from .constructor import ConstructorSynthesizer, create_collection_method
from .names import TypeNameResolver, ValueShape

logger = get_logger("declarations")

OPTIONAL_MARKER = "?"


class View(str, Enum):
    """Which declaration graph is being produced."""

    DTO = "dto"
    EDIT = "edit"


@dataclass
class TranslationContext:
    """Per-run facts shared by every declaration of one graph."""

    resolver: TypeNameResolver
    view: View
    property_selectors: Sequence[PropertySelector] = ()
    included_types: frozenset[str] = frozenset()  # definition keys of the run's types
    collection_elements: frozenset[str] = frozenset()  # definition keys used as collection elements
    _kept: dict[SourceType, list[tuple[PropertyInfo, ConversionDecision]]] = field(default_factory=dict)

    def kept_properties(self, source_type: SourceType) -> list[tuple[PropertyInfo, ConversionDecision]]:
        """Properties that survive the selectors, with their decisions."""
        kept = self._kept.get(source_type)
        if kept is None:
            descriptors = describe_properties(source_type, self.resolver.framework_namespaces)
            kept = []
            for prop, descriptor in zip(source_type.properties, descriptors):
                decision = resolve_decision(descriptor, self.property_selectors)
                if decision != ConversionDecision.EXCLUDED:
                    kept.append((prop, decision))
            self._kept[source_type] = kept
        return kept


def build_context(
    types: Iterable[SourceType],
    resolver: TypeNameResolver,
    view: View,
    property_selectors: Sequence[PropertySelector] = (),
) -> TranslationContext:
    """Collect the run-wide facts needed before any declaration is built."""
    types = list(types)
    context = TranslationContext(
        resolver=resolver,
        view=view,
        property_selectors=tuple(property_selectors),
        included_types=frozenset(t.definition_key for t in types),
    )

    elements = set()
    for source_type in types:
        if source_type.kind not in (TypeKind.CLASS, TypeKind.STRUCT):
            continue
        for prop, _ in context.kept_properties(source_type):
            if resolver.classify_value(prop.type) == ValueShape.AGGREGATE_COLLECTION:
                elements.add(prop.type.collection_element.definition_key)
    context.collection_elements = frozenset(elements)
    return context


class DeclarationSynthesizer:
    """Turns source types into DTO interfaces or Edit classes."""

    def __init__(self, context: TranslationContext):
        self.context = context
        self.resolver = context.resolver
        self.constructors = ConstructorSynthesizer(context.resolver)

    def synthesize(self, source_type: SourceType) -> tuple[str, Declaration]:
        """Create the declaration for a type.

        Returns:
            Tuple of (namespace the declaration belongs to, declaration).

        Raises:
            UnsupportedTypeKindError: If the type is not a class, struct, enum or interface.
        """
        kind = source_type.kind
        if kind in (TypeKind.CLASS, TypeKind.STRUCT):
            if self.context.view == View.EDIT:
                return self.edit_class(source_type)
            return self.dto_interface(source_type)
        if kind == TypeKind.ENUM:
            return self.enum(source_type)
        if kind == TypeKind.INTERFACE:
            return self.capability_class(source_type)
        raise UnsupportedTypeKindError(source_type.full_name, kind.value)

    # --- naming ---

    def own_reference(self, source_type: SourceType) -> TypeReference:
        if self.context.view == View.EDIT:
            return self.resolver.edit_reference(source_type)
        return self.resolver.readonly_reference(source_type)

    def base_reference(self, source_type: SourceType) -> Optional[TypeReference]:
        """Base type link, only when the base is translated in the same run."""
        if not source_type.has_base_type:
            return None
        base = source_type.base_type
        if base.definition_key not in self.context.included_types:
            logger.debug("Base type %s of %s is not part of this run; omitting link",
                         base.full_name, source_type.full_name)
            return None
        return self.own_reference(base)

    @staticmethod
    def placement(reference: TypeReference) -> tuple[str, str, tuple[str, ...]]:
        """Split a reference into (namespace, declared name, type parameters)."""
        return (
            reference.namespace or "",
            reference.simple_name,
            tuple(str(argument) for argument in reference.arguments),
        )

    # --- per-kind declarations ---

    def dto_interface(self, source_type: SourceType) -> tuple[str, InterfaceDeclaration]:
        namespace, name, type_parameters = self.placement(self.resolver.readonly_reference(source_type))

        members: list[Member] = [
            Field(name=f.name, type=self.resolver.readonly_reference(f.type))
            for f in source_type.fields
        ]
        for prop, decision in self.context.kept_properties(source_type):
            marker = OPTIONAL_MARKER if decision == ConversionDecision.OPTIONAL else ""
            members.append(Field(name=f"{prop.name}{marker}", type=self.resolver.readonly_reference(prop.type)))

        return namespace, InterfaceDeclaration(
            name=name,
            type_parameters=type_parameters,
            base_type=self.base_reference(source_type),
            members=tuple(members),
        )

    def edit_class(self, source_type: SourceType) -> tuple[str, ClassDeclaration]:
        namespace, name, type_parameters = self.placement(self.resolver.edit_reference(source_type))
        base_type = self.base_reference(source_type)
        properties = [prop for prop, _ in self.context.kept_properties(source_type)]

        members: list[Member] = [
            Field(name=prop.name, type=self.resolver.field_reference(prop.type))
            for prop in properties
        ]
        members.append(self.constructors.synthesize(source_type, properties, forward_to_base=base_type is not None))
        if source_type.definition_key in self.context.collection_elements:
            members.append(create_collection_method(self.resolver, source_type))

        return namespace, ClassDeclaration(
            name=name,
            type_parameters=type_parameters,
            base_type=base_type,
            members=tuple(members),
        )

    def enum(self, source_type: SourceType) -> tuple[str, EnumDeclaration]:
        """Enum constants keep an explicit value only where it differs from their position."""
        namespace, name, _ = self.placement(self.resolver.readonly_reference(source_type))
        members = tuple(
            Field(name=member.name, init=Constant(value=member.value) if member.value != index else None)
            for index, member in enumerate(source_type.enum_members)
        )
        return namespace, EnumDeclaration(name=name, members=members)

    def capability_class(self, source_type: SourceType) -> tuple[str, ClassDeclaration]:
        """Interfaces become classes carrying their method signatures only."""
        namespace, name, type_parameters = self.placement(self.own_reference(source_type))
        methods = tuple(
            Method(
                name=method.name,
                return_type=self.resolver.readonly_reference(method.return_type) if method.return_type else None,
                parameters=tuple(
                    Parameter(name=p.name, type=self.resolver.readonly_reference(p.type))
                    for p in method.parameters
                ),
            )
            for method in source_type.methods
        )
        return namespace, ClassDeclaration(
            name=name,
            type_parameters=type_parameters,
            base_type=self.base_reference(source_type),
            members=methods,
        )
