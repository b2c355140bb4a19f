"""Edit-class constructor and collection factory synthesis."""
from typing import Sequence

from ..graph import (
    ArgumentRef,
    ArrayLiteral,
    Assign,
    Constructor,
    Expression,
    ExpressionStatement,
    FieldRef,
    ForEach,
    If,
    Invoke,
    LogicalAnd,
    Method,
    New,
    Parameter,
    Return,
    ThisRef,
    TypeReference,
    TypeRefExpr,
    VariableDeclaration,
    VariableRef,
    Wrap,
    array_of,
)
from ..models import PropertyInfo, SourceType
from .names import TypeNameResolver, ValueShape

INITIAL_VALUE = "initialValue"
CREATE_COLLECTION = "createCollection"
COLLECTION_INTERFACE = "System.Collections.Generic.ICollection"


def guard_expression(initial_value: Expression, property_name: str) -> LogicalAnd:
    """Build ``initialValue && initialValue.<property>``.

    The guard never throws on an absent ``initialValue``. It also treats a
    present but falsy property value (0, "", false) as absent.
    """
    return LogicalAnd(left=initial_value, right=FieldRef(target=initial_value, name=property_name))


class ConstructorSynthesizer:
    """Builds the constructor that seeds an Edit class from a DTO-shaped value."""

    def __init__(self, resolver: TypeNameResolver):
        self.resolver = resolver

    def synthesize(
        self,
        source_type: SourceType,
        properties: Sequence[PropertyInfo],
        forward_to_base: bool,
    ) -> Constructor:
        """Create the constructor for ``source_type``'s Edit class.

        Args:
            source_type: Type being translated.
            properties: Kept properties, in declaration order.
            forward_to_base: Pass ``initialValue`` on to the base constructor.

        Returns:
            Constructor with one assignment per property.
        """
        initial_value = ArgumentRef(name=INITIAL_VALUE)
        return Constructor(
            parameters=(Parameter(name=INITIAL_VALUE, type=self.resolver.readonly_reference(source_type)),),
            base_arguments=(initial_value,) if forward_to_base else (),
            body=tuple(
                Assign(
                    target=FieldRef(target=ThisRef(), name=prop.name),
                    value=self.initializer(initial_value, prop),
                )
                for prop in properties
            ),
        )

    def initializer(self, initial_value: Expression, prop: PropertyInfo) -> Expression:
        """Expression assigned to ``this.<property>``."""
        guard = guard_expression(initial_value, prop.name)
        shape = self.resolver.classify_value(prop.type)

        if shape == ValueShape.AGGREGATE:
            return New(type=self.resolver.edit_reference(prop.type), arguments=(guard,))

        if shape == ValueShape.AGGREGATE_COLLECTION:
            element = self.resolver.edit_reference(prop.type.collection_element)
            factory = Invoke(target=TypeRefExpr(type=element), method=CREATE_COLLECTION, arguments=(guard,))
            return Wrap(collection=True, value=factory)

        if shape in (ValueShape.SCALAR_COLLECTION, ValueShape.UNRESOLVED_COLLECTION):
            return Wrap(collection=True, value=guard)

        # Scalars and dictionaries
        return Wrap(value=guard)


def create_collection_method(resolver: TypeNameResolver, source_type: SourceType) -> Method:
    """Static ``createCollection(from)`` mapping each DTO element to a new Edit instance.

    Static members cannot see the type parameters of their class, so a generic
    type gives the factory its own parameters of the same names.
    """
    readonly = resolver.readonly_reference(source_type)
    edit = resolver.edit_reference(source_type)
    source = ArgumentRef(name="from")
    result = VariableRef(name="ret")

    push = ExpressionStatement(
        expression=Invoke(
            target=result,
            method="push",
            arguments=(New(type=edit, arguments=(VariableRef(name="item"),)),),
        )
    )
    return Method(
        name=CREATE_COLLECTION,
        type_parameters=source_type.generic_parameters if source_type.is_generic_definition else (),
        return_type=array_of(edit),
        parameters=(Parameter(name="from", type=TypeReference(name=COLLECTION_INTERFACE, arguments=(readonly,))),),
        body=(
            VariableDeclaration(name="ret", type=array_of(edit), value=ArrayLiteral(element_type=edit)),
            If(condition=source, body=(ForEach(variable="item", iterable=source, body=(push,)),)),
            Return(value=result),
        ),
        is_static=True,
    )
