"""Type and property selectors.

A type selector is any callable ``SourceType -> bool``; a property selector is
any callable ``PropertyDescriptor -> ConversionDecision``. Selectors are pure
predicates over immutable descriptors, so they compose by plain reduction:

- a type is kept when there are no type selectors or any of them keeps it;
- a property's decision is the strictest vote (Required > Optional > Excluded),
  and Required when there are no property selectors at all.
"""
from fnmatch import fnmatchcase
from typing import Callable, Iterable, Sequence

from .models import ConversionDecision, PropertyDescriptor, SourceType

TypeSelector = Callable[[SourceType], bool]
PropertySelector = Callable[[PropertyDescriptor], ConversionDecision]


def should_keep_type(source_type: SourceType, selectors: Sequence[TypeSelector]) -> bool:
    """Decide whether a type participates in translation."""
    if not selectors:
        return True
    return any(selector(source_type) for selector in selectors)


def resolve_decision(
    descriptor: PropertyDescriptor,
    selectors: Sequence[PropertySelector],
) -> ConversionDecision:
    """Combine selector votes for a property, strictest wins."""
    if not selectors:
        return ConversionDecision.REQUIRED
    return max(ConversionDecision(selector(descriptor)) for selector in selectors)


# === Built-in policies ===

def keep_all_types(source_type: SourceType) -> bool:
    return True


def keep_all_properties(descriptor: PropertyDescriptor) -> ConversionDecision:
    return ConversionDecision.REQUIRED


def optional_if_nullable(descriptor: PropertyDescriptor) -> ConversionDecision:
    """Nullable properties are optional, everything else is required."""
    if descriptor.nullable:
        return ConversionDecision.OPTIONAL
    return ConversionDecision.REQUIRED


def keep_namespaces(prefixes: Iterable[str]) -> TypeSelector:
    """Keep types whose namespace equals or lies below one of ``prefixes``."""
    prefixes = tuple(prefixes)

    def selector(source_type: SourceType) -> bool:
        namespace = source_type.namespace or ""
        return any(namespace == p or namespace.startswith(p + ".") for p in prefixes)

    return selector


def match_properties(patterns: Iterable[str], decision: ConversionDecision) -> PropertySelector:
    """Vote ``decision`` for properties matching any glob, Excluded otherwise.

    Patterns are matched against both ``Type.property`` and the bare
    property name, e.g. ``Customer.*`` or ``*_id``.
    """
    patterns = tuple(patterns)

    def selector(descriptor: PropertyDescriptor) -> ConversionDecision:
        for pattern in patterns:
            if fnmatchcase(descriptor.qualified_name, pattern) or fnmatchcase(descriptor.name, pattern):
                return decision
        return ConversionDecision.EXCLUDED

    return selector


def property_policy(
    include: Iterable[str] = ("*",),
    optional: Iterable[str] = (),
    nullable_optional: bool = True,
) -> PropertySelector:
    """Single selector for the ``clientgen.json`` property rules.

    Included properties are Required unless they match an ``optional`` glob
    or are nullable (with ``nullable_optional``), in which case they are
    Optional. Everything else is Excluded.
    """
    included = match_properties(include, ConversionDecision.REQUIRED)
    optional_match = match_properties(optional, ConversionDecision.OPTIONAL)

    def selector(descriptor: PropertyDescriptor) -> ConversionDecision:
        if included(descriptor) == ConversionDecision.EXCLUDED:
            return ConversionDecision.EXCLUDED
        if optional_match(descriptor) == ConversionDecision.OPTIONAL:
            return ConversionDecision.OPTIONAL
        if nullable_optional and descriptor.nullable:
            return ConversionDecision.OPTIONAL
        return ConversionDecision.REQUIRED

    return selector
