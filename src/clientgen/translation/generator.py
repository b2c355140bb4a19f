"""Client generation: type source -> selectors -> declaration graph."""
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..errors import InvalidArgumentError
from ..graph import CompileUnit, Declaration, Namespace
from ..logging import get_logger
from ..models import DEFAULT_FRAMEWORK_NAMESPACES, ClientGenConfig, SourceType
from ..selectors import (
    PropertySelector,
    TypeSelector,
    keep_namespaces,
    property_policy,
    should_keep_type,
)
from ..sources import TypeSource
from .declarations import DeclarationSynthesizer, View, build_context
from .names import TypeNameResolver

logger = get_logger("generator")


@dataclass
class GeneratorOptions:
    """Selectors and naming settings for a translation run."""

    type_selectors: list[TypeSelector] = field(default_factory=list)
    property_selectors: list[PropertySelector] = field(default_factory=list)
    framework_namespaces: list[str] = field(default_factory=lambda: list(DEFAULT_FRAMEWORK_NAMESPACES))
    edit_namespace: str = "Edit"
    edit_marker: str = "Edit"

    @classmethod
    def from_config(cls, config: ClientGenConfig) -> "GeneratorOptions":
        """Build options from clientgen.json settings."""
        type_selectors: list[TypeSelector] = []
        if config.namespaces:
            type_selectors.append(keep_namespaces(config.namespaces))
        return cls(
            type_selectors=type_selectors,
            property_selectors=[
                property_policy(
                    include=config.include_properties,
                    optional=config.optional_properties,
                    nullable_optional=config.nullable_optional,
                )
            ],
            framework_namespaces=list(config.framework_namespaces),
            edit_namespace=config.edit_namespace,
            edit_marker=config.edit_marker,
        )

    def create_resolver(self) -> TypeNameResolver:
        return TypeNameResolver(
            framework_namespaces=self.framework_namespaces,
            edit_namespace=self.edit_namespace,
            edit_marker=self.edit_marker,
        )


class ClientGenerator:
    """Generates the declaration graph of one view for a module's types.

    A generator holds no state between runs apart from the memoized name
    resolver, whose answers never change for a given type.
    """

    def __init__(
        self,
        type_source: TypeSource,
        options: GeneratorOptions,
        view: View = View.DTO,
        resolver: Optional[TypeNameResolver] = None,
    ):
        if type_source is None:
            raise InvalidArgumentError("type_source")
        if options is None:
            raise InvalidArgumentError("options")
        self.type_source = type_source
        self.options = options
        self.view = View(view)
        self.resolver = resolver or options.create_resolver()

    def generate_client(self, module: Any, initial_unit: Optional[CompileUnit] = None) -> CompileUnit:
        """Generate the declaration graph for ``module``.

        Args:
            module: Module handle understood by the type source.
            initial_unit: If set, the generated namespaces are appended after
                its namespaces in the returned unit; it is not modified.

        Returns:
            A new CompileUnit.

        Raises:
            InvalidArgumentError: If ``module`` is None.
            UnsupportedTypeKindError: If a selected type cannot be declared.
        """
        if module is None:
            raise InvalidArgumentError("module")

        types = self.load_types(module)
        return self.create_client(types, initial_unit or CompileUnit())

    def load_types(self, module: Any) -> list[SourceType]:
        """Fetch the module's types and keep those the type selectors accept."""
        selectors = self.options.type_selectors
        types = self.type_source.fetch_types(module, selectors)
        return [t for t in types if should_keep_type(t, selectors)]

    def create_client(self, types: Sequence[SourceType], unit: CompileUnit) -> CompileUnit:
        """Build declarations grouped by namespace in first-seen order."""
        context = build_context(types, self.resolver, self.view, self.options.property_selectors)
        synthesizer = DeclarationSynthesizer(context)

        grouped: dict[str, list[Declaration]] = {}
        for source_type in types:
            namespace, declaration = synthesizer.synthesize(source_type)
            grouped.setdefault(namespace, []).append(declaration)

        logger.debug("Generated %d %s declarations in %d namespaces",
                     len(types), self.view.value, len(grouped))

        namespaces = tuple(
            Namespace(name=name, declarations=tuple(declarations))
            for name, declarations in grouped.items()
        )
        return CompileUnit(namespaces=unit.namespaces + namespaces)


def generate_client(
    module: Any,
    type_source: TypeSource,
    options: GeneratorOptions,
    view: View = View.DTO,
    initial_unit: Optional[CompileUnit] = None,
) -> CompileUnit:
    """Generate one view's declaration graph (function form of ClientGenerator)."""
    return ClientGenerator(type_source, options, view).generate_client(module, initial_unit)


def generate_views(
    module: Any,
    type_source: TypeSource,
    options: GeneratorOptions,
) -> tuple[CompileUnit, CompileUnit]:
    """Generate the DTO and Edit graphs with one shared name resolver.

    Returns:
        Tuple of (dto_unit, edit_unit).
    """
    if options is None:
        raise InvalidArgumentError("options")
    resolver = options.create_resolver()
    dto = ClientGenerator(type_source, options, View.DTO, resolver).generate_client(module)
    edit = ClientGenerator(type_source, options, View.EDIT, resolver).generate_client(module)
    return dto, edit
