"""Reflection-based type source for Python modules.

Maps the classes a module defines onto SourceType records:

- ``Enum`` subclasses -> enum
- ``typing.Protocol`` classes -> interface (method signatures only)
- frozen dataclasses -> struct
- other classes (dataclasses, pydantic models, annotated classes) -> class

Annotations are expressed in the ``System`` vocabulary the translator and
printers understand, e.g. ``int`` -> ``System.Int64``, ``list[X]`` ->
``System.Collections.Generic.List`1[X]``, ``Optional[X]`` -> nullable ``X``.
"""
import dataclasses
import datetime
import decimal
import enum
import importlib
import importlib.util
import inspect
import sys
import types
import typing
import uuid
from collections import abc
from pathlib import Path
from typing import Any, Optional, Sequence

from ..errors import TypeSourceError
from ..models import (
    EnumMemberInfo,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    SourceType,
    TypeKind,
)
from ..selectors import TypeSelector, should_keep_type

SYSTEM = "System"
GENERIC_COLLECTIONS = "System.Collections.Generic"

# Package that modules loaded from .py paths are registered under
LOADED_PACKAGE = "clientgen_source"

# Modules whose classes are never emitted as base types
TRIVIAL_BASE_MODULES = ("builtins", "typing", "typing_extensions", "abc", "enum", "dataclasses", "pydantic")


def namespace_of(cls: type) -> str:
    """Module path of a class, without the private prefix of path-loaded modules."""
    module = cls.__module__
    if module.startswith(LOADED_PACKAGE + "."):
        return module[len(LOADED_PACKAGE) + 1:]
    return module


def _system(name: str, kind: TypeKind = TypeKind.STRUCT) -> SourceType:
    return SourceType(kind=kind, namespace=SYSTEM, name=name)


OBJECT = _system("Object", TypeKind.CLASS)
STRING = _system("String", TypeKind.CLASS)

SCALARS: dict[Any, SourceType] = {
    bool: _system("Boolean", TypeKind.PRIMITIVE),
    int: _system("Int64", TypeKind.PRIMITIVE),
    float: _system("Double", TypeKind.PRIMITIVE),
    str: STRING,
    bytes: STRING,  # serialized as base64 text
    datetime.datetime: _system("DateTime"),
    datetime.date: _system("DateTime"),
    datetime.time: _system("TimeSpan"),
    datetime.timedelta: _system("TimeSpan"),
    decimal.Decimal: _system("Decimal"),
    uuid.UUID: _system("Guid"),
    object: OBJECT,
    typing.Any: OBJECT,
}

SEQUENCE_ORIGINS = (list, abc.Sequence, abc.MutableSequence, abc.Iterable, abc.Collection)
SET_ORIGINS = (set, frozenset, abc.Set, abc.MutableSet)
MAPPING_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def generic_collection(name: str, arguments: tuple[SourceType, ...], is_dictionary: bool = False) -> SourceType:
    return SourceType(
        kind=TypeKind.CLASS,
        namespace=GENERIC_COLLECTIONS,
        name=f"{name}`{len(arguments)}",
        generic_arguments=arguments,
        is_enumerable=True,
        is_dictionary=is_dictionary,
    )


def load_module(handle: Any) -> types.ModuleType:
    """Resolve a module object, dotted module name, or .py path to a module."""
    if isinstance(handle, types.ModuleType):
        return handle

    path = Path(handle)
    if path.suffix == ".py":
        if not path.is_file():
            raise TypeSourceError(f"Module file not found: {path}")
        spec = importlib.util.spec_from_file_location(f"{LOADED_PACKAGE}.{path.stem}", path)
        if spec is None or spec.loader is None:
            raise TypeSourceError(f"Cannot load module from {path}")
        module = importlib.util.module_from_spec(spec)
        # Registered first so dataclasses and get_type_hints can find the module
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            del sys.modules[spec.name]
            raise TypeSourceError(f"Failed to import {path}: {e}") from e
        return module

    try:
        return importlib.import_module(str(handle))
    except ImportError as e:
        raise TypeSourceError(f"Failed to import {handle}: {e}") from e


class PythonTypeSource:
    """Type source reflecting over the classes defined in a Python module."""

    def fetch_types(self, module: Any, type_selectors: Sequence[TypeSelector] = ()) -> list[SourceType]:
        loaded = load_module(module)
        result = []
        for cls in self.declared_classes(loaded):
            source_type = self.describe(cls)
            if should_keep_type(source_type, type_selectors):
                result.append(source_type)
        return result

    @staticmethod
    def declared_classes(module: types.ModuleType) -> list[type]:
        """Classes defined by ``module`` itself, in definition order."""
        seen: set[int] = set()
        classes = []
        for obj in vars(module).values():
            if not inspect.isclass(obj) or obj.__module__ != module.__name__:
                continue
            if id(obj) in seen:
                continue
            seen.add(id(obj))
            classes.append(obj)
        return classes

    # --- declarations ---

    def describe(self, cls: type) -> SourceType:
        """Full SourceType for a class, members included."""
        reference = self.reference(cls)
        kind = self.kind_of(cls)

        if kind == TypeKind.ENUM:
            return reference.model_copy(update={"kind": kind, "enum_members": self.enum_members(cls)})

        update: dict[str, Any] = {"kind": kind, "base_type": self.base_type(cls)}
        if kind == TypeKind.INTERFACE:
            update["methods"] = self.methods(cls)
        else:
            update["properties"] = self.properties(cls)
        return reference.model_copy(update=update)

    @staticmethod
    def kind_of(cls: type) -> TypeKind:
        if issubclass(cls, enum.Enum):
            return TypeKind.ENUM
        if getattr(cls, "_is_protocol", False):
            return TypeKind.INTERFACE
        if dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen:
            return TypeKind.STRUCT
        return TypeKind.CLASS

    @staticmethod
    def enum_members(cls: type) -> tuple[EnumMemberInfo, ...]:
        """Integer-valued members keep their value; others fall back to their position."""
        members = []
        for index, member in enumerate(cls):
            value = member.value
            if not isinstance(value, int) or isinstance(value, bool):
                value = index
            members.append(EnumMemberInfo(name=member.name, value=value))
        return tuple(members)

    def base_type(self, cls: type) -> Optional[SourceType]:
        """First non-trivial base class, with generic arguments if parameterized."""
        for base in cls.__dict__.get("__orig_bases__", cls.__bases__):
            origin = typing.get_origin(base) or base
            if not inspect.isclass(origin) or origin.__module__.split(".")[0] in TRIVIAL_BASE_MODULES:
                continue
            return self.to_source_type(base)[0]
        return None

    def properties(self, cls: type) -> tuple[PropertyInfo, ...]:
        """Own annotated public attributes, skipping ClassVars."""
        own = inspect.get_annotations(cls)
        try:
            hints = typing.get_type_hints(cls)
        except (NameError, TypeError):
            hints = {}

        properties = []
        for name, raw in own.items():
            if name.startswith("_"):
                continue
            annotation = hints.get(name, raw)
            if typing.get_origin(annotation) is typing.ClassVar:
                continue
            value_type, nullable = self.to_source_type(annotation)
            properties.append(PropertyInfo(name=name, type=value_type, nullable=nullable))
        return tuple(properties)

    def methods(self, cls: type) -> tuple[MethodInfo, ...]:
        """Public methods declared on a protocol class."""
        methods = []
        for name, member in vars(cls).items():
            if name.startswith("_") or not inspect.isfunction(member):
                continue
            try:
                hints = typing.get_type_hints(member)
            except (NameError, TypeError):
                hints = {}

            parameters = []
            for parameter in list(inspect.signature(member).parameters.values())[1:]:
                annotation = hints.get(parameter.name, typing.Any)
                parameters.append(ParameterInfo(name=parameter.name, type=self.to_source_type(annotation)[0]))

            returns = hints.get("return", type(None))
            return_type = None if returns is type(None) else self.to_source_type(returns)[0]
            methods.append(MethodInfo(name=name, return_type=return_type, parameters=tuple(parameters)))
        return tuple(methods)

    # --- references ---

    def reference(self, cls: type, arguments: tuple[SourceType, ...] = ()) -> SourceType:
        """Shallow SourceType naming a user class (no members)."""
        if issubclass(cls, enum.Enum):
            return SourceType(kind=TypeKind.ENUM, namespace=namespace_of(cls), name=cls.__qualname__)

        declared = getattr(cls, "__pydantic_generic_metadata__", {}).get("parameters") or getattr(cls, "__parameters__", ())
        parameters = tuple(p.__name__ for p in declared if isinstance(p, typing.TypeVar))
        name = cls.__qualname__
        if parameters:
            name = f"{name}`{len(parameters)}"
        return SourceType(
            kind=self.kind_of(cls),
            namespace=namespace_of(cls),
            name=name,
            generic_parameters=() if arguments else parameters,
            generic_arguments=arguments,
        )

    def to_source_type(self, annotation: Any) -> tuple[SourceType, bool]:
        """Map a resolved annotation to (SourceType, nullable)."""
        if annotation is None or annotation is type(None):
            return OBJECT, True

        if isinstance(annotation, typing.TypeVar):
            return SourceType(kind=TypeKind.GENERIC_PARAMETER, name=annotation.__name__), False

        if isinstance(annotation, (str, typing.ForwardRef)):
            return OBJECT, False

        supertype = getattr(annotation, "__supertype__", None)
        if supertype is not None:  # typing.NewType
            return self.to_source_type(supertype)

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is typing.Union or origin is types.UnionType:
            remaining = [a for a in args if a is not type(None)]
            nullable = len(remaining) != len(args)
            if len(remaining) == 1:
                return self.to_source_type(remaining[0])[0], nullable
            return OBJECT, nullable

        if origin is typing.Annotated:
            return self.to_source_type(args[0])

        if origin is typing.Literal:
            return self.to_source_type(type(args[0]) if args else object)

        pydantic_generic = getattr(annotation, "__pydantic_generic_metadata__", None)
        if pydantic_generic and pydantic_generic.get("origin") is not None:
            origin = pydantic_generic["origin"]
            args = pydantic_generic["args"]

        if origin is None:
            origin = annotation

        if origin in SCALARS and not args:
            return SCALARS[origin], False

        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                element = self.to_source_type(args[0])[0]
            elif args and all(a == args[0] for a in args):
                element = self.to_source_type(args[0])[0]
            else:
                element = OBJECT
            return SourceType(kind=TypeKind.ARRAY, name=f"{element.name}[]", element_type=element), False

        if origin in MAPPING_ORIGINS:
            key, value = (args if len(args) == 2 else (object, object))
            arguments = (self.to_source_type(key)[0], self.to_source_type(value)[0])
            return generic_collection("Dictionary", arguments, is_dictionary=True), False

        if origin in SEQUENCE_ORIGINS or origin in SET_ORIGINS:
            name = "HashSet" if origin in SET_ORIGINS else "List"
            arguments = (self.to_source_type(args[0])[0],) if args else ()
            return generic_collection(name, arguments), False

        if inspect.isclass(origin):
            if origin.__module__ == "builtins":
                return OBJECT, False
            arguments = tuple(self.to_source_type(a)[0] for a in args)
            return self.reference(origin, arguments), False

        return OBJECT, False
