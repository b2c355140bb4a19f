"""Errors raised by clientgen.

Only invalid input and unsupported type kinds abort a translation. Structural
fallbacks (dangling base types, unresolvable generic collection elements) are
absorbed where they occur and merely logged.
"""


class ClientGenError(Exception):
    """Base class for clientgen failures."""


class InvalidArgumentError(ClientGenError, ValueError):
    """A required input (type source, options, module handle) is missing."""

    def __init__(self, argument: str):
        super().__init__(f"Required argument is missing: {argument}")
        self.argument = argument


class UnsupportedTypeKindError(ClientGenError, TypeError):
    """A filtered-in type is neither class, struct, enum, nor interface."""

    def __init__(self, type_name: str, kind: str):
        super().__init__(f"Unable to create type declaration for {type_name}: kind '{kind}' is not supported")
        self.type_name = type_name
        self.kind = kind


class TypeSourceError(ClientGenError):
    """A type source could not load the module it was pointed at."""
