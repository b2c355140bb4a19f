"""Type graph translation: names, declarations, Edit constructors, orchestration."""
from .names import TypeNameResolver, ValueShape
from .constructor import ConstructorSynthesizer, create_collection_method, guard_expression
from .declarations import DeclarationSynthesizer, TranslationContext, View, build_context
from .generator import ClientGenerator, GeneratorOptions, generate_client, generate_views

__all__ = [
    "TypeNameResolver",
    "ValueShape",
    "ConstructorSynthesizer",
    "create_collection_method",
    "guard_expression",
    "DeclarationSynthesizer",
    "TranslationContext",
    "View",
    "build_context",
    "ClientGenerator",
    "GeneratorOptions",
    "generate_client",
    "generate_views",
]
