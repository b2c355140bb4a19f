"""clientgen - TypeScript client model generator.

Translates a module's reflectable types into two TypeScript views: read-only
DTO interfaces and Knockout-observable Edit classes.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
