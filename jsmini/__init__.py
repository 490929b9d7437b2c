"""A small JavaScript object model, property access, value conversions, builtins and JSON."""

__version__ = "0.1.0"
__all__ = [
    "properties",
    "numbers",
    "strings",
    "values",
    "access",
    "objects",
    "reprs",
    "jsonfmt",
]