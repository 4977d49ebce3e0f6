"""Core modules for stylesheet linting."""
from .collector import collect, CollectError, CollectErrorKind
from .parser import parse, ParseError, Stylesheet

__all__ = [
    "collect",
    "CollectError",
    "CollectErrorKind",
    "parse",
    "ParseError",
    "Stylesheet",
]
