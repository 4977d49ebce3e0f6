"""Lint rules for SCSS stylesheets."""
from . import colors, indentation, properties, selectors, structure

# Registry of all available rules, in execution order
RULES = {
    "indentation-consistency": indentation.indentation_consistency,
    "disallowed-selector-patterns": selectors.disallowed_selector_patterns,
    "color-format-consistency": colors.color_format_consistency,
    "property-ordering": properties.property_ordering,
    "no-empty-rulesets": structure.no_empty_rulesets,
    "trailing-whitespace": structure.trailing_whitespace,
}

__all__ = ["RULES", "colors", "indentation", "properties", "selectors", "structure"]
