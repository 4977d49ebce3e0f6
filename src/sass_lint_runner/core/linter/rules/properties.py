"""Declaration ordering rules."""
import re
from collections.abc import Mapping
from typing import Generator

from ...parser import Declaration, Stylesheet
from ..models import RuleHit

VENDOR_PREFIX = re.compile(r'^-(?:webkit|moz|ms|o)-')


def _sort_key(prop: str, order) -> tuple:
    name = VENDOR_PREFIX.sub("", prop.lower())
    if order == "alphabetical":
        return (0, name)
    try:
        return (0, order.index(name))
    except ValueError:
        # Unlisted properties go after listed ones
        return (1, name)


def property_ordering(tree: Stylesheet, options: Mapping) -> Generator[RuleHit, None, None]:
    """
    Flag declarations out of order within a block.

    Options: order ("alphabetical", or a list of property names).
    Sass variables and custom properties are not ordered.
    """
    order = options.get("order", "alphabetical")
    if order != "alphabetical":
        if isinstance(order, str):
            raise ValueError(f"order must be 'alphabetical' or a list, got {order!r}")
        order = [str(p).lower() for p in order]

    for block in tree.blocks():
        previous = None
        for node in block:
            if not isinstance(node, Declaration):
                continue
            if node.property.startswith(("$", "--")):
                continue

            if previous is not None and _sort_key(node.property, order) < _sort_key(previous.property, order):
                yield RuleHit(
                    node.line, node.column,
                    f"Expected '{node.property}' to come before '{previous.property}'"
                )
            previous = node
