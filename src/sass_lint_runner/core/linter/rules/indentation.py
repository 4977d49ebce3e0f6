"""Indentation linting rules."""
from collections.abc import Mapping
from typing import Generator

from ...parser import AtRule, RuleSet, Stylesheet
from ..models import RuleHit


def indentation_consistency(tree: Stylesheet, options: Mapping) -> Generator[RuleHit, None, None]:
    """
    Flag lines not indented by one unit per nesting level.

    Checks every node that begins a line, plus closing braces.
    Options: size (spaces per level, default 2), style ("spaces" or "tabs").
    """
    size = int(options.get("size", 2))
    style = options.get("style", "spaces")
    if style not in ("spaces", "tabs"):
        raise ValueError(f"style must be 'spaces' or 'tabs', got {style!r}")

    # (line, column, depth) of every position that should be indented
    positions = []
    for node in tree.walk():
        positions.append((node.line, node.column, node.depth))
        if isinstance(node, (RuleSet, AtRule)) and node.children is not None:
            positions.append((node.end_line, node.end_column, node.depth))

    seen: set[int] = set()
    for line, column, depth in sorted(positions):
        if line in seen or not tree.starts_line(line, column):
            continue
        seen.add(line)

        leading = tree.lines[line - 1][:column - 1]

        if style == "spaces":
            if "\t" in leading:
                yield RuleHit(line, 1, "Expected spaces for indentation, found tab")
                continue
            expected = depth * size
            if len(leading) != expected:
                yield RuleHit(
                    line, column,
                    f"Expected indentation of {expected} spaces, found {len(leading)}"
                )
        else:
            if " " in leading:
                yield RuleHit(line, 1, "Expected tabs for indentation, found spaces")
                continue
            if len(leading) != depth:
                yield RuleHit(
                    line, column,
                    f"Expected indentation of {depth} tabs, found {len(leading)}"
                )
