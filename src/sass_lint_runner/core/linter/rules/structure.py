"""Structural and whitespace rules."""
from collections.abc import Mapping
from typing import Generator

from ...parser import Comment, RuleSet, Stylesheet
from ..models import RuleHit


def no_empty_rulesets(tree: Stylesheet, options: Mapping) -> Generator[RuleHit, None, None]:
    """
    Flag rulesets with no declarations or nested rules.

    A ruleset containing only comments counts as empty.
    """
    for node in tree.walk():
        if isinstance(node, RuleSet) and all(isinstance(c, Comment) for c in node.children):
            yield RuleHit(node.line, node.column, f"Empty ruleset '{node.selector}'")


def trailing_whitespace(tree: Stylesheet, options: Mapping) -> Generator[RuleHit, None, None]:
    """Flag trailing whitespace on lines."""
    for i, line in enumerate(tree.lines, 1):
        stripped = line.rstrip()
        trailing_count = len(line) - len(stripped)

        if trailing_count > 0:
            yield RuleHit(
                i, len(stripped) + 1,
                f"Trailing whitespace ({trailing_count} chars)"
            )
