"""Selector linting rules."""
import re
from collections.abc import Mapping
from typing import Generator

from ...parser import RuleSet, Stylesheet
from ..models import RuleHit

# ID selectors, but not #{} interpolation
DEFAULT_PATTERNS = (r"#(?!\{)-?[_a-zA-Z][\w-]*",)

QUOTED = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'')
UNQUOTED_ATTR_VALUE = re.compile(r'(=\s*)([^\]\s"\']+)')


def mask_selector(selector: str) -> str:
    """
    Blank out quoted strings and attribute values, keeping offsets.

    Examples:
        'a[href="#top"]' -> 'a[href="    "]'
    """
    masked = QUOTED.sub(lambda m: m.group()[0] + " " * (len(m.group()) - 2) + m.group()[-1], selector)
    return UNQUOTED_ATTR_VALUE.sub(lambda m: m.group(1) + " " * len(m.group(2)), masked)


def disallowed_selector_patterns(tree: Stylesheet, options: Mapping) -> Generator[RuleHit, None, None]:
    """
    Flag selectors matching any disallowed regular expression.

    Options: patterns (list of regexes, default: ID selectors).
    Quoted strings and attribute values are not matched against.
    An invalid regex raises, which the engine reports as an internal error.
    """
    patterns = options.get("patterns", DEFAULT_PATTERNS)
    if isinstance(patterns, str):
        patterns = [patterns]
    compiled = [(p, re.compile(p)) for p in patterns]

    for node in tree.walk():
        if not isinstance(node, RuleSet):
            continue
        masked = mask_selector(node.selector)
        for source, regex in compiled:
            match = regex.search(masked)
            if match:
                yield RuleHit(
                    node.line, node.column,
                    f"Selector '{node.selector}' matches disallowed pattern "
                    f"'{source}' ('{node.selector[match.start():match.end()]}')"
                )
