"""Color literal linting rules."""
import re
from collections.abc import Mapping
from typing import Generator

from ...parser import Declaration, Stylesheet
from ..models import RuleHit

HEX_COLOR = re.compile(
    r'(?<![\w&-])#([0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{4}|[0-9a-fA-F]{3})(?![\w-])'
)


def normalize_hex(digits: str, case: str = "lowercase", length: str = "short") -> str:
    """
    Normalize hex color digits (without '#').

    Examples:
        normalize_hex("FFFFFF") -> "fff"
        normalize_hex("abc", length="long") -> "aabbcc"
    """
    if length == "short" and len(digits) in (6, 8):
        pairs = [digits[i:i + 2] for i in range(0, len(digits), 2)]
        if all(p[0].lower() == p[1].lower() for p in pairs):
            digits = "".join(p[0] for p in pairs)
    elif length == "long" and len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)

    return digits.lower() if case == "lowercase" else digits.upper()


def color_format_consistency(tree: Stylesheet, options: Mapping) -> Generator[RuleHit, None, None]:
    """
    Flag hex color literals not written in the configured form.

    Options: case ("lowercase" or "uppercase", default lowercase),
    length ("short" or "long", default short).
    """
    case = options.get("case", "lowercase")
    length = options.get("length", "short")
    if case not in ("lowercase", "uppercase"):
        raise ValueError(f"case must be 'lowercase' or 'uppercase', got {case!r}")
    if length not in ("short", "long"):
        raise ValueError(f"length must be 'short' or 'long', got {length!r}")

    for node in tree.walk():
        if not isinstance(node, Declaration):
            continue

        for match in HEX_COLOR.finditer(node.value):
            digits = match.group(1)
            expected = normalize_hex(digits, case, length)
            if digits == expected:
                continue

            line, column = node.position_of(match.start())
            yield RuleHit(
                line, column,
                f"Color '#{digits}' should be written as '#{expected}'"
            )
