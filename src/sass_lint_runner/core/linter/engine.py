"""Lint engine - runs enabled rules over a parsed stylesheet."""
import logging
from typing import TYPE_CHECKING

from ..parser import Stylesheet
from .models import Severity, Violation
from .rules import RULES

if TYPE_CHECKING:
    from sass_lint_runner.config import RuleConfig

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal-error"


def apply_rules(tree: Stylesheet, config: "RuleConfig") -> list[Violation]:
    """
    Run every enabled rule against a stylesheet.

    Rules run independently; disabled rules are never called. A rule that
    raises is reported as a single internal-error violation and its partial
    output is dropped, so the remaining rules still run.

    Args:
        tree: Parsed stylesheet (tree.source is used as the violation path)
        config: Resolved rule configuration

    Returns:
        Violations in rule registry order
    """
    violations: list[Violation] = []

    for rule_name, rule_func in RULES.items():
        setting = config[rule_name]
        if not setting.enabled:
            continue

        try:
            hits = list(rule_func(tree, setting.options))
        except Exception as e:
            logger.error(f"Rule {rule_name} failed on {tree.source}: {e}")
            violations.append(Violation(
                path=tree.source,
                line=1,
                column=1,
                rule=INTERNAL_ERROR,
                severity=Severity.ERROR,
                message=f"Rule '{rule_name}' failed: {type(e).__name__}: {e}"
            ))
            continue

        violations.extend(
            Violation(
                path=tree.source,
                line=hit.line,
                column=hit.column,
                rule=rule_name,
                severity=setting.severity,
                message=hit.message
            )
            for hit in hits
        )

    return violations


def get_available_rules() -> dict[str, str]:
    """
    Get list of available rules with descriptions.

    Returns:
        Dict mapping rule name to the first line of its docstring
    """
    return {
        name: (func.__doc__ or "No description").strip().split('\n')[0]
        for name, func in RULES.items()
    }
