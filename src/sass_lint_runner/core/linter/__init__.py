"""Stylesheet linter: rules, engine, session and reporting."""
from .engine import apply_rules, get_available_rules
from .models import LintResult, RuleHit, Severity, Violation
from .reporter import report, exit_code
from .session import LintSession, SourceFile

__all__ = [
    "apply_rules",
    "get_available_rules",
    "LintResult",
    "RuleHit",
    "Severity",
    "Violation",
    "report",
    "exit_code",
    "LintSession",
    "SourceFile",
]
