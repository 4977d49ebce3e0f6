"""Data models for the linter."""
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """Severity levels for violations."""
    WARNING = "warning"   # Reported, never gates
    ERROR = "error"       # Fails the run


@dataclass(frozen=True)
class RuleHit:
    """A location and message emitted by a rule, before severity is known."""
    line: int
    column: int
    message: str


@dataclass(frozen=True)
class Violation:
    """A single deviation from a style rule at a file location."""
    path: str
    line: int
    column: int
    rule: str
    severity: Severity
    message: str

    def format(self) -> str:
        return (
            f"{self.path}:{self.line}:{self.column} "
            f"[{self.severity.value}] {self.rule}: {self.message}"
        )

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass
class LintResult:
    """Violations for a whole session, in file order then line/column order."""
    violations: list[Violation] = field(default_factory=list)
    files_linted: int = 0
    cancelled: bool = False

    def add_file(self, violations: list[Violation]) -> None:
        """Append one file's violations, ordered by line then column."""
        self.violations.extend(sorted(violations, key=lambda v: (v.line, v.column)))
        self.files_linted += 1

    @property
    def has_errors(self) -> bool:
        return any(v.severity == Severity.ERROR for v in self.violations)

    @property
    def errors(self) -> int:
        return sum(1 for v in self.violations if v.severity == Severity.ERROR)

    @property
    def warnings(self) -> int:
        return sum(1 for v in self.violations if v.severity == Severity.WARNING)

    def by_file(self) -> dict[str, list[Violation]]:
        """Group violations by path, preserving file order."""
        grouped: dict[str, list[Violation]] = {}
        for violation in self.violations:
            grouped.setdefault(violation.path, []).append(violation)
        return grouped

    def to_dict(self) -> dict:
        return {
            "files_linted": self.files_linted,
            "errors": self.errors,
            "warnings": self.warnings,
            "has_errors": self.has_errors,
            "cancelled": self.cancelled,
            "violations": [v.to_dict() for v in self.violations],
        }
