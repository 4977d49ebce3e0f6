"""Reporter - prints violations and maps a result to an exit code."""
from rich.console import Console

from .models import LintResult

EXIT_OK = 0
EXIT_LINT_ERRORS = 1
EXIT_FATAL = 2
EXIT_CANCELLED = 130


def exit_code(result: LintResult) -> int:
    """
    Exit code for a lint result.

    0 when no violation is an error (warnings never gate), 1 otherwise.
    A cancelled run exits 130 regardless of what it found.
    """
    if result.cancelled:
        return EXIT_CANCELLED
    return EXIT_LINT_ERRORS if result.has_errors else EXIT_OK


def report(
    result: LintResult,
    console: Console | None = None,
    output_format: str = "text",
    summary_console: Console | None = None
) -> int:
    """
    Print a lint result and return the process exit code.

    Args:
        result: Session result
        console: Where violations go (default: stdout)
        output_format: "text" for one line per violation, "json" for a document
        summary_console: Where the summary line goes (default: stderr)

    Returns:
        Exit code from exit_code()
    """
    console = console or Console(soft_wrap=True)
    summary_console = summary_console or Console(stderr=True, soft_wrap=True)

    if output_format == "json":
        console.print_json(data=result.to_dict())
    else:
        for violations in result.by_file().values():
            for violation in violations:
                console.print(violation.format(), markup=False, highlight=False)

    summary = (
        f"{result.files_linted} files linted: "
        f"{result.errors} errors, {result.warnings} warnings"
    )
    if result.cancelled:
        summary += " (cancelled, partial results)"
    summary_console.print(summary, markup=False, highlight=False)

    return exit_code(result)
