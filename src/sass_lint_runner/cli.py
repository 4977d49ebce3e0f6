"""CLI for sass-lint-runner.

Wires the config loader, file collector, lint session and reporter together
and exits with a CI-friendly status code.
"""
import argparse
import logging
import os
import sys

from rich.console import Console
from rich.table import Table

from sass_lint_runner import __version__
from sass_lint_runner.config import ConfigError, RuleConfig
from sass_lint_runner.core.collector import CollectError, collect
from sass_lint_runner.core.linter.engine import get_available_rules
from sass_lint_runner.core.linter.reporter import EXIT_CANCELLED, EXIT_FATAL, EXIT_OK, report
from sass_lint_runner.core.linter.session import LintSession

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ["*.scss"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sass-lint",
        description="Lint SCSS stylesheets and fail on error-severity violations"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "patterns", nargs="*", metavar="GLOB",
        help="Files to lint (default: *.scss); multiple globs are unioned"
    )
    parser.add_argument(
        "-c", "--config",
        help="Rule config file (default: .lint.yml if present)"
    )
    parser.add_argument(
        "-j", "--jobs", type=int, default=None,
        help="Files to lint in parallel (default: 1)"
    )
    parser.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--list-rules", action="store_true",
        help="List available rules and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging"
    )
    return parser


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s"
    )

    if args.list_rules:
        list_rules_command()
        sys.exit(EXIT_OK)

    sys.exit(lint_command(args))


def lint_command(args) -> int:
    """Execute a lint run and return its exit code."""
    try:
        config = RuleConfig.load(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    try:
        paths = collect(args.patterns or DEFAULT_PATTERNS, ignore=config.ignore)
    except CollectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    jobs = args.jobs
    # Override job count from env
    if jobs is None and (val := os.environ.get("SASS_LINT_JOBS")):
        try:
            jobs = int(val)
        except ValueError:
            logger.warning(f"Ignoring SASS_LINT_JOBS={val!r}: not an integer")

    session = LintSession(config, jobs=jobs or 1)
    logger.debug(f"Linting {len(paths)} files with rules: {', '.join(config.enabled_rules())}")

    try:
        result = session.run(paths)
    except KeyboardInterrupt:
        # Interrupted outside per-file linting; partial results are lost
        print("\nCancelled by user", file=sys.stderr)
        return EXIT_CANCELLED

    return report(result, output_format=args.format)


def list_rules_command():
    """Print the rule registry."""
    table = Table(title="Available rules")
    table.add_column("Rule", style="bold")
    table.add_column("Description")

    for name, description in get_available_rules().items():
        table.add_row(name, description)

    Console().print(table)


if __name__ == "__main__":
    main()
