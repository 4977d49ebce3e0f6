"""Lint session - reads, parses and lints a set of files."""
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Callable
import logging
import threading

from ..parser import ParseError, Stylesheet, parse
from .engine import apply_rules
from .models import LintResult, Severity, Violation

if TYPE_CHECKING:
    from sass_lint_runner.config import RuleConfig

logger = logging.getLogger(__name__)

IO_ERROR = "io-error"
SYNTAX_ERROR = "syntax-error"


@dataclass
class SourceFile:
    """A stylesheet read from disk, parsed on first access to `tree`."""
    path: str
    text: str
    parser: Callable[[str, str], Stylesheet] = parse

    @cached_property
    def tree(self) -> Stylesheet:
        return self.parser(self.text, self.path)


class LintSession:
    """
    One end-to-end lint run over a list of paths.

    Each file is read, parsed and linted independently. Failures to read or
    parse a file become violations for that file; the run always continues.
    With jobs > 1, files are linted on a thread pool and aggregated here in
    input order.
    """

    def __init__(
        self,
        config: "RuleConfig",
        jobs: int = 1,
        parser: Callable[[str, str], Stylesheet] = parse
    ):
        self.config = config
        self.jobs = max(1, jobs)
        self.parser = parser
        self._cancelled = threading.Event()
        self._futures: list[Future] = []

    def cancel(self) -> None:
        """Stop dispatching files. Files already being linted still complete."""
        self._cancelled.set()
        for future in self._futures:
            future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def lint_path(self, path: str) -> list[Violation]:
        """Read, parse and lint one file."""
        path = str(path)

        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read {path}: {e}")
            return [Violation(path, 1, 1, IO_ERROR, Severity.ERROR, f"Could not read file: {e}")]

        source = SourceFile(path, text, self.parser)
        try:
            tree = source.tree
        except ParseError as e:
            logger.debug(f"Could not parse {path}: {e}")
            return [Violation(path, e.line, e.column, SYNTAX_ERROR, Severity.ERROR, e.message)]

        violations = apply_rules(tree, self.config)
        logger.debug(f"Linted {path}: {len(violations)} violations")
        return violations

    def run(self, paths: list[str]) -> LintResult:
        """
        Lint every path.

        Returns:
            LintResult in input file order; `cancelled` is set if cancel()
            was called before all files were dispatched
        """
        self._cancelled.clear()
        result = LintResult()

        if self.jobs > 1 and len(paths) > 1:
            self._run_parallel(paths, result)
        else:
            self._run_sequential(paths, result)

        result.cancelled = self.cancelled
        if result.cancelled:
            logger.warning(f"Cancelled after {result.files_linted}/{len(paths)} files")
        return result

    def _run_sequential(self, paths: list[str], result: LintResult) -> None:
        for path in paths:
            if self.cancelled:
                break
            try:
                violations = self.lint_path(path)
            except KeyboardInterrupt:
                # Finish the interrupted file, as the parallel path does for
                # in-flight files. A second interrupt propagates.
                self.cancel()
                violations = self.lint_path(path)
            result.add_file(violations)

    def _lint_queued(self, path: str) -> list[Violation]:
        """lint_path for a pool worker; files not started before cancel() are skipped."""
        if self.cancelled:
            raise CancelledError()
        return self.lint_path(path)

    def _run_parallel(self, paths: list[str], result: LintResult) -> None:
        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            self._futures = [executor.submit(self._lint_queued, p) for p in paths]
            if self.cancelled:
                # cancel() ran before the futures list existed
                self.cancel()

            index = 0
            try:
                while index < len(self._futures):
                    try:
                        violations = self._futures[index].result()
                    except CancelledError:
                        # Work queue is FIFO: every later file started after cancel() too
                        break
                    except KeyboardInterrupt:
                        self.cancel()
                        continue
                    result.add_file(violations)
                    index += 1
            finally:
                self._futures = []
