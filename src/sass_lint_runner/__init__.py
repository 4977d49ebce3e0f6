"""Style linter for SCSS stylesheets with CI-friendly exit codes."""

__version__ = "1.0.0"
