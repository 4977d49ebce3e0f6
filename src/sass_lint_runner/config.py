"""Rule configuration loading with environment variable overrides."""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping
import logging
import os

import yaml

from sass_lint_runner.core.linter.models import Severity
from sass_lint_runner.core.linter.rules import RULES

logger = logging.getLogger(__name__)

# Looked up in order in the base directory when no path is given
DEFAULT_CONFIG_FILES = (".lint.yml", ".sass-lint.yml")

# sass-lint numeric levels
_LEVELS = {0: None, 1: Severity.WARNING, 2: Severity.ERROR}


class ConfigErrorKind(Enum):
    NOT_FOUND = "not_found"
    PARSE_FAILURE = "parse_failure"


class ConfigError(Exception):
    """The configuration could not be loaded."""
    def __init__(self, kind: ConfigErrorKind, path: Path | str, detail: str = ""):
        self.kind = kind
        self.path = str(path)
        self.detail = detail
        if kind == ConfigErrorKind.NOT_FOUND:
            message = f"Config file not found: {path}"
        else:
            message = f"Failed to parse config {path}: {detail}"
        super().__init__(message)


@dataclass(frozen=True)
class RuleSetting:
    """Resolved setting for a single rule."""
    enabled: bool = True
    severity: Severity = Severity.ERROR
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class RuleConfig:
    """Read-only rule configuration for one lint session."""

    rules: Mapping[str, RuleSetting]
    ignore: tuple[str, ...] = ()
    path: str | None = None

    def __getitem__(self, rule: str) -> RuleSetting:
        return self.rules[rule]

    def is_enabled(self, rule: str) -> bool:
        return self.rules[rule].enabled

    def enabled_rules(self) -> list[str]:
        """Enabled rule names, in registry order."""
        return [name for name, setting in self.rules.items() if setting.enabled]

    @classmethod
    def defaults(cls) -> "RuleConfig":
        """Every registered rule enabled as an error, no options."""
        return cls(rules=MappingProxyType({name: RuleSetting() for name in RULES}))

    @classmethod
    def from_dict(cls, data: dict, path: Path | str = "<config>") -> "RuleConfig":
        """
        Build a config from a parsed document, merged over the defaults.

        Raises:
            ConfigError: If a value has the wrong shape
        """
        if not isinstance(data, dict):
            raise ConfigError(
                ConfigErrorKind.PARSE_FAILURE, path,
                f"top level must be a mapping, got {type(data).__name__}"
            )

        rules = {name: RuleSetting() for name in RULES}
        ignore: tuple[str, ...] = ()

        for key, value in data.items():
            if key == "files":
                ignore = _parse_files(value, path)
                continue

            if key not in RULES:
                logger.warning(f"Unknown rule in {path}: {key}")
                continue

            rules[key] = _parse_rule(key, value, path)

        return cls(rules=MappingProxyType(rules), ignore=ignore, path=str(path))

    @classmethod
    def load(cls, path: Path | str | None = None, base_dir: Path | str | None = None) -> "RuleConfig":
        """
        Load config, falling back to built-in defaults.

        An explicit path (argument or SASS_LINT_CONFIG) must exist. Without one,
        the default file names are tried in base_dir and their absence is silent.

        Raises:
            ConfigError: NOT_FOUND for a missing explicit path,
                PARSE_FAILURE for malformed YAML or values
        """
        base = Path(base_dir) if base_dir is not None else Path.cwd()

        # Override config path from env
        if path is None and (val := os.environ.get("SASS_LINT_CONFIG")):
            path = val

        if path is not None:
            config_path = Path(path).expanduser()
            if not config_path.is_absolute():
                config_path = base / config_path
            if not config_path.is_file():
                raise ConfigError(ConfigErrorKind.NOT_FOUND, config_path)
        else:
            config_path = next(
                (base / name for name in DEFAULT_CONFIG_FILES if (base / name).is_file()),
                None
            )
            if config_path is None:
                logger.debug(f"No config file in {base}, using defaults")
                return cls.defaults()

        try:
            text = config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(ConfigErrorKind.PARSE_FAILURE, config_path, str(e)) from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(ConfigErrorKind.PARSE_FAILURE, config_path, str(e)) from e

        logger.debug(f"Loaded config from {config_path}")
        return cls.from_dict(data if data is not None else {}, config_path)


def _parse_rule(name: str, value: Any, path: Path | str) -> RuleSetting:
    """
    Parse one rule's value.

    Accepted forms:
        {enabled: bool, severity: str, options: {...}}
        true / false
        "warning" / "error" / "off"
        0 / 1 / 2                      (off / warning / error)
        [level, {options}]
    """
    def fail(detail: str) -> ConfigError:
        return ConfigError(ConfigErrorKind.PARSE_FAILURE, path, f"rule '{name}': {detail}")

    if value is None:
        return RuleSetting()

    if isinstance(value, bool):
        return RuleSetting(enabled=value)

    if isinstance(value, (int, str)):
        severity = _parse_severity(value, fail)
        return RuleSetting(enabled=severity is not None, severity=severity or Severity.ERROR)

    if isinstance(value, list):
        if not 1 <= len(value) <= 2:
            raise fail("expected [level] or [level, {options}]")
        severity = _parse_severity(value[0], fail)
        options = _parse_options(value[1] if len(value) == 2 else {}, fail)
        return RuleSetting(
            enabled=severity is not None,
            severity=severity or Severity.ERROR,
            options=options
        )

    if isinstance(value, dict):
        unknown = set(value) - {"enabled", "severity", "options"}
        if unknown:
            raise fail(f"unknown keys {sorted(unknown)}")

        enabled = value.get("enabled", True)
        if not isinstance(enabled, bool):
            raise fail(f"enabled must be true or false, got {enabled!r}")

        severity = Severity.ERROR
        if "severity" in value:
            severity = _parse_severity(value["severity"], fail)
            if severity is None:
                enabled = False
                severity = Severity.ERROR

        return RuleSetting(
            enabled=enabled,
            severity=severity,
            options=_parse_options(value.get("options") or {}, fail)
        )

    raise fail(f"unsupported value {value!r}")


def _parse_severity(value: Any, fail) -> Severity | None:
    """Severity for a value, or None when the value switches the rule off."""
    if isinstance(value, bool):
        raise fail(f"unknown severity {value!r}")
    if isinstance(value, int):
        if value not in _LEVELS:
            raise fail(f"severity level must be 0, 1 or 2, got {value}")
        return _LEVELS[value]
    if isinstance(value, str):
        if value.lower() == "off":
            return None
        try:
            return Severity(value.lower())
        except ValueError:
            raise fail(f"unknown severity {value!r}") from None
    raise fail(f"unknown severity {value!r}")


def _parse_options(value: Any, fail) -> Mapping[str, Any]:
    """Flat options: scalar or list-of-scalar values only."""
    if not isinstance(value, dict):
        raise fail(f"options must be a mapping, got {type(value).__name__}")

    options = {}
    for key, item in value.items():
        if isinstance(item, dict):
            raise fail(f"option '{key}' must be a scalar or list, not a mapping")
        if isinstance(item, list):
            if any(isinstance(i, (dict, list)) for i in item):
                raise fail(f"option '{key}' must be a flat list")
            item = tuple(item)
        options[str(key)] = item

    return MappingProxyType(options)


def _parse_files(value: Any, path: Path | str) -> tuple[str, ...]:
    if not isinstance(value, dict):
        raise ConfigError(ConfigErrorKind.PARSE_FAILURE, path, "files must be a mapping")
    ignore = value.get("ignore") or []
    if isinstance(ignore, str):
        ignore = [ignore]
    if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
        raise ConfigError(ConfigErrorKind.PARSE_FAILURE, path, "files.ignore must be a list of globs")
    return tuple(ignore)
