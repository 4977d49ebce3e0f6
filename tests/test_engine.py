"""Tests for the rule engine."""
from sass_lint_runner.config import RuleConfig
from sass_lint_runner.core.linter import engine
from sass_lint_runner.core.linter.models import RuleHit, Severity
from sass_lint_runner.core.linter.rules import RULES
from sass_lint_runner.core.parser import parse


def test_disabled_rule_is_never_called(monkeypatch):
    """Disabled rules are skipped, not run and filtered."""
    calls = []

    def recording_rule(tree, options):
        calls.append(tree)
        return []

    monkeypatch.setitem(RULES, "property-ordering", recording_rule)
    config = RuleConfig.from_dict({"property-ordering": False})

    engine.apply_rules(parse(".a {\n  color: red;\n}\n"), config)

    assert calls == []


def test_rule_fault_becomes_internal_error(monkeypatch):
    """A raising rule yields one internal-error; other rules still run."""
    def broken_rule(tree, options):
        yield RuleHit(1, 1, "partial output")
        raise RuntimeError("boom")

    monkeypatch.setitem(RULES, "property-ordering", broken_rule)

    tree = parse(".a {  \n  color: red;\n}\n", source="x.scss")
    violations = engine.apply_rules(tree, RuleConfig.defaults())

    rules = [v.rule for v in violations]
    assert rules.count("internal-error") == 1
    assert "property-ordering" not in rules
    assert "trailing-whitespace" in rules

    internal = next(v for v in violations if v.rule == "internal-error")
    assert internal.severity == Severity.ERROR
    assert internal.path == "x.scss"
    assert "boom" in internal.message


def test_invalid_option_becomes_internal_error():
    config = RuleConfig.from_dict({
        "disallowed-selector-patterns": {"options": {"patterns": ["("]}}
    })
    violations = engine.apply_rules(parse(".a {\n  color: red;\n}\n"), config)
    assert [v.rule for v in violations] == ["internal-error"]


def test_severity_comes_from_config():
    config = RuleConfig.from_dict({"trailing-whitespace": "warning"})
    violations = engine.apply_rules(parse(".a {\n  color: red; \n}\n", source="x.scss"), config)

    assert len(violations) == 1
    v = violations[0]
    assert (v.path, v.line, v.column, v.rule, v.severity) == (
        "x.scss", 2, 14, "trailing-whitespace", Severity.WARNING
    )


def test_get_available_rules():
    rules = engine.get_available_rules()
    assert list(rules) == list(RULES)
    assert rules["trailing-whitespace"] == "Flag trailing whitespace on lines."
