"""Tests for the SCSS parser."""
import pytest

from sass_lint_runner.core.parser import (
    MAX_DEPTH,
    AtRule,
    Comment,
    Declaration,
    ParseError,
    RuleSet,
    parse,
)


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


def test_nested_rulesets_with_positions():
    """Rulesets and declarations carry line, column and depth."""
    tree = parse(".a {\n  color: red;\n  .b {\n    margin: 0\n  }\n}\n", source="x.scss")

    assert tree.source == "x.scss"
    (outer,) = tree.children
    assert isinstance(outer, RuleSet)
    assert (outer.selector, outer.line, outer.column, outer.depth) == (".a", 1, 1, 0)
    assert (outer.end_line, outer.end_column) == (6, 1)

    decl, inner = outer.children
    assert isinstance(decl, Declaration)
    assert (decl.property, decl.value) == ("color", "red")
    assert (decl.line, decl.column, decl.depth) == (2, 3, 1)
    assert (decl.value_line, decl.value_column) == (2, 10)

    assert isinstance(inner, RuleSet)
    assert (inner.selector, inner.line, inner.column, inner.depth) == (".b", 3, 3, 1)
    assert (inner.end_line, inner.end_column) == (5, 3)

    # Last declaration may omit its semicolon
    (margin,) = inner.children
    assert (margin.property, margin.value, margin.depth) == ("margin", "0", 2)


def test_at_rules_with_and_without_blocks():
    """@import is a statement, @media opens a block."""
    tree = parse("@import 'base';\n@media screen {\n  .a {\n    color: red;\n  }\n}\n")

    imp, media = tree.children
    assert isinstance(imp, AtRule)
    assert (imp.name, imp.params, imp.has_block) == ("import", "'base'", False)

    assert isinstance(media, AtRule)
    assert (media.name, media.params, media.has_block) == ("media", "screen", True)
    assert isinstance(media.children[0], RuleSet)


def test_include_statement_inside_block():
    """@include without a block is a statement with params."""
    tree = parse(".a {\n  @include mixin(1, 2);\n}\n")
    (include,) = tree.children[0].children
    assert (include.name, include.params) == ("include", "mixin(1, 2)")


def test_comments_become_nodes():
    """Standalone comments are kept with their depth."""
    tree = parse("// header\n.a {\n  /* note */\n  color: red;\n}\n")

    header, rule = tree.children
    assert isinstance(header, Comment)
    assert (header.text, header.line, header.column, header.depth) == ("// header", 1, 1, 0)

    note = rule.children[0]
    assert isinstance(note, Comment)
    assert (note.text, note.depth) == ("/* note */", 1)


def test_interpolation_is_not_a_block():
    """#{} inside a selector does not open a block."""
    tree = parse(".icon-#{$name} {\n  width: 1px;\n}\n")
    assert tree.children[0].selector == ".icon-#{$name}"


def test_url_and_strings_keep_special_characters():
    """'//' inside url() and ';' inside strings are part of the value."""
    tree = parse('.a {\n  background: url(http://x.com/a.png);\n  content: "a;b";\n}\n')
    bg, content = tree.children[0].children
    assert bg.value == "url(http://x.com/a.png)"
    assert content.value == '"a;b"'


def test_multiline_selector_is_normalized():
    """Whitespace in selectors collapses to single spaces."""
    tree = parse("a,\nb {\n  color: red;\n}\n")
    assert tree.children[0].selector == "a, b"


def test_walk_and_blocks():
    """walk() is depth-first; blocks() yields every child list."""
    tree = parse(".a {\n  color: red;\n  .b {\n    margin: 0;\n  }\n}\n")

    kinds = [type(n).__name__ for n in tree.walk()]
    assert kinds == ["RuleSet", "Declaration", "RuleSet", "Declaration"]
    assert len(list(tree.blocks())) == 3


def test_starts_line():
    tree = parse(".a { color: red; }\n")
    decl = tree.children[0].children[0]
    assert tree.starts_line(1, 1) is True
    assert tree.starts_line(decl.line, decl.column) is False


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("source, line, column, fragment", [
    (".a {\n  color: red;\n", 1, 4, "Unclosed block"),
    ("}\n", 1, 1, "Unexpected '}'"),
    (".a {\n  color red;\n}\n", 2, 3, "Expected ':'"),
    ('.a { content: "abc\n}\n', 1, 15, "Unterminated string"),
    ("/* never closed", 1, 1, "Unterminated comment"),
    (".a", 1, 1, "Unexpected end of file"),
    ("{\n}\n", 1, 1, "Expected selector"),
    (".a {\n  color:;\n}\n", 2, 3, "Expected value"),
])
def test_parse_errors_have_positions(source, line, column, fragment):
    """Malformed input raises ParseError at the offending position."""
    with pytest.raises(ParseError) as exc_info:
        parse(source)

    assert exc_info.value.line == line
    assert exc_info.value.column == column
    assert fragment in exc_info.value.message


def test_nesting_limit():
    """Nesting past MAX_DEPTH is a ParseError at the first brace too deep."""
    tree = parse(".a {" * MAX_DEPTH + "}" * MAX_DEPTH)
    assert len(list(tree.walk())) == MAX_DEPTH

    with pytest.raises(ParseError) as exc_info:
        parse(".a {" * 3000 + "}" * 3000)

    assert "Nesting too deep" in exc_info.value.message
    assert (exc_info.value.line, exc_info.value.column) == (1, 4 * MAX_DEPTH + 4)


def test_value_positions_skip_comments():
    tree = parse(".a {\n  border: 1px /* thin */ solid #FFF;\n}\n")
    decl = tree.children[0].children[0]

    assert decl.value == "1px  solid #FFF"
    assert decl.position_of(decl.value.index("#")) == (2, 32)
