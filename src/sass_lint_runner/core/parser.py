"""
SCSS Parser

Converts stylesheet source text into a small syntax tree.
Handles nested rulesets, at-rules (with and without blocks), declarations,
comments, strings and #{} interpolation. Selectors and values are kept as
raw text; only block structure and source positions are parsed.
"""
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union


class ParseError(Exception):
    """Syntax error in stylesheet source."""
    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"Parse error at line {line}, column {column}: {message}")


@dataclass
class Comment:
    """A /* block */ or // line comment standing on its own."""
    text: str
    line: int
    column: int
    depth: int


@dataclass
class Declaration:
    """property: value"""
    property: str
    value: str
    line: int
    column: int
    depth: int
    value_line: int = 0
    value_column: int = 0
    # Source (line, column) of each character of value; comments are not in value
    value_positions: tuple = field(default=(), repr=False, compare=False)

    def position_of(self, offset: int) -> tuple[int, int]:
        """Source position of value[offset]."""
        if 0 <= offset < len(self.value_positions):
            return self.value_positions[offset]
        return self.value_line, self.value_column + offset


@dataclass
class RuleSet:
    """selector { ... }"""
    selector: str
    line: int
    column: int
    depth: int
    children: list = field(default_factory=list)
    end_line: int = 0
    end_column: int = 0


@dataclass
class AtRule:
    """@name params; or @name params { ... }"""
    name: str
    params: str
    line: int
    column: int
    depth: int
    children: Optional[list] = None
    end_line: int = 0
    end_column: int = 0

    @property
    def has_block(self) -> bool:
        return self.children is not None


Node = Union[Comment, Declaration, RuleSet, AtRule]


@dataclass
class Stylesheet:
    """Root of a parsed stylesheet."""
    children: list
    lines: list[str]
    source: str = "<string>"

    def walk(self) -> Iterator[Node]:
        """Yield every node, depth-first in source order."""
        yield from _walk(self.children)

    def blocks(self) -> Iterator[list]:
        """Yield the child list of the root and of every nested block."""
        yield self.children
        for node in self.walk():
            if isinstance(node, (RuleSet, AtRule)) and node.children is not None:
                yield node.children

    def starts_line(self, line: int, column: int) -> bool:
        """True if only whitespace precedes (line, column)."""
        if not 1 <= line <= len(self.lines):
            return False
        return self.lines[line - 1][:column - 1].strip() == ""


def _walk(nodes: list) -> Iterator[Node]:
    stack = [iter(nodes)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        yield node
        if isinstance(node, (RuleSet, AtRule)) and node.children is not None:
            stack.append(iter(node.children))


# A buffered source character: (char, line, column)
_Char = tuple[str, int, int]

_AT_RULE = re.compile(r'@([\w-]+)\s*(.*)', re.DOTALL)

# Deepest block nesting accepted before giving up on a file
MAX_DEPTH = 200


class Parser:
    """
    Recursive-descent parser over raw characters.

    Usage:
        parser = Parser(source_text, source="main.scss")
        tree = parser.parse()
    """

    def __init__(self, text: str, source: str = "<string>"):
        self.text = text
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def parse(self) -> Stylesheet:
        children, _, _ = self._parse_block(depth=0, opener=None)
        # Split on "\n" only so line numbers agree with the parser's counting
        lines = [line.rstrip("\r") for line in self.text.split("\n")]
        return Stylesheet(children=children, lines=lines, source=self.source)

    # ------------------------------------------------------------------
    # Character handling
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        return self.text[idx] if idx < len(self.text) else ""

    def _advance(self) -> str:
        ch = self.text[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _take(self, buffer: list[_Char]) -> str:
        """Move the current character into the prelude buffer."""
        line, column = self.line, self.column
        ch = self._advance()
        buffer.append((ch, line, column))
        return ch

    # ------------------------------------------------------------------
    # Blocks and statements
    # ------------------------------------------------------------------

    def _parse_block(
        self,
        depth: int,
        opener: Optional[tuple[int, int]]
    ) -> tuple[list, int, int]:
        """
        Parse statements until the closing brace (or EOF at top level).

        Returns:
            Tuple of (children, end_line, end_column) where the end position
            is that of the closing brace.
        """
        children: list = []
        buffer: list[_Char] = []
        parens = 0

        while self.pos < len(self.text):
            ch = self._peek()

            if ch == "/" and self._peek(1) == "*":
                line, column = self.line, self.column
                text = self._read_block_comment()
                if not buffer:
                    children.append(Comment(text, line, column, depth))
                continue

            if ch == "/" and self._peek(1) == "/" and parens == 0:
                line, column = self.line, self.column
                text = self._read_line_comment()
                if not buffer:
                    children.append(Comment(text, line, column, depth))
                continue

            if ch in "\"'":
                self._read_string(buffer)
                continue

            if ch == "#" and self._peek(1) == "{":
                self._read_interpolation(buffer)
                continue

            if parens == 0 and ch == "{":
                if not buffer:
                    raise ParseError("Expected selector before '{'", self.line, self.column)
                open_line, open_column = self.line, self.column
                if depth + 1 > MAX_DEPTH:
                    raise ParseError(
                        f"Nesting too deep (more than {MAX_DEPTH} levels)", open_line, open_column
                    )
                self._advance()
                inner, end_line, end_column = self._parse_block(depth + 1, (open_line, open_column))
                node = self._block_node(buffer, depth, inner)
                node.end_line = end_line
                node.end_column = end_column
                children.append(node)
                buffer = []
                continue

            if parens == 0 and ch == ";":
                self._advance()
                if buffer:
                    children.append(self._statement(buffer, depth))
                    buffer = []
                continue

            if parens == 0 and ch == "}":
                if opener is None:
                    raise ParseError("Unexpected '}'", self.line, self.column)
                if buffer:
                    # Last declaration in a block may omit its semicolon
                    children.append(self._statement(buffer, depth))
                end_line, end_column = self.line, self.column
                self._advance()
                return children, end_line, end_column

            if ch == "(":
                parens += 1
            elif ch == ")" and parens > 0:
                parens -= 1

            if buffer or not ch.isspace():
                self._take(buffer)
            else:
                self._advance()

        if opener is not None:
            raise ParseError("Unclosed block, expected '}'", *opener)
        if buffer:
            _, line, column = buffer[0]
            raise ParseError("Unexpected end of file, expected ';' or '{'", line, column)
        return children, self.line, self.column

    def _block_node(self, buffer: list[_Char], depth: int, children: list) -> Union[RuleSet, AtRule]:
        text = "".join(ch for ch, _, _ in buffer).strip()
        _, line, column = buffer[0]
        if text.startswith("@"):
            name, params = self._split_at_rule(text, line, column)
            return AtRule(name, params, line, column, depth, children=children)
        return RuleSet(" ".join(text.split()), line, column, depth, children=children)

    def _statement(self, buffer: list[_Char], depth: int) -> Union[Declaration, AtRule]:
        text = "".join(ch for ch, _, _ in buffer)
        _, line, column = buffer[0]

        if text.startswith("@"):
            name, params = self._split_at_rule(text.rstrip(), line, column)
            return AtRule(name, params, line, column, depth)

        colon = _find_colon(text)
        if colon < 0:
            raise ParseError(f"Expected ':' in declaration '{text.strip()}'", line, column)

        prop = text[:colon].strip()
        if not prop:
            raise ParseError("Expected property name before ':'", line, column)

        idx = colon + 1
        while idx < len(text) and text[idx].isspace():
            idx += 1
        value = text[idx:].rstrip()
        if not value:
            raise ParseError(f"Expected value for property '{prop}'", line, column)

        positions = tuple((l, c) for _, l, c in buffer[idx:idx + len(value)])
        value_line, value_column = positions[0]
        return Declaration(prop, value, line, column, depth, value_line, value_column, positions)

    @staticmethod
    def _split_at_rule(text: str, line: int, column: int) -> tuple[str, str]:
        match = _AT_RULE.match(text)
        if not match:
            raise ParseError("Expected at-rule name after '@'", line, column)
        return match.group(1), match.group(2).strip()

    # ------------------------------------------------------------------
    # Lexical pieces
    # ------------------------------------------------------------------

    def _read_block_comment(self) -> str:
        line, column = self.line, self.column
        start = self.pos
        self._advance()
        self._advance()
        while self.pos < len(self.text):
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return self.text[start:self.pos]
            self._advance()
        raise ParseError("Unterminated comment", line, column)

    def _read_line_comment(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self._peek() != "\n":
            self._advance()
        return self.text[start:self.pos]

    def _read_string(self, buffer: list[_Char]) -> None:
        line, column = self.line, self.column
        quote = self._take(buffer)
        while self.pos < len(self.text):
            ch = self._peek()
            if ch == "\\":
                self._take(buffer)
                if self.pos < len(self.text):
                    self._take(buffer)
                continue
            if ch == "\n":
                break
            self._take(buffer)
            if ch == quote:
                return
        raise ParseError("Unterminated string", line, column)

    def _read_interpolation(self, buffer: list[_Char]) -> None:
        line, column = self.line, self.column
        self._take(buffer)  # '#'
        self._take(buffer)  # '{'
        depth = 1
        while self.pos < len(self.text):
            ch = self._take(buffer)
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return
        raise ParseError("Unterminated interpolation", line, column)


def _find_colon(text: str) -> int:
    """Index of the first ':' outside #{} interpolation, or -1."""
    depth = 0
    for idx, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == ":" and depth == 0:
            return idx
    return -1


def parse(text: str, source: str = "<string>") -> Stylesheet:
    """
    Parse stylesheet text.

    Args:
        text: SCSS source
        source: Path used for reporting

    Returns:
        Stylesheet tree

    Raises:
        ParseError: On malformed source
    """
    return Parser(text, source=source).parse()
