"""
Parser for vending machine test scripts.

A script is a sequence of commands such as::

    construct(5, 10, 25; 2)
    configure("Coke", "Water"; 250, 150)
    load(1, 1, 1; 1, 1)
    insert(100) insert(200) press(0)
    extract()
    CHECK_DELIVERY(50, "Coke")

Whitespace between tokens is free-form and ``//`` starts a comment running
to the end of the line.
"""
import re
from typing import NamedTuple, Union

from vendsim.exceptions import ScriptParseError

COMMANDS = (
    "construct", "configure", "load", "unload", "extract",
    "insert", "press", "CHECK_DELIVERY", "CHECK_TEARDOWN",
)

# Argument shapes: one character per value ("i" integer, "s" string), groups joined by ";"
SIGNATURES = {
    "construct": re.compile(r"i+;i"),
    "configure": re.compile(r"s+;i+"),
    "load": re.compile(r"i+;i+"),
    "unload": re.compile(r""),
    "extract": re.compile(r""),
    "insert": re.compile(r"i"),
    "press": re.compile(r"i"),
    "CHECK_DELIVERY": re.compile(r"is*"),
    "CHECK_TEARDOWN": re.compile(r"i;i(;s+)?"),
}

TOKEN_RE = re.compile(r"""
    (?P<ws>[ \t\r\f]+)
  | (?P<newline>\n)
  | (?P<comment>//[^\n]*)
  | (?P<name>[A-Za-z_][A-Za-z_0-9]*)
  | (?P<string>"(?:\\.|[^"\\\n])*")
  | (?P<int>-?(?:0|[1-9][0-9]*)(?![0-9]))
  | (?P<punct>[(),;])
""", re.VERBOSE)

ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f",
    '"': '"', "'": "'", "\\": "\\",
}


class Token(NamedTuple):
    kind: str
    text: str
    line: int
    column: int


class Command(NamedTuple):
    name: str
    args: tuple
    line: int

    def __str__(self):
        groups = "; ".join(", ".join(_render(value) for value in group) for group in self.args)
        return f"{self.name}({groups})"


def _render(value: Union[int, str]) -> str:
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return str(value)


def _unescape(literal: str, line: int, column: int) -> str:
    body = literal[1:-1]
    out = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\":
            escaped = body[i + 1]
            if escaped not in ESCAPES:
                raise ScriptParseError(f"Unknown escape sequence '\\{escaped}'", line, column + i + 1)
            out.append(ESCAPES[escaped])
            i += 2
        else:
            out.append(char)
            i += 1
    return "".join(out)


def tokenize(text: str) -> list[Token]:
    tokens = []
    line, line_start, pos = 1, 0, 0
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        column = pos - line_start + 1
        if not match:
            raise ScriptParseError(f"Unexpected character {text[pos]!r}", line, column)
        kind = match.lastgroup
        if kind == "newline":
            line += 1
            line_start = match.end()
        elif kind not in ("ws", "comment"):
            tokens.append(Token(kind, match.group(), line, column))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self, expected: str) -> Token:
        token = self.peek()
        if token is None:
            last = self.tokens[-1]
            raise ScriptParseError(f"Expected {expected} but the script ended", last.line, last.column)
        self.pos += 1
        return token

    def expect_punct(self, char: str) -> Token:
        token = self.next(f"'{char}'")
        if token.kind != "punct" or token.text != char:
            raise ScriptParseError(f"Expected '{char}' but found '{token.text}'", token.line, token.column)
        return token

    def value(self) -> Union[int, str]:
        token = self.next("a value")
        if token.kind == "int":
            return int(token.text)
        if token.kind == "string":
            return _unescape(token.text, token.line, token.column)
        raise ScriptParseError(f"Expected an integer or string but found '{token.text}'", token.line, token.column)

    def command(self) -> Command:
        token = self.next("a command")
        if token.kind != "name" or token.text not in COMMANDS:
            raise ScriptParseError(f"Unknown command '{token.text}'", token.line, token.column)
        self.expect_punct("(")

        groups = []
        following = self.peek()
        if following is not None and following.kind == "punct" and following.text == ")":
            self.pos += 1
        else:
            group = [self.value()]
            while True:
                sep = self.next("',', ';' or ')'")
                if sep.kind == "punct" and sep.text == ",":
                    group.append(self.value())
                elif sep.kind == "punct" and sep.text == ";":
                    groups.append(tuple(group))
                    group = [self.value()]
                elif sep.kind == "punct" and sep.text == ")":
                    groups.append(tuple(group))
                    break
                else:
                    raise ScriptParseError(f"Expected ',', ';' or ')' but found '{sep.text}'", sep.line, sep.column)

        shape = ";".join("".join("i" if isinstance(v, int) else "s" for v in group) for group in groups)
        if not SIGNATURES[token.text].fullmatch(shape):
            raise ScriptParseError(f"Malformed arguments for {token.text}", token.line, token.column)
        return Command(token.text, tuple(groups), token.line)


def parse_script(text: str) -> list[Command]:
    """Parses a whole script. Raises ScriptParseError on the first syntax error."""
    parser = _Parser(tokenize(text))
    commands = []
    while parser.peek() is not None:
        commands.append(parser.command())
    return commands
