"""
Env file parser for op-env.

This module reads files of KEY=VALUE assignments, one per line, following
the usual dotenv conventions:

    # comments and blank lines are skipped
    export API_KEY=abc123
    GREETING="hello world"
    MESSAGE='it'"'"'s a test'
    MULTILINE='first
    second'

Keys and values are read like POSIX shell words: single quotes are literal,
double quotes honour backslash escapes, and quoted and unquoted segments
written next to each other are joined. `$` is never expanded.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_BLANKS = " \t"

_DOUBLE_QUOTE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "$": "$",
    "`": "`",
    "n": "\n",
    "t": "\t",
    "r": "\r",
}


@dataclass
class EnvVariable:
    """Represents a single assignment from an env file."""

    key: str
    value: str
    line_number: int


def parse_env(content: str) -> list[EnvVariable]:
    """
    Parse env file content into assignments.

    Args:
        content: The text of the env file

    Returns:
        The assignments in file order, duplicates included

    Raises:
        ParseError: If a line is not a valid assignment or a quote is left open
    """
    return _Scanner(content).assignments()


def parse_env_mapping(content: str) -> dict[str, str]:
    """Parse env file content into a mapping; a repeated key keeps its last value."""
    mapping: dict[str, str] = {}
    for variable in parse_env(content):
        mapping[variable.key] = variable.value
    return mapping


def load_env_file(path: str | Path) -> dict[str, str]:
    """Read and parse a UTF-8 env file."""
    path = Path(path)

    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ParseError(f"Env file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"Unable to read env file {path}: {exc}") from exc

    return parse_env_mapping(content)


class _Scanner:
    """Single pass over the file text; quoted values may span lines."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line_start = 0
        self._line = 1
        self._line_pos = 0

    def assignments(self) -> list[EnvVariable]:
        variables = []

        while self.pos < len(self.text):
            self.line_start = self.pos
            self._skip_blanks()
            char = self._peek()

            if char == "\n":
                self.pos += 1
            elif char == "#":
                self._skip_line()
            elif char:
                variables.append(self._assignment())

        return variables

    def _assignment(self) -> EnvVariable:
        line_number = self._line_number(self.line_start)

        if self.text.startswith("export", self.pos) and self._peek(6) in (" ", "\t"):
            self.pos += len("export")
            self._skip_blanks()

        key = self._word(stop_at_equals=True)
        self._skip_blanks()
        if self._peek() != "=" or not key:
            raise self._error("expected KEY=VALUE")
        self.pos += 1

        if self._skip_blanks() and self._peek() == "#":
            value = ""
        else:
            value = self._word(stop_at_equals=False)

        self._skip_blanks()
        char = self._peek()
        if char == "#":
            self._skip_line()
        elif char == "\n":
            self.pos += 1
        elif char:
            raise self._error("unexpected text after value")

        return EnvVariable(key=key, value=value, line_number=line_number)

    def _word(self, stop_at_equals: bool) -> str:
        parts = []

        while True:
            char = self._peek()
            if not char or char == "\n" or char in _BLANKS:
                break
            if char == "=" and stop_at_equals:
                break

            if char == "'":
                parts.append(self._single_quoted())
            elif char == '"':
                parts.append(self._double_quoted())
            elif char == "\\":
                escaped = self._peek(1)
                self.pos += 2 if escaped else 1
                # backslash-newline joins the next line
                if escaped != "\n":
                    parts.append(escaped or "\\")
            else:
                parts.append(char)
                self.pos += 1

        return "".join(parts)

    def _single_quoted(self) -> str:
        end = self.text.find("'", self.pos + 1)
        if end == -1:
            raise self._error("unterminated single quote")

        value = self.text[self.pos + 1 : end]
        self.pos = end + 1
        return value

    def _double_quoted(self) -> str:
        parts = []
        self.pos += 1

        while True:
            char = self._peek()
            if not char:
                raise self._error("unterminated double quote")

            if char == '"':
                self.pos += 1
                return "".join(parts)

            if char == "\\":
                escaped = self._peek(1)
                if escaped == "\n":
                    self.pos += 2
                    continue
                if escaped in _DOUBLE_QUOTE_ESCAPES:
                    parts.append(_DOUBLE_QUOTE_ESCAPES[escaped])
                    self.pos += 2
                    continue

            parts.append(char)
            self.pos += 1

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _skip_blanks(self) -> bool:
        start = self.pos
        while self._peek() and self._peek() in _BLANKS:
            self.pos += 1
        return self.pos > start

    def _skip_line(self) -> None:
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end == -1 else end + 1

    def _line_number(self, pos: int) -> int:
        # positions only move forward, so count from the last one seen
        self._line += self.text.count("\n", self._line_pos, pos)
        self._line_pos = pos
        return self._line

    def _error(self, message: str) -> "ParseError":
        end = self.text.find("\n", self.line_start)
        line = self.text[self.line_start : len(self.text) if end == -1 else end]
        line_number = self._line_number(self.line_start)
        return ParseError(message, line_number=line_number, line=line.strip())


class ParseError(Exception):
    """Exception raised when an env file cannot be parsed."""

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None):
        self.message = message
        self.line_number = line_number
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"Unable to parse env file at line {self.line_number} ({self.message}): {self.line}"
