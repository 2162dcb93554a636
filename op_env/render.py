"""
Output renderers for op-env.

Each renderer takes a collection of fields that all carry a value and
returns the text to print. Use `render` to filter and dispatch by format.

Formats:
    json    {"LABEL": "value", ...} in item order
    dotenv  LABEL=value lines sorted by label, case-insensitively
    shell   export LABEL=value lines, same order as dotenv
"""

from __future__ import annotations

import json
import shlex
from enum import Enum
from typing import Callable, Iterable, Sequence

from .fields import Field, present_fields


class OutputFormat(str, Enum):
    """The supported output formats."""

    JSON = "json"
    DOTENV = "dotenv"
    SHELL = "shell"

    @classmethod
    def parse(cls, text: str) -> "OutputFormat":
        """
        Look up a format by name.

        Raises:
            ValueError: If the name is not one of the supported formats
        """
        try:
            return cls(text)
        except ValueError:
            choices = ", ".join(fmt.value for fmt in cls)
            raise ValueError(f"Unknown output format '{text}'. Choose from: {choices}") from None

    @classmethod
    def choices(cls) -> list[str]:
        return [fmt.value for fmt in cls]


def shell_escape(text: str) -> str:
    """Quote a string so a POSIX shell reads it back unchanged."""
    return shlex.quote(text)


def render_json(fields: Iterable[Field]) -> str:
    """Render fields as a pretty-printed JSON object; later labels overwrite earlier ones."""
    mapping: dict[str, str | None] = {}
    for field in fields:
        mapping[field.label] = field.value

    try:
        return json.dumps(mapping, indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Unable to serialize fields as JSON: {exc}") from exc


def render_dotenv(fields: Iterable[Field]) -> str:
    """Render fields as sorted, shell-escaped LABEL=VALUE lines."""
    return "".join(f"{line}\n" for line in _assignments(fields))


def render_shell(fields: Iterable[Field]) -> str:
    """Render fields as sorted export statements for a POSIX shell."""
    return "".join(f"export {line}\n" for line in _assignments(fields))


def _assignments(fields: Iterable[Field]) -> list[str]:
    # sorted() is stable, so equal labels keep their item order
    ordered = sorted(fields, key=lambda field: field.label.lower())
    return [f"{shell_escape(field.label)}={shell_escape(field.value or '')}" for field in ordered]


RENDERERS: dict[OutputFormat, Callable[[Iterable[Field]], str]] = {
    OutputFormat.JSON: render_json,
    OutputFormat.DOTENV: render_dotenv,
    OutputFormat.SHELL: render_shell,
}


def render(fmt: OutputFormat, fields: Sequence[Field]) -> str:
    """Drop fields without a value and render the rest in the given format."""
    return RENDERERS[fmt](present_fields(fields))


class SerializationError(Exception):
    """Exception raised when fields cannot be serialized."""
