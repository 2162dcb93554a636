"""
Export and import of item secrets for op-env.

This module ties a backend to the field parser, the renderers and the
env file parser.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .backends import ExternalToolError, SecretsBackend
from .envfile import load_env_file
from .fields import parse_item
from .render import OutputFormat, render

logger = logging.getLogger(__name__)


class SecretTransfer:
    """
    Moves secrets between an item and local text.

    This class handles:
    - Fetching an item and rendering its fields
    - Reading an env file and setting each key on an item

    Example:
        transfer = SecretTransfer(OnePasswordBackend())
        print(transfer.export("dev", "main", OutputFormat.SHELL), end="")
    """

    def __init__(self, backend: SecretsBackend) -> None:
        self.backend = backend

    def export(self, vault: str, item: str, fmt: OutputFormat) -> str:
        """
        Fetch an item and render the fields that have a value.

        Raises:
            ExternalToolError: If the backend cannot fetch the item
            InvalidResponse: If the item JSON has an unexpected shape
        """
        raw = self.backend.fetch_item(vault, item)
        fields = parse_item(raw)
        logger.info("Fetched %d field(s) from %s/%s", len(fields), vault, item)

        return render(fmt, fields)

    def import_file(self, vault: str, item: str, path: str | Path) -> ImportResult:
        """
        Set every key of an env file on an item.

        The whole file is parsed before the first field is set, so a syntax
        error leaves the item untouched. Keys are then set one at a time in
        file order and the first failure stops the import; keys set before
        it stay set.

        Raises:
            ParseError: If the env file cannot be read or parsed
            ExternalToolError: If the backend fails to set a key
        """
        variables = load_env_file(path)
        logger.info("Importing %d key(s) from %s into %s/%s", len(variables), path, vault, item)

        result = ImportResult(vault=vault, item=item)

        for key, value in variables.items():
            try:
                self.backend.set_field(vault, item, key, value)
            except ExternalToolError as exc:
                if exc.key is None:
                    exc.key = key
                raise
            result.imported.append(key)

        return result


@dataclass
class ImportResult:
    """Keys that were set on an item, in the order they were set."""

    vault: str
    item: str
    imported: list[str] = field(default_factory=list)
