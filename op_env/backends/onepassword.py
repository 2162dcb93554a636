"""
1Password CLI backend for op-env.

This module talks to 1Password through its `op` command-line program,
which must be installed and signed in. Any program that accepts the same
two commands can be used in its place through the `executable` option:

    op item get <item> --vault <vault> --format json
    op item edit <item> --vault <vault> <KEY>=<VALUE>

Configuration (.op-env.yaml):
    backend:
      type: 1password
      config:
        executable: /usr/local/bin/op
"""

from __future__ import annotations

import logging
import subprocess
from typing import Any

from . import BackendInfo, ExternalToolError, SecretsBackend

logger = logging.getLogger(__name__)


class OnePasswordBackend(SecretsBackend):
    """
    1Password backend driven by the `op` CLI.

    Every call starts one `op` process and waits for it to exit. Output is
    captured; no shell is involved and no timeout is applied.
    """

    info = BackendInfo(
        name="1password",
        description="1Password via the op CLI",
        version="1.0.0",
        author="op-env contributors",
    )

    def __init__(self, executable: str = "op") -> None:
        super().__init__()
        self._executable = executable

    @property
    def executable(self) -> str:
        return self._executable

    def fetch_item(self, vault: str, item: str) -> bytes:
        """Run `op item get` and return its JSON output."""
        command = [self._executable, "item", "get", item, "--vault", vault, "--format", "json"]
        logger.debug("Fetching item %r from vault %r", item, vault)

        result = self._run(command, f"Failed to fetch item '{item}' from vault '{vault}'")
        return result.stdout

    def set_field(self, vault: str, item: str, key: str, value: str) -> None:
        """Run `op item edit` with a single KEY=VALUE assignment."""
        command = [self._executable, "item", "edit", item, "--vault", vault, f"{key}={value}"]
        logger.debug("Setting field %r on item %r in vault %r", key, item, vault)

        self._run(
            command,
            f"Failed to import secret: {key}",
            key=key,
            redacted=[*command[:-1], f"{key}=***"],
        )

    def _run(
        self,
        command: list[str],
        failure: str,
        key: str | None = None,
        redacted: list[str] | None = None,
    ) -> subprocess.CompletedProcess:
        shown = redacted or command

        try:
            result = subprocess.run(command, capture_output=True, check=False)
        except OSError as exc:
            raise ExternalToolError(
                f"{failure}: unable to run '{self._executable}': {exc}",
                backend=self.info.name,
                command=shown,
                key=key,
            ) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            logger.info("%s exited with status %d", self._executable, result.returncode)
            raise ExternalToolError(
                failure,
                backend=self.info.name,
                command=shown,
                key=key,
                stderr=stderr,
                returncode=result.returncode,
            )

        return result

    def configure(self, options: dict[str, Any]) -> None:
        """Configure the backend with options from the config file."""
        if "executable" in options:
            self._executable = str(options["executable"])
