"""
Shared fixtures for the op-env tests.
"""

import json
import tempfile
from pathlib import Path

import pytest

from op_env.backends import BackendInfo, ExternalToolError, SecretsBackend


class FakeBackend(SecretsBackend):
    """In-memory backend that records every call."""

    info = BackendInfo(
        name="fake",
        description="In-memory backend for tests",
    )

    def __init__(self, fields=None, response=None, fail_on=()):
        self.fields = list(fields or [])
        self.response = response
        self.fail_on = set(fail_on)
        self.calls = []

    def fetch_item(self, vault: str, item: str) -> bytes:
        self.calls.append(("get", vault, item))
        if self.response is not None:
            return self.response
        return json.dumps({"fields": self.fields}).encode()

    def set_field(self, vault: str, item: str, key: str, value: str) -> None:
        self.calls.append(("edit", vault, item, key, value))
        if key in self.fail_on:
            raise ExternalToolError(
                f"Failed to import secret: {key}",
                backend=self.info.name,
                key=key,
                stderr="permission denied",
                returncode=1,
            )
        self.fields.append({"label": key, "value": value})


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_backend():
    """A fake backend holding a small item."""
    return FakeBackend(
        fields=[
            {"label": "b", "value": "2", "type": "CONCEALED"},
            {"label": "A", "value": "1"},
            {"label": "notes", "purpose": "NOTES"},
        ]
    )


@pytest.fixture
def backend_class():
    """The FakeBackend class, for tests that build their own."""
    return FakeBackend
