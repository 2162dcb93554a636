"""
Backend Interface and Registry for op-env.

A backend is the boundary between op-env and the secrets manager. It knows
how to fetch an item as JSON and how to set a single field on an item.
Everything else (parsing, rendering, env files) stays on this side.

Usage:
    from op_env.backends import BackendInfo, BackendRegistry, SecretsBackend

    class MyBackend(SecretsBackend):
        info = BackendInfo(name="my-backend", description="My secrets manager")

        def fetch_item(self, vault: str, item: str) -> bytes:
            ...

        def set_field(self, vault: str, item: str, key: str, value: str) -> None:
            ...

    BackendRegistry.register(MyBackend)
    backend = BackendRegistry.get("my-backend")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence


@dataclass
class BackendInfo:
    """Metadata about a backend."""

    name: str
    description: str
    version: str = "1.0.0"
    author: str = ""


class SecretsBackend(ABC):
    """
    Base class for all secrets-manager backends.

    To create a custom backend:
    1. Inherit from SecretsBackend
    2. Set the `info` class attribute with backend metadata
    3. Implement `fetch_item` and `set_field`
    4. Optionally implement `configure` to accept options from the config file
    5. Register the backend with BackendRegistry.register()
    """

    info: BackendInfo

    @abstractmethod
    def fetch_item(self, vault: str, item: str) -> bytes:
        """
        Fetch an item rendered as JSON.

        Args:
            vault: The vault that holds the item
            item: The item name

        Returns:
            The raw JSON document, shaped as {"fields": [{"label", "value"}]}

        Raises:
            ExternalToolError: If the item cannot be fetched
        """
        ...

    @abstractmethod
    def set_field(self, vault: str, item: str, key: str, value: str) -> None:
        """
        Set a single field on an item.

        Raises:
            ExternalToolError: If the field cannot be set
        """
        ...

    def configure(self, options: dict[str, Any]) -> None:
        """Apply options from the config file. The default accepts none."""


class BackendRegistry:
    """
    Registry of backend classes, keyed by their `info.name`.
    """

    _backends: dict[str, type[SecretsBackend]] = {}

    @classmethod
    def register(cls, backend_class: type[SecretsBackend], name: str | None = None) -> None:
        """
        Register a backend class with the registry.

        Raises:
            ValueError: If the backend class has no BackendInfo
            KeyError: If a backend with the same name is already registered
        """
        if not isinstance(getattr(backend_class, "info", None), BackendInfo):
            raise ValueError(f"Backend {backend_class.__name__} must have a BackendInfo attribute")

        backend_name = name or backend_class.info.name

        if backend_name in cls._backends:
            raise KeyError(f"Backend '{backend_name}' is already registered")

        cls._backends[backend_name] = backend_class

    @classmethod
    def get(cls, name: str, options: dict[str, Any] | None = None) -> SecretsBackend:
        """
        Create a configured backend instance.

        Raises:
            KeyError: If no backend with the given name is registered
        """
        if name not in cls._backends:
            available = ", ".join(cls._backends.keys())
            raise KeyError(f"Backend '{name}' not found. Available backends: {available}")

        instance = cls._backends[name]()
        if options:
            instance.configure(options)
        return instance

    @classmethod
    def list_backends(cls) -> list[BackendInfo]:
        return [backend.info for backend in cls._backends.values()]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._backends

    @classmethod
    def clear(cls) -> None:
        """Forget all registered backends."""
        cls._backends.clear()


class BackendError(Exception):
    """Base exception for backend-related errors."""

    def __init__(self, message: str, backend: str | None = None):
        self.message = message
        self.backend = backend
        super().__init__(message)

    def __str__(self) -> str:
        if self.backend:
            return f"[{self.backend}] {self.message}"
        return self.message


class ExternalToolError(BackendError):
    """
    Exception raised when the external tool cannot be started or exits with an error.

    Carries the command that was run, the field key being imported (if any),
    and whatever the tool wrote to stderr.
    """

    def __init__(
        self,
        message: str,
        backend: str | None = None,
        command: Sequence[str] | None = None,
        key: str | None = None,
        stderr: str = "",
        returncode: int | None = None,
    ):
        super().__init__(message, backend=backend)
        self.command = list(command) if command else []
        self.key = key
        self.stderr = stderr
        self.returncode = returncode

    def __str__(self) -> str:
        text = super().__str__()
        if self.key and self.key not in self.message:
            text += f" (key: {self.key})"
        details = "; ".join(line.strip() for line in self.stderr.splitlines() if line.strip())
        if details:
            text += f": {details}"
        return text
