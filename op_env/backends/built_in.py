"""Built-in backend loader for op-env.

This module registers all built-in backends with the BackendRegistry.
"""

from . import BackendRegistry
from .onepassword import OnePasswordBackend


def register_built_in_backends() -> None:
    """Register all built-in backends with the registry.

    This function is idempotent - it can be called multiple times safely.
    """
    if not BackendRegistry.is_registered(OnePasswordBackend.info.name):
        BackendRegistry.register(OnePasswordBackend)


# Auto-register on import
register_built_in_backends()
