"""
op-env: Export and import secrets between a 1Password item and env files.

Secrets are read with the 1Password `op` CLI and printed as JSON, dotenv
lines, or shell export statements. An env file can be written back to an
item, one field per key.

Basic Usage:
    op-env --vault dev --item main --format shell
    op-env import --env-file .env
"""

from .backends import BackendRegistry, ExternalToolError, SecretsBackend
from .cli import main
from .config import OpEnvConfig
from .envfile import ParseError, load_env_file
from .fields import Field, InvalidResponse
from .render import OutputFormat, render
from .transfer import SecretTransfer

__version__ = "1.0.0"
__all__ = [
    "main",
    "OpEnvConfig",
    "SecretTransfer",
    "SecretsBackend",
    "BackendRegistry",
    "ExternalToolError",
    "InvalidResponse",
    "ParseError",
    "Field",
    "OutputFormat",
    "render",
    "load_env_file",
]
