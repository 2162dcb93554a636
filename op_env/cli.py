"""
Command-line interface for op-env.

This module provides the CLI entry point and argument parsing.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .backends import BackendRegistry, SecretsBackend

# Import to register built-in backends
from .backends.built_in import register_built_in_backends  # noqa: F401
from .config import ConfigurationError, OpEnvConfig
from .render import OutputFormat
from .transfer import SecretTransfer

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    try:
        return _main(argv)
    except KeyboardInterrupt:
        err_console.print("[yellow]Cancelled.[/yellow]")
        return 130
    except Exception as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="op-env",
        description="Export secrets from a 1Password item, or import them from an env file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  op-env                                  # Print dev/main as dotenv lines
  op-env --format json                    # Print as a JSON object
  eval "$(op-env -v prod -i api -f shell)"  # Export into the current shell
  op-env export --format dotenv > .env    # Explicit export command
  op-env import --env-file .env           # Set every key of .env on the item
  op-env --list-backends                  # List available backends
        """,
    )

    parser.add_argument(
        "-v",
        "--vault",
        help="The vault that contains the secrets (default: dev)",
    )

    parser.add_argument(
        "-i",
        "--item",
        help="The item that contains the secrets (default: main)",
    )

    parser.add_argument(
        "-f",
        "--format",
        choices=OutputFormat.choices(),
        help="Output format when exporting (default: dotenv)",
    )

    parser.add_argument(
        "--backend",
        help="Secrets-manager backend to use (default: 1password)",
    )

    parser.add_argument(
        "--config",
        help="Configuration file path",
    )

    parser.add_argument(
        "--list-backends",
        action="store_true",
        help="List all available backends",
    )

    parser.add_argument(
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be used multiple times)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="op-env 1.0.0",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="{export,import}")

    export_parser = subparsers.add_parser("export", help="Export secrets from the item")
    export_parser.add_argument(
        "-f",
        "--format",
        choices=OutputFormat.choices(),
        default=argparse.SUPPRESS,
        help="The output format (default: dotenv)",
    )

    import_parser = subparsers.add_parser("import", help="Import secrets from a file into the item")
    import_parser.add_argument(
        "-e",
        "--env-file",
        required=True,
        type=Path,
        help="Path to the file containing secrets",
    )

    return parser


def _main(argv: list[str] | None) -> int:
    args = build_parser().parse_args(argv)

    _setup_logging(args.verbose)

    if args.list_backends:
        _display_backends()
        return 0

    config = OpEnvConfig.load(args.config)

    vault = args.vault if args.vault is not None else config.vault
    item = args.item if args.item is not None else config.item
    transfer = SecretTransfer(_create_backend(args.backend, config))

    if args.command == "import":
        result = transfer.import_file(vault, item, args.env_file)
        logger.info("Imported keys: %s", ", ".join(result.imported))
        console.print("[green]All secrets imported successfully![/green]")
        return 0

    fmt = OutputFormat.parse(args.format) if args.format else config.format
    logger.info("Exporting %s/%s as %s", vault, item, fmt.value)

    sys.stdout.write(transfer.export(vault, item, fmt))
    sys.stdout.flush()
    return 0


def _setup_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _create_backend(name: str | None, config: OpEnvConfig) -> SecretsBackend:
    """Instantiate the backend named on the command line or in the config file."""
    backend_name = name or config.backend.type
    options = config.backend.options if backend_name == config.backend.type else {}

    if not BackendRegistry.is_registered(backend_name):
        available = ", ".join(info.name for info in BackendRegistry.list_backends())
        raise ConfigurationError(f"Unknown backend '{backend_name}'. Available backends: {available}")

    logger.debug("Using backend %s", backend_name)
    return BackendRegistry.get(backend_name, options)


def _display_backends() -> None:
    """Display all available backends."""
    backends = BackendRegistry.list_backends()

    if not backends:
        console.print("[yellow]No backends registered.[/yellow]")
        return

    table = Table(title="Available Backends")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="green")
    table.add_column("Version", style="yellow")

    for backend in backends:
        table.add_row(backend.name, backend.description, backend.version)

    console.print(table)
