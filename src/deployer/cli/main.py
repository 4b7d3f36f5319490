"""Command-line interface for Deployer."""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO

import click

from deployer import __version__
from deployer.auth.signature import signature_header
from deployer.core.config import load_server_settings
from deployer.core.env import load_environment
from deployer.core.logging import setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Deployer: signed webhook intake for deployment nodes.

    Deployer accepts node announcements only when they carry a valid
    X-Hub-Signature-256 HMAC signature.
    """


@cli.command()
@click.option(
    "--secret",
    envvar="DEPLOYER_WEBHOOK_SECRET",
    required=True,
    help="Shared webhook secret (default: $DEPLOYER_WEBHOOK_SECRET)",
)
@click.argument("payload", type=click.File("rb"), default="-")
def sign(secret: str, payload: BinaryIO) -> None:
    """Print the X-Hub-Signature-256 header value for PAYLOAD (or stdin)."""
    body = payload.read()
    click.echo(signature_header(secret, body))


@cli.command()
@click.option("--host", default=None, help="Server host")
@click.option("--port", type=int, default=None, help="Server port")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    help="Logging level (default: INFO)",
)
@click.option("--log-file", default=None, help="Also write logs to this file")
@click.option(
    "--access-log/--no-access-log",
    default=True,
    help="Log one line per request (default: on)",
)
def server(
    host: str | None,
    port: int | None,
    reload: bool,
    log_level: str,
    log_file: str | None,
    access_log: bool,
) -> None:
    """Run the deploy webhook HTTP server."""
    load_environment()
    setup_logging(level=log_level, log_file=log_file, access_log=access_log)

    try:
        settings = load_server_settings()
        resolved_host = host if host is not None else settings.host
        resolved_port = port if port is not None else settings.port

        import uvicorn

        from deployer.server.app import create_app

        if reload:
            # uvicorn can only reload an import string; the factory re-reads settings.
            uvicorn.run(
                "deployer.server.app:create_app",
                factory=True,
                host=resolved_host,
                port=resolved_port,
                reload=True,
                log_config=None,
                access_log=access_log,
            )
            return

        uvicorn.run(
            create_app(settings),
            host=resolved_host,
            port=resolved_port,
            log_config=None,
            access_log=access_log,
        )
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(1)
    except Exception as exc:
        logger.exception("Unexpected error during server execution: %s", exc)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    cli.main(args=argv, prog_name="deployer")


if __name__ == "__main__":
    main()
