"""Command-line interface for s3-console.

Commands:
    - serve: Run the HTTP server
    - generate-secret: Print a random value for S3_CONSOLE_SESSION_SECRET

Server settings not given as options are read from S3_CONSOLE_* environment
variables.
"""

import secrets
from typing import Annotated, Optional

import typer
import uvicorn

from . import __version__
from .core import settings

app = typer.Typer(
    name="s3-console",
    help="Browser-facing administrative API for Amazon S3.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"s3-console {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    S3-Console: connect to AWS and manage buckets and objects over HTTP.
    """
    pass


@app.command("serve")
def serve_cmd(
    host: Annotated[
        Optional[str], typer.Option("--host", help="Interface to bind")
    ] = None,
    port: Annotated[
        Optional[int], typer.Option("--port", help="Port to listen on")
    ] = None,
    reload: Annotated[
        bool, typer.Option("--reload", help="Reload on code changes (development)")
    ] = False,
) -> None:
    """
    Run the s3-console HTTP server.

    Examples:
        s3-console serve
        s3-console serve --host 0.0.0.0 --port 8080
    """
    uvicorn.run(
        "s3_console.api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("generate-secret")
def generate_secret_cmd(
    length: Annotated[
        int, typer.Option("--bytes", help="Number of random bytes", min=16)
    ] = 32,
) -> None:
    """
    Print a random session secret.

    Example:
        export S3_CONSOLE_SESSION_SECRET=$(s3-console generate-secret)
    """
    typer.echo(secrets.token_urlsafe(length))


if __name__ == "__main__":
    app()
