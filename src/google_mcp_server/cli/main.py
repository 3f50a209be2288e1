"""Command-line interface for google-mcp-server."""

import asyncio
import logging
import sys

import click

from google_mcp_server.__version__ import __version__
from google_mcp_server.config import Settings
from google_mcp_server.errors import ConfigurationError


def _load_settings() -> Settings:
    """Read settings from the environment, exiting with status 1 if incomplete."""
    try:
        return Settings.from_env()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _configure_logging(settings: Settings) -> None:
    # stdout carries the MCP protocol stream
    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context) -> None:
    """Google MCP Server - Connect MCP clients to Google Workspace APIs.

    Without a subcommand, starts the stdio MCP server. Tools cover:
    - Drive (files, folders, sharing)
    - Calendar (events, calendars, availability)
    - Docs, Slides and Sheets
    - Contacts and Tasks
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@main.command()
def serve() -> None:
    """Start the MCP server over stdio.

    Requires GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET. Cached tokens are
    read from GOOGLE_TOKEN_PATH (default: ~/.google-mcp/credentials.json).

    This command is typically invoked by an MCP client.
    """
    settings = _load_settings()
    _configure_logging(settings)

    from google_mcp_server.server import GoogleMcpServer

    server = GoogleMcpServer(settings)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)


@main.command()
def setup() -> None:
    """Authorize access to Google Workspace.

    This will:
    1. Open browser for OAuth2 consent flow
    2. Store tokens at GOOGLE_TOKEN_PATH (default: ~/.google-mcp/credentials.json)
    """
    settings = _load_settings()
    _configure_logging(settings)

    from google_mcp_server.auth import CredentialManager

    manager = CredentialManager(settings)

    click.echo("Starting OAuth authentication flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        asyncio.run(manager.authenticate())
    except Exception as e:
        click.echo(f"Authentication failed: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Authentication successful!")
    click.echo(f"Token stored at: {manager.token_path}")


@main.command()
def doctor() -> None:
    """Check configuration and cached token status."""
    from google_mcp_server.auth import CredentialManager, TokenStatus

    settings = _load_settings()
    manager = CredentialManager(settings)
    status = manager.get_status()

    click.echo("Google MCP Server Status:")
    click.echo("")
    click.echo(f"  Token file: {manager.token_path}")
    click.echo(f"  Token status: {status.value}")
    click.echo("")

    if status == TokenStatus.MISSING:
        click.echo("Run 'google-mcp-server setup' to authenticate.")
        sys.exit(1)
    elif status == TokenStatus.INVALID:
        click.echo("Token file corrupted. Run 'google-mcp-server setup' to re-authenticate.")
        sys.exit(1)
    elif status == TokenStatus.EXPIRED:
        click.echo("Token expired; it will refresh automatically on use.")
    else:
        click.echo("✓ Ready to use!")


if __name__ == "__main__":
    main()
