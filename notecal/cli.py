"""CLI for notecal: turn #event lines in Obsidian notes into calendar events."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from notecal import __version__
from notecal.config import (
    PluginSettingsStore,
    get_settings,
    override_settings,
    resolve_credentials,
)
from notecal.errors import TokenAcquisitionError
from notecal.main import authorize, build_runtime_context, process_path, run_watch
from notecal.notifications import NullNotifier
from notecal.utils import get_logger, setup_logging

logger = get_logger("cli")

# CLI key -> plugin settings field
SETTING_KEYS = {
    "client-id": "client_id",
    "client-secret": "client_secret",
    "redirect-uri": "redirect_uri",
}


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """notecal: create Google Calendar events from Markdown notes."""
    setup_logging()


@cli.command()
@click.option(
    "--vault",
    "vault_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Obsidian vault to watch (defaults to OBSIDIAN_VAULT_PATH)",
)
@click.option(
    "--scan-on-start",
    is_flag=True,
    default=False,
    help="Process every note once before watching for changes",
)
def watch(vault_path: Path | None, scan_on_start: bool) -> None:
    """Watch the vault and create events whenever a note changes."""
    overrides: dict[str, object] = {}
    if vault_path is not None:
        overrides["obsidian_vault_path"] = vault_path
    if scan_on_start:
        overrides["scan_on_start"] = True

    with override_settings(**overrides) as settings:
        context = build_runtime_context(settings)
        try:
            asyncio.run(run_watch(context))
        except KeyboardInterrupt:
            click.echo("\nnotecal stopped by user")


@cli.command()
@click.argument("note", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--quiet", is_flag=True, default=False, help="Suppress notices")
def process(note: Path, quiet: bool) -> None:
    """Scan a single note once."""
    context = build_runtime_context(notifier=NullNotifier() if quiet else None)
    result = asyncio.run(process_path(context, note))

    if result is None:
        click.echo(f"Not a Markdown note: {note}")
        sys.exit(1)

    click.echo(
        f"{len(result.created)} created, {len(result.failed)} failed"
        + (" (note updated)" if result.changed else "")
    )
    if result.error is not None:
        sys.exit(1)


@cli.command()
def auth() -> None:
    """Run the Google consent flow and cache a fresh token pair."""
    context = build_runtime_context()
    try:
        asyncio.run(authorize(context))
    except TokenAcquisitionError as e:
        logger.error("Authorization failed", error=str(e))
        click.echo(f"Authorization failed: {e}")
        sys.exit(1)


@cli.command()
def logout() -> None:
    """Forget cached tokens; the next event line triggers a new consent."""
    context = build_runtime_context()
    context.token_manager.clear()
    click.echo("Cached Google tokens removed.")


@cli.group()
def config() -> None:
    """Show or edit the Google OAuth client settings."""


@config.command("show")
def config_show() -> None:
    """Print the effective client settings (secret masked)."""
    settings = get_settings()
    credentials = resolve_credentials(
        settings, PluginSettingsStore(settings.settings_file)
    )
    secret = credentials.client_secret.get_secret_value()

    click.echo(f"Client ID:     {credentials.client_id or '(not set)'}")
    click.echo(f"Client secret: {'********' if secret else '(not set)'}")
    click.echo(f"Redirect URI:  {credentials.redirect_uri}")
    click.echo(f"Settings file: {settings.settings_file}")


@config.command("set")
@click.argument("key", type=click.Choice(sorted(SETTING_KEYS)))
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Persist one client setting immediately."""
    store = PluginSettingsStore(get_settings().settings_file)
    store.update(**{SETTING_KEYS[key]: value})
    click.echo(f"Saved {key}.")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
